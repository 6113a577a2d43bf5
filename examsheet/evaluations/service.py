"""
Session Evaluation Engine

Creates, scores and serves the single evaluation recorded for a lesson.

Submission is one all-or-nothing step: every validation and authorization
check runs before the only write, and the write itself is guarded by the
storage uniqueness constraint on the lesson.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.auth.user import AuthenticatedUser
from examsheet.common.exceptions import BaseError, ConflictError, InvalidArgumentError, NotFoundError
from examsheet.common.logger import LoggerAdapter, app_logger
from examsheet.evaluations.access import AccessContext, can_submit, can_view, require
from examsheet.evaluations.models import Evaluation, EvaluationResult, utcnow
from examsheet.evaluations.repository import EvaluationRepository
from examsheet.evaluations.schemas import (
    MAX_MISTAKE_COUNT,
    EvaluationDetail,
    MistakeBreakdown,
    MistakeEntry,
    MistakeList,
    SubmitEvaluationResponse,
    TemplateView,
)
from examsheet.evaluations.templates import TemplateStore
from examsheet.registry.repository import LessonRecord, LessonRegistry, SqlLessonRegistry

logger = app_logger.getChild("evaluations.service")

# Range of the total_points column
MAX_TOTAL_POINTS = 2 ** 31 - 1


def validate_mistakes(template: TemplateView, mistakes: Sequence[MistakeEntry]) -> List[MistakeEntry]:
    """
    Check a mistake list against a template.

    Args:
        template: Template the lesson is scored with
        mistakes: Entries as submitted

    Returns:
        The entries in submitted order with zero counts dropped

    Raises:
        InvalidArgumentError: On a non-positive id, a count out of range, a
            repeated item or an item that is not on the template
    """
    seen = set()
    kept = []
    for entry in mistakes:
        if entry.item_id <= 0:
            raise InvalidArgumentError("Item IDs must be positive integers.", field="mistakes")
        if entry.count < 0 or entry.count > MAX_MISTAKE_COUNT:
            raise InvalidArgumentError(
                f"Count for item {entry.item_id} must be between 0 and {MAX_MISTAKE_COUNT}.",
                field="mistakes",
            )
        if entry.item_id in seen:
            raise InvalidArgumentError(f"Item {entry.item_id} is listed more than once.", field="mistakes")
        seen.add(entry.item_id)

        if template.item(entry.item_id) is None:
            raise InvalidArgumentError(
                f"Item {entry.item_id} does not belong to the exam template for this lesson.",
                field="mistakes",
            )
        if entry.count > 0:
            kept.append(entry)

    return kept


def compute_score(template: TemplateView, mistakes: Sequence[MistakeEntry]) -> Tuple[int, EvaluationResult]:
    """
    Score validated mistakes against the template budget.

    Returns:
        Tuple of (total penalty points, result)

    Raises:
        InvalidArgumentError: If the total does not fit the stored column
    """
    weights = {item.id: item.penalty_points for item in template.items}
    total = sum(entry.count * weights[entry.item_id] for entry in mistakes)
    if total > MAX_TOTAL_POINTS:
        raise InvalidArgumentError(
            f"Total of {total} penalty points exceeds the supported maximum of {MAX_TOTAL_POINTS}.",
            field="mistakes",
        )
    result = EvaluationResult.OK if total <= template.max_points else EvaluationResult.FAILED
    return total, result


class EvaluationService:
    """Submits and reads lesson evaluations."""

    def __init__(
        self,
        session: AsyncSession,
        registry: Optional[LessonRegistry] = None,
        templates: Optional[TemplateStore] = None,
        repository: Optional[EvaluationRepository] = None,
    ):
        self.registry = registry or SqlLessonRegistry(session)
        self.templates = templates or TemplateStore(session)
        self.repository = repository or EvaluationRepository(session)

    async def submit(
        self,
        lesson_id: int,
        mistakes: Sequence[MistakeEntry],
        caller: AuthenticatedUser,
        expected_max_points: Optional[int] = None,
    ) -> SubmitEvaluationResponse:
        """
        Validate, score and persist the evaluation of a lesson.

        Args:
            lesson_id: Lesson being evaluated
            mistakes: Observed mistakes as (item, count) entries
            caller: Authenticated caller; must be the assigned instructor
            expected_max_points: Budget the caller scored against, if any

        Returns:
            The stored evaluation's id, total, budget and result

        Raises:
            InvalidArgumentError: Bad identifier, mistake list or budget
            NotFoundError: Lesson, enrollment, licence or template missing
            ForbiddenError: Caller is not the enrollment's instructor
            ConflictError: The lesson already has an evaluation
        """
        log = LoggerAdapter(logger, {"lesson_id": lesson_id, "caller": caller.user_id})
        try:
            response = await self._submit(lesson_id, mistakes, caller, expected_max_points)
        except BaseError as e:
            log.warning(f"Evaluation rejected: {type(e).__name__}: {e.message}")
            raise

        log.info(
            f"Evaluation {response.id} recorded: {response.total_points}/{response.max_points} "
            f"points, {response.result.value}"
        )
        return response

    async def _submit(
        self,
        lesson_id: int,
        mistakes: Sequence[MistakeEntry],
        caller: AuthenticatedUser,
        expected_max_points: Optional[int],
    ) -> SubmitEvaluationResponse:
        if lesson_id is None or lesson_id <= 0:
            raise InvalidArgumentError("Lesson ID must be a positive integer.", field="lessonId")

        lesson = await self._require_lesson(lesson_id)
        enrollment = lesson.enrollment
        if enrollment.license_id is None:
            raise NotFoundError("License for enrollment", enrollment.id)
        template = await self.templates.get_template_by_license(enrollment.license_id)

        require(can_submit(AccessContext.for_enrollment(caller, enrollment)), "submit an evaluation for", "lesson")

        # Early answer only; the unique constraint still decides a race in add()
        if await self.repository.exists_for_lesson(lesson_id):
            raise ConflictError("Evaluation", f"lesson {lesson_id}")

        entries = validate_mistakes(template, mistakes)
        if expected_max_points is not None and expected_max_points != template.max_points:
            raise InvalidArgumentError(
                f"maxPoints {expected_max_points} does not match the template budget "
                f"of {template.max_points}.",
                field="maxPoints",
            )

        total, result = compute_score(template, entries)
        now = utcnow()
        evaluation = await self.repository.add(Evaluation(
            lesson_id=lesson_id,
            template_id=template.id,
            mistakes_json=MistakeList.encode(entries),
            total_points=total,
            result=result.value,
            created_at=now,
            finalized_at=now,
        ))

        return SubmitEvaluationResponse(
            id=evaluation.id,
            total_points=total,
            max_points=template.max_points,
            result=result,
        )

    async def get(self, evaluation_id: int, caller: AuthenticatedUser) -> EvaluationDetail:
        """
        Detailed view of an evaluation.

        Raises:
            InvalidArgumentError: If the identifier is not positive
            NotFoundError: If the evaluation does not exist
            ForbiddenError: If the caller has no relationship to the lesson
        """
        if evaluation_id is None or evaluation_id <= 0:
            raise InvalidArgumentError("Evaluation ID must be a positive integer.", field="id")

        evaluation = await self.repository.get(evaluation_id)
        if evaluation is None:
            raise NotFoundError("Evaluation", evaluation_id)

        lesson = await self._require_lesson(evaluation.lesson_id)
        enrollment = lesson.enrollment
        student = await self.registry.get_user(enrollment.student_id)

        allowed = can_view(AccessContext.for_enrollment(caller, enrollment, student))
        if not allowed:
            LoggerAdapter(logger, {"evaluation_id": evaluation_id, "caller": caller.user_id}).warning(
                "Evaluation access denied"
            )
        require(allowed, "view", "evaluation")

        instructor = None
        if enrollment.instructor_id:
            instructor = await self.registry.get_user(enrollment.instructor_id)
        template = await self.templates.get_template(evaluation.template_id)

        return EvaluationDetail(
            id=evaluation.id,
            lesson_id=lesson.id,
            lesson_date=lesson.date,
            student_name=student.full_name if student else None,
            instructor_name=instructor.full_name if instructor else None,
            total_points=evaluation.total_points,
            max_points=template.max_points,
            result=evaluation.result,
            created_at=evaluation.created_at,
            finalized_at=evaluation.finalized_at,
            mistakes=self._breakdown(template, MistakeList.decode(evaluation.mistakes_json)),
        )

    async def _require_lesson(self, lesson_id: int) -> LessonRecord:
        lesson = await self.registry.get_lesson(lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)
        if lesson.enrollment is None:
            raise NotFoundError("Enrollment for lesson", lesson_id)
        return lesson

    @staticmethod
    def _breakdown(template: TemplateView, entries: Sequence[MistakeEntry]) -> List[MistakeBreakdown]:
        counts: Dict[int, int] = {entry.item_id: entry.count for entry in entries}
        return [
            MistakeBreakdown(
                item_id=item.id,
                description=item.description,
                count=counts[item.id],
                penalty_points=item.penalty_points,
            )
            for item in template.items
            if item.id in counts
        ]
