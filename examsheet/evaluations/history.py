"""
History Query Service

Paginated, date-filtered listing of a student's evaluations, most recent
lesson first.
"""

import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.auth.user import AuthenticatedUser
from examsheet.common.exceptions import InvalidArgumentError, NotFoundError
from examsheet.common.logger import app_logger
from examsheet.config import settings
from examsheet.evaluations.access import AccessContext, can_list_history, require
from examsheet.evaluations.repository import EvaluationRepository
from examsheet.evaluations.schemas import EvaluationHistoryItem, PagedResult
from examsheet.registry.repository import LessonRegistry, SqlLessonRegistry

logger = app_logger.getChild("evaluations.history")


class EvaluationHistoryService:
    """Lists evaluations recorded for a student."""

    def __init__(
        self,
        session: AsyncSession,
        registry: Optional[LessonRegistry] = None,
        repository: Optional[EvaluationRepository] = None,
        max_page_size: int = settings.HISTORY_MAX_PAGE_SIZE,
    ):
        self.registry = registry or SqlLessonRegistry(session)
        self.repository = repository or EvaluationRepository(session)
        self.max_page_size = max_page_size

    async def list(
        self,
        student_id: str,
        caller: AuthenticatedUser,
        date_from: Optional[datetime.date] = None,
        date_to: Optional[datetime.date] = None,
        page: int = 1,
        page_size: int = settings.HISTORY_DEFAULT_PAGE_SIZE,
    ) -> PagedResult[EvaluationHistoryItem]:
        """
        List a student's evaluations.

        Args:
            student_id: Student whose history is listed
            caller: Authenticated caller
            date_from: Inclusive lower bound on the lesson date
            date_to: Inclusive upper bound on the lesson date
            page: 1-based page number
            page_size: Items per page

        Returns:
            The requested page and the total number of matching evaluations

        Raises:
            InvalidArgumentError: Out-of-range paging or an inverted date range
            NotFoundError: If the student does not exist
            ForbiddenError: If the caller may not see the student's history
        """
        if page < 1:
            raise InvalidArgumentError("page must be at least 1.", field="page")
        if page_size < 1 or page_size > self.max_page_size:
            raise InvalidArgumentError(
                f"pageSize must be between 1 and {self.max_page_size}.", field="pageSize"
            )
        if date_from is not None and date_to is not None and date_from > date_to:
            raise InvalidArgumentError("from must not be later than to.", field="from")

        student = await self.registry.get_user(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)

        teaches = False
        if caller.is_instructor:
            teaches = await self.registry.instructor_teaches_student(caller.user_id, student_id)
        require(
            can_list_history(AccessContext.for_student(caller, student), teaches_student=teaches),
            "list the evaluations of",
            "student",
        )

        total, rows = await self.repository.list_for_student(
            student_id,
            date_from=date_from,
            date_to=date_to,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        logger.debug(f"History for student {student_id}: page {page}, {len(rows)} of {total} evaluations")

        return PagedResult[EvaluationHistoryItem](
            page=page,
            page_size=page_size,
            total=total,
            items=[
                EvaluationHistoryItem(
                    id=row.id,
                    date=row.date,
                    total_points=row.total_points,
                    max_points=row.max_points,
                    result=row.result,
                )
                for row in rows
            ],
        )
