"""
Evaluation repository.

Persistence for finalized evaluations using SQLAlchemy Async. The single
write path relies on the ``uq_evaluations_lesson_id`` constraint for the
one-evaluation-per-lesson rule and translates its violation to
``ConflictError``.
"""

import datetime
from typing import List, Optional, Tuple

from sqlalchemy import exists, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.exceptions import ConflictError, DatabaseError
from examsheet.common.logger import app_logger, log_execution_time
from examsheet.evaluations.models import Evaluation, ExamTemplate
from examsheet.registry.models import Enrollment, Lesson

logger = app_logger.getChild("evaluations.repository")


class EvaluationRepository:
    """Stores and queries evaluations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, evaluation: Evaluation) -> Evaluation:
        """
        Insert a new evaluation and commit.

        Args:
            evaluation: Fully scored evaluation

        Returns:
            The stored evaluation with its identifier assigned

        Raises:
            ConflictError: If an evaluation already exists for the lesson
            DatabaseError: If the insert fails for any other reason
        """
        lesson_id = evaluation.lesson_id
        try:
            self.session.add(evaluation)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self.exists_for_lesson(lesson_id):
                logger.warning(f"Evaluation for lesson {lesson_id} already exists")
                raise ConflictError("Evaluation", f"lesson {lesson_id}") from e
            logger.error(f"Integrity error storing evaluation for lesson {lesson_id}: {e}")
            raise DatabaseError("failed to store evaluation", e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error storing evaluation for lesson {lesson_id}: {e}")
            raise DatabaseError("failed to store evaluation", e) from e

        return evaluation

    async def get(self, evaluation_id: int) -> Optional[Evaluation]:
        return await self.session.get(Evaluation, evaluation_id)

    async def get_for_lesson(self, lesson_id: int) -> Optional[Evaluation]:
        stmt = select(Evaluation).where(Evaluation.lesson_id == lesson_id)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def exists_for_lesson(self, lesson_id: int) -> bool:
        stmt = select(exists().where(Evaluation.lesson_id == lesson_id))
        return bool((await self.session.execute(stmt)).scalar())

    @log_execution_time(logger)
    async def list_for_student(
        self,
        student_id: str,
        date_from: Optional[datetime.date] = None,
        date_to: Optional[datetime.date] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[int, List[tuple]]:
        """
        List a student's evaluations, most recent lesson first.

        Args:
            student_id: Student user identifier
            date_from: Inclusive lower bound on the lesson date
            date_to: Inclusive upper bound on the lesson date
            offset: Rows to skip
            limit: Maximum rows to return

        Returns:
            Tuple of (total matching rows, page rows). Each row carries
            ``id``, ``date``, ``total_points``, ``max_points`` and ``result``.
        """
        stmt = (
            select(
                Evaluation.id,
                Lesson.date,
                Evaluation.total_points,
                ExamTemplate.max_points,
                Evaluation.result,
            )
            .join(Lesson, Evaluation.lesson_id == Lesson.id)
            .join(Enrollment, Lesson.enrollment_id == Enrollment.id)
            .join(ExamTemplate, Evaluation.template_id == ExamTemplate.id)
            .where(Enrollment.student_id == student_id)
        )
        if date_from is not None:
            stmt = stmt.where(Lesson.date >= date_from)
        if date_to is not None:
            stmt = stmt.where(Lesson.date <= date_to)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()

        page_stmt = (
            stmt.order_by(Lesson.date.desc(), Evaluation.id.desc())
            .offset(offset)
            .limit(limit)
        )
        rows = (await self.session.execute(page_stmt)).all()

        return total, list(rows)
