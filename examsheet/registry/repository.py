"""
Enrollment / Lesson Registry

This module defines the read-only interface the evaluation workflow uses to
resolve lessons, enrollments and people, and its SQLAlchemy implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import datetime
from typing import Optional

from sqlalchemy import and_, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.logger import app_logger
from examsheet.registry.models import Enrollment, Lesson, User

logger = app_logger.getChild("registry")


@dataclass(frozen=True)
class Person:
    """A user as seen by the evaluation workflow."""
    id: str
    first_name: str
    last_name: str
    school_id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class EnrollmentRecord:
    """Enrollment linking a student, an instructor and a licence category."""
    id: int
    student_id: str
    instructor_id: Optional[str]
    license_id: Optional[int]
    status: str


@dataclass(frozen=True)
class LessonRecord:
    """A scheduled lesson and, when it has one, its enrollment."""
    id: int
    date: datetime.date
    start_time: Optional[datetime.time] = None
    end_time: Optional[datetime.time] = None
    enrollment: Optional[EnrollmentRecord] = None


class LessonRegistry(ABC):
    """
    Abstract read interface over the lesson registry.

    Implementations never write; the registry is owned by the school
    management system.
    """

    @abstractmethod
    async def get_lesson(self, lesson_id: int) -> Optional[LessonRecord]:
        """
        Retrieve a lesson together with its enrollment.

        Args:
            lesson_id: Lesson identifier

        Returns:
            The lesson if found, None otherwise. ``enrollment`` is None when
            the lesson references no existing enrollment.
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[Person]:
        """
        Retrieve a user by identifier.

        Args:
            user_id: User identifier

        Returns:
            The person if found, None otherwise
        """
        pass

    @abstractmethod
    async def instructor_teaches_student(self, instructor_id: str, student_id: str) -> bool:
        """
        Check whether any enrollment of the student is assigned to the instructor.

        Args:
            instructor_id: Instructor user identifier
            student_id: Student user identifier

        Returns:
            True if at least one such enrollment exists
        """
        pass


def _to_person(user: User) -> Person:
    return Person(
        id=user.id,
        first_name=user.first_name or "",
        last_name=user.last_name or "",
        school_id=user.school_id,
    )


def _to_enrollment(enrollment: Enrollment) -> EnrollmentRecord:
    return EnrollmentRecord(
        id=enrollment.id,
        student_id=enrollment.student_id,
        instructor_id=enrollment.instructor_id,
        license_id=enrollment.license_id,
        status=enrollment.status,
    )


class SqlLessonRegistry(LessonRegistry):
    """Lesson registry backed by the shared relational database."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_lesson(self, lesson_id: int) -> Optional[LessonRecord]:
        stmt = (
            select(Lesson, Enrollment)
            .outerjoin(Enrollment, Lesson.enrollment_id == Enrollment.id)
            .where(Lesson.id == lesson_id)
        )
        row = (await self.session.execute(stmt)).first()
        if row is None:
            logger.debug(f"Lesson {lesson_id} not found")
            return None

        lesson, enrollment = row
        return LessonRecord(
            id=lesson.id,
            date=lesson.date,
            start_time=lesson.start_time,
            end_time=lesson.end_time,
            enrollment=_to_enrollment(enrollment) if enrollment is not None else None,
        )

    async def get_user(self, user_id: str) -> Optional[Person]:
        if not user_id:
            return None
        user = await self.session.get(User, user_id)
        return _to_person(user) if user is not None else None

    async def instructor_teaches_student(self, instructor_id: str, student_id: str) -> bool:
        stmt = select(
            exists().where(
                and_(
                    Enrollment.student_id == student_id,
                    Enrollment.instructor_id == instructor_id,
                )
            )
        )
        return bool((await self.session.execute(stmt)).scalar())
