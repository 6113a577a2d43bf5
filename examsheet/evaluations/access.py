"""
Access Control Gate

Authorization for evaluation operations. The ownership chain
(lesson -> enrollment -> student / instructor / school) is resolved once per
request into an ``AccessContext``; the policy itself is a set of pure
functions over that context.

| Role         | Relationship                     | submit | get | history |
|--------------|----------------------------------|--------|-----|---------|
| Instructor   | assigned instructor              | yes    | yes | yes     |
| Student      | the enrollment's student         | no     | yes | yes     |
| SchoolAdmin  | same school as the student       | no     | yes | yes     |
| anything else|                                  | no     | no  | no      |
"""

from dataclasses import dataclass
from typing import Optional

from examsheet.common.auth.user import AuthenticatedUser, UserRole
from examsheet.common.exceptions import ForbiddenError
from examsheet.registry.repository import EnrollmentRecord, Person


@dataclass(frozen=True)
class AccessContext:
    """Caller identity together with the ownership chain of the target."""
    caller_id: str
    caller_role: Optional[UserRole]
    caller_school_id: Optional[int]
    student_id: Optional[str]
    instructor_id: Optional[str] = None
    student_school_id: Optional[int] = None

    @classmethod
    def for_enrollment(
        cls,
        caller: AuthenticatedUser,
        enrollment: EnrollmentRecord,
        student: Optional[Person] = None,
    ) -> "AccessContext":
        return cls(
            caller_id=caller.user_id,
            caller_role=caller.role,
            caller_school_id=caller.school_id,
            student_id=enrollment.student_id,
            instructor_id=enrollment.instructor_id,
            student_school_id=student.school_id if student else None,
        )

    @classmethod
    def for_student(cls, caller: AuthenticatedUser, student: Person) -> "AccessContext":
        return cls(
            caller_id=caller.user_id,
            caller_role=caller.role,
            caller_school_id=caller.school_id,
            student_id=student.id,
            student_school_id=student.school_id,
        )

    @property
    def is_assigned_instructor(self) -> bool:
        return (
            self.caller_role == UserRole.INSTRUCTOR
            and self.instructor_id is not None
            and self.instructor_id == self.caller_id
        )

    @property
    def is_own_student_record(self) -> bool:
        return (
            self.caller_role == UserRole.STUDENT
            and self.student_id is not None
            and self.student_id == self.caller_id
        )

    @property
    def is_same_school_admin(self) -> bool:
        return (
            self.caller_role == UserRole.SCHOOL_ADMIN
            and self.caller_school_id is not None
            and self.caller_school_id == self.student_school_id
        )


def can_submit(ctx: AccessContext) -> bool:
    return ctx.is_assigned_instructor


def can_view(ctx: AccessContext) -> bool:
    return ctx.is_assigned_instructor or ctx.is_own_student_record or ctx.is_same_school_admin


def can_list_history(ctx: AccessContext, teaches_student: bool = False) -> bool:
    """
    History access for a student.

    ``teaches_student`` tells whether any enrollment of the student is
    assigned to the calling instructor; the context carries no single
    enrollment here.
    """
    if ctx.caller_role == UserRole.INSTRUCTOR:
        return teaches_student
    return ctx.is_own_student_record or ctx.is_same_school_admin


def require(allowed: bool, action: str, resource: str) -> None:
    """
    Raise ``ForbiddenError`` unless the policy allowed the action.

    Raises:
        ForbiddenError: If ``allowed`` is false
    """
    if not allowed:
        raise ForbiddenError(
            f"You are not allowed to {action} this {resource}.",
            resource=resource,
            action=action,
        )
