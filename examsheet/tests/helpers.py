"""
Shared test data for the exam sheet tests.

Two schools. School 1 has instructors INSTRUCTOR/OTHER_INSTRUCTOR, students
STUDENT/OTHER_STUDENT and admin ADMIN; school 2 has FOREIGN_STUDENT and
FOREIGN_ADMIN.
"""

import datetime

from examsheet.common.auth import AuthenticatedUser, UserRole, create_access_token

SCHOOL = 1
FOREIGN_SCHOOL = 2

INSTRUCTOR = "instructor-1"
OTHER_INSTRUCTOR = "instructor-2"
STUDENT = "student-1"
OTHER_STUDENT = "student-2"
FOREIGN_STUDENT = "student-3"
ADMIN = "admin-1"
FOREIGN_ADMIN = "admin-2"

LICENSE_B = 1
LICENSE_C = 2  # no template seeded

# enrollment id -> (student, instructor, license)
ENROLLMENTS = {
    1: (STUDENT, INSTRUCTOR, LICENSE_B),
    2: (OTHER_STUDENT, OTHER_INSTRUCTOR, LICENSE_B),
    3: (STUDENT, None, LICENSE_B),
    4: (FOREIGN_STUDENT, INSTRUCTOR, LICENSE_C),
    5: (OTHER_STUDENT, INSTRUCTOR, None),
}

LESSON = 1
OTHER_LESSON = 2
UNASSIGNED_LESSON = 3
NO_TEMPLATE_LESSON = 4
NO_LICENSE_LESSON = 5
ORPHAN_LESSON = 6
MISSING_LESSON = 999

# lesson id -> enrollment id
LESSONS = {
    LESSON: 1,
    OTHER_LESSON: 2,
    UNASSIGNED_LESSON: 3,
    NO_TEMPLATE_LESSON: 4,
    NO_LICENSE_LESSON: 5,
    ORPHAN_LESSON: None,
}

LESSON_DATE = datetime.date(2025, 3, 14)

# Default template items, by description
STARTING = "Pornire și oprire corectă"   # 3 points
TRAFFIC_RULES = "Respectarea regulilor de circulație"  # 5 points
SIGNALLING = "Semnalizare"  # 2 points
PARKING = "Parcare"  # 3 points


def instructor(user_id: str = INSTRUCTOR, school_id: int = SCHOOL) -> AuthenticatedUser:
    return AuthenticatedUser(user_id=user_id, role=UserRole.INSTRUCTOR, school_id=school_id)


def student(user_id: str = STUDENT, school_id: int = SCHOOL) -> AuthenticatedUser:
    return AuthenticatedUser(user_id=user_id, role=UserRole.STUDENT, school_id=school_id)


def admin(user_id: str = ADMIN, school_id: int = SCHOOL) -> AuthenticatedUser:
    return AuthenticatedUser(user_id=user_id, role=UserRole.SCHOOL_ADMIN, school_id=school_id)


def bearer(user_id: str, role: str, school_id: int = SCHOOL) -> dict:
    """Authorization header for a freshly minted token."""
    token = create_access_token(user_id, role=role, school_id=school_id)
    return {"Authorization": f"Bearer {token}"}
