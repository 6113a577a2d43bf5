"""
Enrollment / Lesson Registry

Read-only access to the lessons, enrollments and users maintained by the
school management system.
"""

from examsheet.registry.repository import (
    EnrollmentRecord,
    LessonRecord,
    LessonRegistry,
    Person,
    SqlLessonRegistry,
)

__all__ = [
    'EnrollmentRecord',
    'LessonRecord',
    'LessonRegistry',
    'Person',
    'SqlLessonRegistry',
]
