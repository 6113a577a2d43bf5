"""
SQLAlchemy ORM models for the enrollment / lesson registry.

These tables are owned by the school management system; the evaluation
service only reads them. The columns declared here are the subset the
evaluation workflow needs:
- User: students, instructors and school administrators
- License: a driving licence category (B, C, ...)
- Enrollment: a student's file for one category, with its assigned instructor
- Lesson: a scheduled instructor/student session
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Time

from examsheet.database.base import ModelBase


class User(ModelBase):
    """Account holder of any role."""
    __tablename__ = 'users'

    id = Column(String(450), primary_key=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    school_id = Column(Integer, nullable=True, index=True)


class License(ModelBase):
    """Licence category an enrollment trains for."""
    __tablename__ = 'licenses'

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(10), nullable=False, unique=True)


class Enrollment(ModelBase):
    """
    A student's registration in a teaching category.

    The instructor is nullable until the school assigns one.
    """
    __tablename__ = 'enrollments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(String(450), ForeignKey('users.id'), nullable=False, index=True)
    instructor_id = Column(String(450), ForeignKey('users.id'), nullable=True, index=True)
    license_id = Column(Integer, ForeignKey('licenses.id'), nullable=True)
    status = Column(String(50), nullable=False, default="Active")


class Lesson(ModelBase):
    """Scheduled driving lesson."""
    __tablename__ = 'lessons'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    enrollment_id = Column(Integer, ForeignKey('enrollments.id'), nullable=True, index=True)
