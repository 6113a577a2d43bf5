"""
Fixtures for the exam sheet tests.

Every test gets its own SQLite database file with the registry rows from
``helpers`` and the default templates seeded.
"""

from dataclasses import dataclass
from typing import Dict

import httpx
import pytest_asyncio

from examsheet.database.init_db import (
    close_database,
    create_schema,
    get_session_factory,
    initialize_database,
)
from examsheet.evaluations.schemas import TemplateView
from examsheet.evaluations.seed import seed_templates
from examsheet.evaluations.templates import TemplateStore
from examsheet.registry.models import Enrollment, Lesson, License, User
from examsheet.tests import helpers


@dataclass
class SeededTemplate:
    template: TemplateView
    item_ids: Dict[str, int]

    def item_id(self, description: str) -> int:
        return self.item_ids[description]


def registry_rows():
    users = [
        User(id=helpers.INSTRUCTOR, first_name="Ion", last_name="Popescu", school_id=helpers.SCHOOL),
        User(id=helpers.OTHER_INSTRUCTOR, first_name="Maria", last_name="Ionescu", school_id=helpers.SCHOOL),
        User(id=helpers.STUDENT, first_name="Andrei", last_name="Dumitru", school_id=helpers.SCHOOL),
        User(id=helpers.OTHER_STUDENT, first_name="Elena", last_name="Stan", school_id=helpers.SCHOOL),
        User(id=helpers.FOREIGN_STUDENT, first_name="Mihai", last_name="Radu",
             school_id=helpers.FOREIGN_SCHOOL),
        User(id=helpers.ADMIN, first_name="Ana", last_name="Marin", school_id=helpers.SCHOOL),
        User(id=helpers.FOREIGN_ADMIN, first_name="Dan", last_name="Voicu",
             school_id=helpers.FOREIGN_SCHOOL),
    ]
    licenses = [
        License(id=helpers.LICENSE_B, type="B"),
        License(id=helpers.LICENSE_C, type="C"),
    ]
    enrollments = [
        Enrollment(id=enrollment_id, student_id=student_id, instructor_id=instructor_id,
                   license_id=license_id, status="Active")
        for enrollment_id, (student_id, instructor_id, license_id) in helpers.ENROLLMENTS.items()
    ]
    lessons = [
        Lesson(id=lesson_id, date=helpers.LESSON_DATE, enrollment_id=enrollment_id)
        for lesson_id, enrollment_id in helpers.LESSONS.items()
    ]
    return users, licenses, enrollments, lessons


@pytest_asyncio.fixture
async def database(tmp_path):
    """Initialize a fresh database with the schema and registry rows."""
    await initialize_database(f"sqlite+aiosqlite:///{tmp_path / 'examsheet.db'}")
    await create_schema()

    users, licenses, enrollments, lessons = registry_rows()
    async with get_session_factory()() as session:
        session.add_all(users + licenses)
        await session.flush()
        session.add_all(enrollments)
        await session.flush()
        session.add_all(lessons)
        await session.commit()

    yield get_session_factory()

    await close_database()


@pytest_asyncio.fixture
async def seeded_template(database) -> SeededTemplate:
    """Seed the default templates and return the category B template."""
    async with database() as session:
        await seed_templates(session)

    async with database() as session:
        template = await TemplateStore(session).get_template_by_license(helpers.LICENSE_B)

    return SeededTemplate(
        template=template,
        item_ids={item.description: item.id for item in template.items},
    )


@pytest_asyncio.fixture
async def session(database, seeded_template):
    """Session on the seeded database."""
    async with database() as session:
        yield session


@pytest_asyncio.fixture
async def client(database, seeded_template):
    """HTTP client over the application; the database is already initialized."""
    from examsheet import create_app

    app = create_app()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
