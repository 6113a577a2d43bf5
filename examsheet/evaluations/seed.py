"""
Exam template bootstrap.

Templates are reference data loaded once by a deployment step
(``python -m examsheet.scripts.init_db``). Seeding only inserts what is
missing and never changes existing rows, so it can be re-run safely.
"""

from dataclasses import dataclass, field
from typing import Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.logger import app_logger
from examsheet.evaluations.models import ExamTemplate, TemplateItem
from examsheet.registry.models import License

logger = app_logger.getChild("evaluations.seed")


@dataclass(frozen=True)
class TemplateDefinition:
    """Template for one licence category: budget plus (description, penalty) items in order."""
    license_type: str
    max_points: int
    items: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)


DEFAULT_TEMPLATES: Tuple[TemplateDefinition, ...] = (
    TemplateDefinition(
        license_type="B",
        max_points=21,
        items=(
            ("Pornire și oprire corectă", 3),
            ("Respectarea regulilor de circulație", 5),
            ("Semnalizare", 2),
            ("Parcare", 3),
        ),
    ),
)


@dataclass
class SeedReport:
    templates_created: int = 0
    items_created: int = 0
    skipped_licenses: Tuple[str, ...] = ()


async def seed_templates(
    session: AsyncSession,
    definitions: Sequence[TemplateDefinition] = DEFAULT_TEMPLATES,
) -> SeedReport:
    """
    Insert the given templates and their items where they are missing.

    Existing templates and items are left untouched. Definitions whose
    licence category does not exist in the registry are skipped.

    Args:
        session: Database session; committed on success
        definitions: Templates to ensure

    Returns:
        Counts of inserted rows and the licence types that were skipped
    """
    report = SeedReport()
    skipped = []

    for definition in definitions:
        license_id = (await session.execute(
            select(License.id).where(License.type == definition.license_type)
        )).scalar_one_or_none()
        if license_id is None:
            logger.warning(f"License type {definition.license_type!r} not registered; skipping its template")
            skipped.append(definition.license_type)
            continue

        template = (await session.execute(
            select(ExamTemplate).where(ExamTemplate.license_id == license_id)
        )).scalar_one_or_none()
        if template is None:
            template = ExamTemplate(license_id=license_id, max_points=definition.max_points)
            session.add(template)
            await session.flush()
            report.templates_created += 1
            existing = set()
        else:
            existing = set((await session.execute(
                select(TemplateItem.description).where(TemplateItem.template_id == template.id)
            )).scalars().all())

        for position, (description, penalty) in enumerate(definition.items, start=1):
            if description in existing:
                continue
            session.add(TemplateItem(
                template_id=template.id,
                description=description,
                penalty_points=penalty,
                order_index=position,
            ))
            report.items_created += 1

    await session.commit()
    report.skipped_licenses = tuple(skipped)

    logger.info(
        f"Template seed finished: {report.templates_created} templates, "
        f"{report.items_created} items created"
    )
    return report
