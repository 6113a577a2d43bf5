"""
Exam Template Store

Read-only access to the seeded exam templates. Templates are immutable, so
lookups need no locking and have no side effects.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.exceptions import InvalidArgumentError, NotFoundError
from examsheet.common.logger import app_logger
from examsheet.evaluations.models import ExamTemplate
from examsheet.evaluations.schemas import TemplateView

logger = app_logger.getChild("evaluations.templates")


class TemplateStore:
    """Looks up exam templates and their items."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_template_by_license(self, license_id: int) -> TemplateView:
        """
        Get the template seeded for a licence category.

        Args:
            license_id: Licence category identifier

        Returns:
            The template with its items ordered by display order

        Raises:
            InvalidArgumentError: If the identifier is not positive
            NotFoundError: If no template exists for the licence
        """
        if license_id is None or license_id <= 0:
            raise InvalidArgumentError("License ID must be a positive integer.", field="licenseId")

        stmt = select(ExamTemplate).where(ExamTemplate.license_id == license_id)
        template = (await self.session.execute(stmt)).scalar_one_or_none()
        if template is None:
            logger.info(f"No exam template seeded for license {license_id}")
            raise NotFoundError("Exam template for license", license_id)

        return TemplateView.from_orm(template)

    async def get_template(self, template_id: int) -> TemplateView:
        """
        Get a template by its own identifier.

        Raises:
            InvalidArgumentError: If the identifier is not positive
            NotFoundError: If the template does not exist
        """
        if template_id is None or template_id <= 0:
            raise InvalidArgumentError("Template ID must be a positive integer.", field="templateId")

        template = await self.session.get(ExamTemplate, template_id)
        if template is None:
            raise NotFoundError("Exam template", template_id)

        return TemplateView.from_orm(template)
