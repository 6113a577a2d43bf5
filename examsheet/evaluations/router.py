"""
Evaluation API Router

HTTP endpoints for submitting and reading lesson evaluations, listing a
student's history and looking up exam templates.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from examsheet.common.auth import AuthenticatedUser, get_current_user
from examsheet.common.exceptions import InvalidArgumentError
from examsheet.common.logger import app_logger
from examsheet.config import settings
from examsheet.database.init_db import get_session
from examsheet.evaluations.history import EvaluationHistoryService
from examsheet.evaluations.schemas import (
    EvaluationDetail,
    EvaluationHistoryItem,
    PagedResult,
    SubmitEvaluationRequest,
    SubmitEvaluationResponse,
    TemplateView,
)
from examsheet.evaluations.service import EvaluationService
from examsheet.evaluations.templates import TemplateStore

logger = app_logger.getChild("evaluations.router")

router = APIRouter(tags=["Evaluations"])


def parse_date(value: Optional[str], name: str) -> Optional[datetime.date]:
    """Parse a ``YYYY-MM-DD`` query parameter."""
    if value is None or value == "":
        return None
    try:
        return datetime.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidArgumentError(f"{name} must be a date in YYYY-MM-DD format.", field=name)


@router.post(
    "/lessons/{lesson_id}/evaluations",
    response_model=SubmitEvaluationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_evaluation(
    request: SubmitEvaluationRequest,
    lesson_id: int = Path(..., description="Lesson being evaluated"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> SubmitEvaluationResponse:
    """
    Score and record the mistake sheet of a lesson.

    Only the enrollment's assigned instructor may submit, once per lesson.
    """
    service = EvaluationService(session)
    return await service.submit(
        lesson_id,
        request.mistakes,
        current_user,
        expected_max_points=request.max_points,
    )


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationDetail)
async def get_evaluation(
    evaluation_id: int = Path(..., description="Evaluation ID"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> EvaluationDetail:
    """Get an evaluation with its per-item mistake breakdown."""
    return await EvaluationService(session).get(evaluation_id, current_user)


@router.get(
    "/students/{student_id}/evaluations",
    response_model=PagedResult[EvaluationHistoryItem],
)
async def list_student_evaluations(
    student_id: str = Path(..., description="Student user ID"),
    date_from: Optional[str] = Query(None, alias="from", description="Inclusive start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, alias="to", description="Inclusive end date (YYYY-MM-DD)"),
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(settings.HISTORY_DEFAULT_PAGE_SIZE, alias="pageSize", description="Items per page"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> PagedResult[EvaluationHistoryItem]:
    """
    List a student's evaluations, most recent lesson first.

    Args:
        student_id: Student whose history is listed
        date_from: Inclusive lower bound on the lesson date
        date_to: Inclusive upper bound on the lesson date
        page: 1-based page number
        page_size: Items per page (at most 100)

    Returns:
        Paged result with the total number of matching evaluations
    """
    service = EvaluationHistoryService(session)
    return await service.list(
        student_id,
        current_user,
        date_from=parse_date(date_from, "from"),
        date_to=parse_date(date_to, "to"),
        page=page,
        page_size=page_size,
    )


@router.get("/templates/by-license/{license_id}", response_model=TemplateView)
async def get_template_by_license(
    license_id: int = Path(..., description="Licence category ID"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> TemplateView:
    """Get the exam template for a licence category, items in display order."""
    return await TemplateStore(session).get_template_by_license(license_id)
