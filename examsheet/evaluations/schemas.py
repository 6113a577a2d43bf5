"""
Request, response and storage schemas for exam sheet evaluations.

Wire models use camelCase field names while Python code uses snake_case.
``MistakeList`` is the single codec for the stored mistake list.
"""

import datetime
from typing import Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field, conint
from pydantic.generics import GenericModel

from examsheet.evaluations.models import EvaluationResult

T = TypeVar('T')

# Upper bound on occurrences of one item in a single lesson
MAX_MISTAKE_COUNT = 1000


def to_camel(name: str) -> str:
    """Convert a snake_case field name to camelCase."""
    head, *tail = name.split('_')
    return head + ''.join(part.capitalize() for part in tail)


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    class Config:
        alias_generator = to_camel
        allow_population_by_field_name = True


class MistakeEntry(CamelModel):
    item_id: conint(strict=True, gt=0) = Field(..., description="Template item identifier")
    count: conint(strict=True, ge=0, le=MAX_MISTAKE_COUNT) = Field(..., description="Number of occurrences")


class MistakeList(BaseModel):
    """Ordered mistake list as stored in ``evaluations.mistakes_json``."""
    __root__: List[MistakeEntry] = Field(default_factory=list)

    @classmethod
    def encode(cls, entries: Sequence[MistakeEntry]) -> str:
        return cls(__root__=list(entries)).json(by_alias=True)

    @classmethod
    def decode(cls, raw: Optional[str]) -> List[MistakeEntry]:
        if not raw:
            return []
        return cls.parse_raw(raw).__root__


class SubmitEvaluationRequest(CamelModel):
    mistakes: List[MistakeEntry] = Field(default_factory=list, description="Observed mistakes")
    max_points: Optional[conint(strict=True, ge=0)] = Field(
        None, description="Expected point budget; must match the template when given"
    )


class SubmitEvaluationResponse(CamelModel):
    id: int = Field(..., description="Evaluation ID")
    total_points: int = Field(..., description="Sum of penalty points")
    max_points: int = Field(..., description="Template point budget")
    result: EvaluationResult = Field(..., description="OK or FAILED")


class MistakeBreakdown(CamelModel):
    item_id: int = Field(..., description="Template item identifier")
    description: str = Field(..., description="Item description")
    count: int = Field(..., description="Number of occurrences")
    penalty_points: int = Field(..., description="Penalty per occurrence")


class EvaluationDetail(CamelModel):
    id: int = Field(..., description="Evaluation ID")
    lesson_id: int = Field(..., description="Lesson ID")
    lesson_date: datetime.date = Field(..., description="Date of the lesson")
    student_name: Optional[str] = Field(None, description="Student display name")
    instructor_name: Optional[str] = Field(None, description="Instructor display name")
    total_points: Optional[int] = Field(None, description="Sum of penalty points")
    max_points: int = Field(..., description="Template point budget")
    result: Optional[EvaluationResult] = Field(None, description="OK or FAILED")
    created_at: datetime.datetime = Field(..., description="When the evaluation was created")
    finalized_at: Optional[datetime.datetime] = Field(None, description="When it was scored")
    mistakes: List[MistakeBreakdown] = Field(default_factory=list, description="Per item breakdown")


class EvaluationHistoryItem(CamelModel):
    id: int = Field(..., description="Evaluation ID")
    date: datetime.date = Field(..., description="Date of the lesson")
    total_points: Optional[int] = Field(None, description="Sum of penalty points")
    max_points: int = Field(..., description="Template point budget")
    result: Optional[EvaluationResult] = Field(None, description="OK or FAILED")


class PagedResult(GenericModel, Generic[T]):
    page: int
    page_size: int
    total: int
    items: List[T]

    class Config:
        alias_generator = to_camel
        allow_population_by_field_name = True


class TemplateItemView(CamelModel):
    id: int = Field(..., description="Item ID")
    description: str = Field(..., description="Item description")
    penalty_points: int = Field(..., description="Penalty per occurrence")
    order_index: int = Field(..., description="Display position")

    class Config:
        orm_mode = True


class TemplateView(CamelModel):
    id: int = Field(..., description="Template ID")
    license_id: int = Field(..., description="Licence category ID")
    max_points: int = Field(..., description="Maximum tolerated points")
    items: List[TemplateItemView] = Field(default_factory=list, description="Items in display order")

    class Config:
        orm_mode = True

    def item(self, item_id: int) -> Optional[TemplateItemView]:
        for entry in self.items:
            if entry.id == item_id:
                return entry
        return None
