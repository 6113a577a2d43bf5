"""
SQLAlchemy ORM models for exam sheet evaluations.

This module defines the database models for:
- ExamTemplate: the official sheet for one licence category and its point budget
- TemplateItem: one penalizable mistake on a template
- Evaluation: the scored, finalized sheet recorded for one lesson
"""

import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text,
    UniqueConstraint
)
from sqlalchemy.orm import relationship

from examsheet.database.base import ModelBase


class EvaluationResult(str, Enum):
    """Outcome of a scored evaluation."""
    OK = "OK"
    FAILED = "FAILED"


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class ExamTemplate(ModelBase):
    """
    Exam sheet for a licence category.

    Immutable once seeded; evaluations reference it by id.
    """
    __tablename__ = 'exam_templates'

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_id = Column(Integer, ForeignKey('licenses.id'), nullable=False)
    max_points = Column(Integer, nullable=False)

    items = relationship(
        "TemplateItem",
        back_populates="template",
        order_by="TemplateItem.order_index",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint('license_id'),
        CheckConstraint('max_points >= 0', name='max_points_non_negative'),
    )


class TemplateItem(ModelBase):
    """Penalizable mistake with its weight and display position."""
    __tablename__ = 'exam_template_items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(Integer, ForeignKey('exam_templates.id', ondelete='CASCADE'),
                         nullable=False, index=True)
    description = Column(String(500), nullable=False)
    penalty_points = Column(Integer, nullable=False)
    order_index = Column(Integer, nullable=False)

    template = relationship("ExamTemplate", back_populates="items")

    __table_args__ = (
        UniqueConstraint('template_id', 'description',
                         name='uq_exam_template_items_template_id_description'),
        CheckConstraint('penalty_points >= 0', name='penalty_points_non_negative'),
        CheckConstraint('order_index >= 1', name='order_index_positive'),
    )


class Evaluation(ModelBase):
    """
    Finalized mistake sheet for a lesson.

    ``lesson_id`` is unique: the constraint is what guarantees a single
    evaluation per lesson under concurrent submissions.
    """
    __tablename__ = 'evaluations'

    id = Column(Integer, primary_key=True, autoincrement=True)
    lesson_id = Column(Integer, ForeignKey('lessons.id', ondelete='CASCADE'), nullable=False)
    template_id = Column(Integer, ForeignKey('exam_templates.id'), nullable=False, index=True)
    mistakes_json = Column(Text, nullable=False, default="[]")
    total_points = Column(Integer, nullable=True)
    result = Column(String(10), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    finalized_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint('lesson_id'),
    )
