"""
Exam sheet evaluations.

Templates, the evaluation engine, the access gate and the history query,
plus the router exposing them.
"""

from examsheet.evaluations.models import EvaluationResult
from examsheet.evaluations.router import router

__all__ = ['EvaluationResult', 'router']
