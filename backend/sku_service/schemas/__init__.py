"""Shared Pydantic schemas"""

from .problem import PROBLEM_MEDIA_TYPE, ProblemDetail

__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "ProblemDetail",
]
