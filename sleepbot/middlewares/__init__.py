"""Middleware package initialization."""

from .logging import LoggingMiddleware
from .survey_context import SurveyContextMiddleware

__all__ = [
    "LoggingMiddleware",
    "SurveyContextMiddleware",
]
