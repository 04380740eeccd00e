"""
Error taxonomy for the questionnaire engine.

Configuration errors are fatal at bank load; invalid answers are rejected
synchronously and leave the session untouched. An all-zero score vector is
not an error (see ranking.rank).
"""

from __future__ import annotations

from typing import Optional


class ServiceMatchError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(ServiceMatchError):
    """Raised when the question bank or engine config is malformed."""


class InvalidAnswerError(ServiceMatchError, ValueError):
    """Raised when an answer cannot be recorded."""

    def __init__(self, message: str, question_id: Optional[str] = None):
        self.question_id = question_id
        super().__init__(message)
