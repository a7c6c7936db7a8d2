"""Core package for order workflow errors."""

from .errors import (
    BackendError,
    BackendUnavailableError,
    InvalidSelectionError,
    NotFoundError,
    OrderWizardError,
    SessionClosedError,
    SubmissionError,
)

__all__ = [
    "BackendError",
    "BackendUnavailableError",
    "InvalidSelectionError",
    "NotFoundError",
    "OrderWizardError",
    "SessionClosedError",
    "SubmissionError",
]
