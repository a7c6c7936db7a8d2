"""Exception types raised by the order workflow."""

from __future__ import annotations


class OrderWizardError(Exception):
    """Base exception for order workflow issues."""


class BackendError(OrderWizardError):
    """Raised when a backend call fails."""

    def __init__(self, message: str, *, endpoint: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached or answers with garbage."""


class NotFoundError(BackendError):
    """Raised when the backend answers ``404``."""


class SubmissionError(OrderWizardError):
    """Raised when an order (or scheduling link) could not be submitted."""


class InvalidSelectionError(OrderWizardError, ValueError):
    """Raised when a value is selected that the current step does not allow."""


class SessionClosedError(OrderWizardError, RuntimeError):
    """Raised when a wizard session is used after it was torn down."""
