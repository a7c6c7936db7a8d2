"""Infrastructure helpers for the order workflow."""

from .logging import configure_logging, log_event

__all__ = ["configure_logging", "log_event"]
