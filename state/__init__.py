"""Session state utilities."""

from .form_state import FORM_DEFAULTS, FormState

__all__ = ["FORM_DEFAULTS", "FormState"]
