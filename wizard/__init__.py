"""Order wizard package."""

from __future__ import annotations

import importlib
from typing import Any

from .step_registry import ORDER_STEPS, STEPPER_LABELS, StepDefinition

__all__ = [
    "ORDER_STEPS",
    "STEPPER_LABELS",
    "StepDefinition",
    "WizardMode",
    "WizardSession",
]

_SESSION_EXPORTS = frozenset({"WizardMode", "WizardSession"})


def __getattr__(name: str) -> Any:
    """Import ``wizard.session`` lazily to avoid circular imports."""

    if name not in _SESSION_EXPORTS:
        raise AttributeError(f"module {__name__} has no attribute {name}")
    session = importlib.import_module(f"{__name__}.session")
    value: Any = getattr(session, name)
    globals()[name] = value
    return value
