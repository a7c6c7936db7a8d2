"""Registry for order wizard steps, metadata, and canonical order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from constants.orders import PARTICIPANT_REQUIRED_FIELDS


@dataclass(frozen=True)
class StepDefinition:
    """Static metadata for an individual order wizard step."""

    key: str
    label: str
    subheader: str
    required_fields: tuple[str, ...] = ()


ORDER_INFORMATION: Final[str] = "order_information"
PARTICIPANT_INFORMATION: Final[str] = "participant_information"
COLLECTION_SITE: Final[str] = "collection_site"
SUBMIT_ORDER: Final[str] = "submit_order"


ORDER_STEPS: Final[tuple[StepDefinition, ...]] = (
    StepDefinition(
        key=ORDER_INFORMATION,
        label="Order Information",
        subheader="Choose company and order options. Company & Agency emails will be used for Donor Pass CC.",
        required_fields=("company_id", "package_name", "order_reason_name"),
    ),
    StepDefinition(
        key=PARTICIPANT_INFORMATION,
        label="Participant Info",
        subheader="Use the form below to enter participant information. All required fields are marked *.",
        required_fields=PARTICIPANT_REQUIRED_FIELDS,
    ),
    StepDefinition(
        key=COLLECTION_SITE,
        label="Collection Site",
        subheader="Pick the collection site closest to the participant.",
    ),
    StepDefinition(
        key=SUBMIT_ORDER,
        label="Submit Order",
        subheader="Review the order and submit it.",
    ),
)

# The stepper shows a trailing confirmation label that has no step of its own.
STEPPER_LABELS: Final[tuple[str, ...]] = tuple(step.label for step in ORDER_STEPS) + ("Confirmation",)


def step_at(position: int) -> StepDefinition:
    """Return the step for the 1-based ``position`` (clamped to the valid range)."""

    index = min(max(position, 1), len(ORDER_STEPS)) - 1
    return ORDER_STEPS[index]


__all__ = [
    "COLLECTION_SITE",
    "ORDER_INFORMATION",
    "ORDER_STEPS",
    "PARTICIPANT_INFORMATION",
    "STEPPER_LABELS",
    "SUBMIT_ORDER",
    "StepDefinition",
    "step_at",
]
