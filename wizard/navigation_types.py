from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from state.form_state import FormState
from wizard.agency_resolver import AgencyResolver
from wizard.directory import CompanyDirectory
from wizard.navigation.sequencer import StepSequencer


@dataclass(frozen=True)
class WizardContext:
    """Collaborators shared by every step of one wizard session."""

    form: FormState
    sequencer: StepSequencer
    directory: CompanyDirectory
    resolver: AgencyResolver
    client: object
    token: str | None
    reschedule: bool
    complete: Callable[[str], None]
