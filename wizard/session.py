"""One running order wizard, either creating or rescheduling an order."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, MutableMapping
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import StrEnum

import config as app_config
from core.errors import SessionClosedError
from models.orders import RescheduleRecord
from state.form_state import FormState
from wizard.agency_resolver import AgencyResolver, default_strategies
from wizard.directory import CompanyDirectory
from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.sequencer import StepSequencer
from wizard.navigation_types import WizardContext
from wizard.prefill import PrefillBootstrapper
from wizard.step_registry import (
    COLLECTION_SITE,
    ORDER_INFORMATION,
    PARTICIPANT_INFORMATION,
    STEPPER_LABELS,
    SUBMIT_ORDER,
    StepDefinition,
)
from wizard.steps.collection_site import CollectionSiteStep
from wizard.steps.communications import CommunicationPreferences
from wizard.steps.order_information import OrderInformationStep
from wizard.steps.participant_information import ParticipantInformationStep
from wizard.steps.submit_order import SubmitOrderStep

logger = logging.getLogger(__name__)


class WizardMode(StrEnum):
    CREATE = "create"
    RESCHEDULE = "reschedule"


_TITLES = {
    WizardMode.CREATE: "Create New Order",
    WizardMode.RESCHEDULE: "Reschedule Order",
}


class WizardSession:
    """Own every collaborator of one wizard run and tear them down together.

    ``on_complete`` receives the result id (order id or case number) exactly
    once. After ``complete`` or ``close`` the session is unusable and any
    further call raises :class:`core.errors.SessionClosedError`.
    """

    def __init__(
        self,
        *,
        mode: WizardMode | str,
        client,
        auth_token: str | None,
        on_complete: Callable[[str], None],
        prefill_record: RescheduleRecord | None = None,
        on_close: Callable[[], None] | None = None,
        executor: Executor | None = None,
        store: MutableMapping[str, object] | None = None,
        wizard_id: str | None = None,
    ) -> None:
        self.mode = WizardMode(mode)
        if self.mode is WizardMode.RESCHEDULE and prefill_record is None:
            raise ValueError("Rescheduling an order needs the record to reschedule.")

        self.keys = WizardSessionKeys(wizard_id or uuid.uuid4().hex[:8])
        self._on_complete = on_complete
        self._on_close = on_close
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=app_config.LOOKUP_WORKERS,
            thread_name_prefix=f"order-wizard-{self.keys.wizard_id}",
        )
        self._token = auth_token
        self._mounted = False
        self._closed = False
        self._unsubscribers: list[Callable[[], None]] = []

        self.form = FormState()
        self.sequencer = StepSequencer(keys=self.keys, store=store)
        self.directory = CompanyDirectory(client, executor=self._executor)
        self.resolver = AgencyResolver(
            self.form,
            default_strategies(client, auth_token),
            executor=self._executor,
        )
        self.prefill = PrefillBootstrapper(self.form, self.resolver, self.directory, prefill_record)

        self.context = WizardContext(
            form=self.form,
            sequencer=self.sequencer,
            directory=self.directory,
            resolver=self.resolver,
            client=client,
            token=auth_token,
            reschedule=self.mode is WizardMode.RESCHEDULE,
            complete=self.complete,
        )
        self.communications = CommunicationPreferences(self.form)
        self.collection_site = CollectionSiteStep(self.context)
        self.order_information = OrderInformationStep(self.context)
        self.participant_information = ParticipantInformationStep(
            self.context,
            collection_site=self.collection_site,
            communications=self.communications,
        )
        self.submit_order = SubmitOrderStep(self.context, collection_site=self.collection_site)
        self._steps = {
            ORDER_INFORMATION: self.order_information,
            PARTICIPANT_INFORMATION: self.participant_information,
            COLLECTION_SITE: self.collection_site,
            SUBMIT_ORDER: self.submit_order,
        }

    # -- lifecycle -------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Wizard session {self.keys.wizard_id} is closed.")

    def mount(self) -> None:
        """Start the directory load and, when rescheduling, the prefill."""

        self._ensure_open()
        if self._mounted:
            return
        self._mounted = True
        if self.prefill.record is not None:
            self.prefill.apply_record()
            self._unsubscribers.append(self.directory.subscribe(self.prefill.on_directory_changed))
        self.directory.load_async(self._token)
        logger.info("Mounted %s wizard %s.", self.mode.value, self.keys.wizard_id)

    def complete(self, result_id: str) -> None:
        self._ensure_open()
        logger.info("Wizard %s completed with result %s.", self.keys.wizard_id, result_id or "-")
        self._teardown()
        self._on_complete(result_id)

    def close(self) -> None:
        self._ensure_open()
        logger.info("Wizard %s closed.", self.keys.wizard_id)
        self._teardown()
        if self._on_close is not None:
            self._on_close()

    def _teardown(self) -> None:
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.resolver.reset()
        self.form.reset()
        self.collection_site.reset()
        self.sequencer.discard()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # -- reads -----------------------------------------------------------

    @property
    def title(self) -> str:
        return _TITLES[self.mode]

    @property
    def step_labels(self) -> tuple[str, ...]:
        return STEPPER_LABELS

    @property
    def current_step(self) -> StepDefinition:
        self._ensure_open()
        return self.sequencer.current_step

    def active_step(
        self,
    ) -> OrderInformationStep | ParticipantInformationStep | CollectionSiteStep | SubmitOrderStep:
        """Return the step object for the current position."""

        return self._steps[self.current_step.key]
