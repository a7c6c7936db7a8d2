"""Second wizard step: participant identity, address and communications."""

from __future__ import annotations

import logging
from datetime import datetime

import config as app_config
from constants.orders import PARTICIPANT_REQUIRED_FIELDS, SCHEDULING_LINK_SENT_MESSAGE
from core.errors import BackendError, SubmissionError
from wizard.date_utils import default_order_expiry
from wizard.navigation_types import WizardContext
from wizard.steps.collection_site import CollectionSiteStep, form_payload, selection_payload
from wizard.steps.communications import CommunicationPreferences

logger = logging.getLogger(__name__)

# Fields the participant form edits directly; everything else goes through
# a dedicated method.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {
        "first_name",
        "middle_name",
        "last_name",
        "ssn",
        "dob",
        "phone1",
        "phone2",
        "email",
        "order_expires",
        "observed",
        "participant_address",
        "address",
        "address2",
        "city",
        "state",
        "zip",
    }
)


def missing_participant_fields(values: dict) -> list[str]:
    return [name for name in PARTICIPANT_REQUIRED_FIELDS if not str(values.get(name) or "").strip()]


class ParticipantInformationStep:
    def __init__(
        self,
        context: WizardContext,
        *,
        collection_site: CollectionSiteStep,
        communications: CommunicationPreferences,
    ) -> None:
        self._ctx = context
        self._collection_site = collection_site
        self.communications = communications
        self.notice = ""

    def mount(self, now: datetime | None = None) -> None:
        """Apply the defaults the participant form starts with."""

        values = self._ctx.form.get()
        defaults: dict[str, str] = {}
        if not values["order_expires"]:
            defaults["order_expires"] = default_order_expiry(now or datetime.now(), app_config.ORDER_EXPIRY_DAYS)
        if values["company_email"] and not values["email"]:
            defaults["email"] = values["company_email"]
        if defaults:
            self._ctx.form.merge(defaults)
        self.communications.seed()

    def update(self, **fields: object) -> None:
        unknown = sorted(set(fields) - EDITABLE_FIELDS)
        if unknown:
            raise KeyError(f"Not editable on the participant step: {', '.join(unknown)}")
        if "observed" in fields:
            fields["observed"] = "1" if fields["observed"] in (True, "1", 1) else "0"
        self._ctx.form.merge(fields)

    def set_ssn_state(self, state_code: str) -> None:
        """Store the issuing state and keep it as the prefix of ``ssn``."""

        code = (state_code or "").strip().upper()
        bare = self.display_ssn
        self._ctx.form.merge({"ssn_state": code, "ssn": f"{code}{bare}" if code else bare})

    def set_ssn(self, value: str) -> None:
        """Store the number typed by the user, re-applying the state prefix."""

        code = self._ctx.form.value("ssn_state")
        bare = (value or "").strip()
        if code and bare.startswith(code):
            bare = bare[len(code):]
        self._ctx.form.merge({"ssn": f"{code}{bare}" if code else bare})

    @property
    def display_ssn(self) -> str:
        values = self._ctx.form.get()
        ssn, code = values["ssn"] or "", values["ssn_state"]
        if code and ssn.startswith(code):
            return ssn[len(code):]
        return ssn

    def missing_fields(self) -> list[str]:
        return missing_participant_fields(self._ctx.form.get())

    @property
    def can_continue(self) -> bool:
        if self.missing_fields():
            return False
        values = self._ctx.form.get()
        if values["send_link"] and not values["email"].strip():
            return False
        return not self.communications.cc_error()

    def continue_(self) -> bool:
        """Advance to site selection, or send the scheduling link instead."""

        if not self.can_continue:
            return False
        if self._ctx.form.value("send_link"):
            self.send_scheduling_link()
            return True
        self._ctx.sequencer.advance()
        self._collection_site.request_sites()
        return True

    def send_scheduling_link(self) -> str:
        """Let the backend email a scheduling link and finish the session."""

        values = self._ctx.form.get()
        body = {**selection_payload(values), "formData": form_payload(values)}
        try:
            response = self._ctx.client.get_site_information(self._ctx.token, body)
        except BackendError as exc:
            logger.warning("Sending the scheduling link failed: %s", exc)
            raise SubmissionError(str(exc) or "Sending the scheduling link failed") from exc
        case_number = str(response.get("caseNumber") or values["case_number"] or "")
        self.notice = SCHEDULING_LINK_SENT_MESSAGE
        logger.info("Scheduling link sent (case %s).", case_number or "-")
        self._ctx.complete(case_number)
        return case_number

    def back(self) -> None:
        self._ctx.sequencer.retreat()
