"""Final step: review and submit the order."""

from __future__ import annotations

import logging
from typing import Any

from core.errors import BackendError, SubmissionError
from integrations.backend import Attachment
from wizard.navigation_types import WizardContext
from wizard.steps.collection_site import CollectionSiteStep, form_payload, selection_payload
from wizard.steps.order_information import order_information_complete
from wizard.steps.participant_information import missing_participant_fields

logger = logging.getLogger(__name__)


class SubmitOrderStep:
    def __init__(self, context: WizardContext, *, collection_site: CollectionSiteStep) -> None:
        self._ctx = context
        self._collection_site = collection_site
        self.submitting = False
        self.last_error = ""

    def missing_requirements(self) -> list[str]:
        """Names of everything that still blocks the submission."""

        values = self._ctx.form.get()
        missing: list[str] = []
        if not order_information_complete(values):
            missing.append("order_information")
        missing.extend(missing_participant_fields(values))
        if self._collection_site.final_site is None:
            missing.append("collection_site")
        return missing

    @property
    def can_submit(self) -> bool:
        return not self.submitting and not self.missing_requirements()

    def build_body(self) -> dict[str, Any]:
        values = self._ctx.form.get()
        site = self._collection_site.final_site
        return {
            **selection_payload(values),
            "caseNumber": values["case_number"],
            "formData": form_payload(values),
            "finlSelectedSite": dict(site.payload) if site is not None else None,
            "reschedule": self._ctx.reschedule,
        }

    def submit(self, attachment: Attachment | None = None) -> str:
        """Submit the order and complete the session; returns the result id."""

        missing = self.missing_requirements()
        if missing:
            raise SubmissionError(f"Cannot submit yet, missing: {', '.join(missing)}")

        body = self.build_body()
        self.submitting = True
        self.last_error = ""
        try:
            response = self._ctx.client.submit_order(self._ctx.token, body, attachment)
        except BackendError as exc:
            self.last_error = str(exc)
            logger.warning("Order submission failed: %s", exc)
            raise SubmissionError(str(exc) or "Order submission failed") from exc
        finally:
            self.submitting = False

        data = response.get("data") if isinstance(response.get("data"), dict) else {}
        result_id = str(
            response.get("orderId")
            or data.get("orderId")
            or response.get("caseNumber")
            or data.get("caseNumber")
            or body["caseNumber"]
            or ""
        )
        logger.info("Order submitted (result %s).", result_id or "-")
        self._ctx.complete(result_id)
        return result_id

    def back(self) -> None:
        self._ctx.sequencer.retreat()
