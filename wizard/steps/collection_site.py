"""Collection site selection, backed by the site-information endpoint."""

from __future__ import annotations

import logging
from typing import Any

from core.errors import BackendError, InvalidSelectionError
from models.orders import CollectionSite, parse_collection_sites
from wizard.navigation_types import WizardContext

logger = logging.getLogger(__name__)

# Backend field names for the form payload.
_FORM_WIRE_NAMES: dict[str, str] = {
    "first_name": "firstName",
    "middle_name": "middleName",
    "last_name": "lastName",
    "ssn": "ssn",
    "ssn_state": "ssnState",
    "dob": "dob",
    "phone1": "phone1",
    "phone2": "phone2",
    "email": "email",
    "order_expires": "orderExpires",
    "observed": "observed",
    "participant_address": "participantAddress",
    "address": "address",
    "address2": "address2",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "send_link": "sendLink",
    "donor_pass": "donorPass",
    "cc_email": "ccEmail",
    "donor_email": "donorEmail",
    "company_email": "companyEmail",
    "managing_agency_email": "managingAgencyEmail",
}


def form_payload(values: dict[str, Any]) -> dict[str, Any]:
    """Return the ``formData`` object the backend expects."""

    return {wire: values[key] for key, wire in _FORM_WIRE_NAMES.items()}


def selection_payload(values: dict[str, Any]) -> dict[str, Any]:
    return {
        "companyId": values["company_id"],
        "packageId": values["package_name"],
        "orderReasonId": values["order_reason_name"],
        "dotAgency": values["dot_agency"],
    }


class CollectionSiteStep:
    def __init__(self, context: WizardContext) -> None:
        self._ctx = context
        self.sites: list[CollectionSite] = []
        self.loading = False
        self.selected_site_id: str | None = None
        self.final_site: CollectionSite | None = None
        self.last_error = ""

    def request_sites(self) -> dict[str, Any]:
        """Ask the backend for sites; returns the raw response (``{}`` on failure)."""

        values = self._ctx.form.get()
        body = {**selection_payload(values), "formData": form_payload(values)}
        self.loading = True
        self.last_error = ""
        try:
            response = self._ctx.client.get_site_information(self._ctx.token, body)
        except BackendError as exc:
            logger.warning("Fetching collection sites failed: %s", exc)
            self.last_error = str(exc)
            return {}
        finally:
            self.loading = False
        self.sites = parse_collection_sites(response.get("data"))
        case_number = response.get("caseNumber")
        if case_number:
            self._ctx.form.merge({"case_number": str(case_number)})
        return dict(response)

    def search_zip(self, zip_code: str) -> list[CollectionSite]:
        """Look for sites around another zip code within the same case."""

        zip_code = zip_code.strip()
        self._ctx.form.merge({"zip": zip_code})
        self.loading = True
        self.last_error = ""
        try:
            raw_sites = self._ctx.client.handle_new_pincode(
                self._ctx.token,
                self._ctx.form.value("case_number"),
                {"zip": zip_code},
            )
        except BackendError as exc:
            logger.warning("Searching sites for zip %s failed: %s", zip_code, exc)
            self.last_error = str(exc)
            return self.sites
        finally:
            self.loading = False
        self.sites = parse_collection_sites(raw_sites)
        self.selected_site_id = None
        return self.sites

    @property
    def selected_site(self) -> CollectionSite | None:
        return next((site for site in self.sites if site.id == self.selected_site_id), None)

    def select_site(self, site_id: str) -> None:
        if not any(site.id == site_id for site in self.sites):
            raise InvalidSelectionError(f"Unknown collection site: {site_id}")
        self.selected_site_id = site_id

    @property
    def can_continue(self) -> bool:
        return self.selected_site is not None

    def confirm(self) -> bool:
        """Keep the selected site for submission and move on."""

        site = self.selected_site
        if site is None:
            return False
        self.final_site = site
        self._ctx.sequencer.advance()
        return True

    def back(self) -> None:
        self._ctx.sequencer.retreat()

    def reset(self) -> None:
        self.sites = []
        self.selected_site_id = None
        self.final_site = None
        self.last_error = ""
