"""Seed a reschedule wizard from a previously recorded test.

Prefill happens in two phases. Participant, address and communication fields
are copied as soon as the wizard mounts. Company related fields have to wait
for the company directory, because the record only knows the company by its
display name; :meth:`PrefillBootstrapper.on_directory_changed` is subscribed
to the directory and selects the company once a matching entry shows up.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from models.orders import CompanyEntry, RescheduleRecord
from state.form_state import FormState
from wizard.agency_resolver import AgencyResolver
from wizard.date_utils import to_calendar_date
from wizard.directory import CompanyDirectory

logger = logging.getLogger(__name__)

# record attribute -> form field, copied only when the record carries a value
_RECORD_TO_FORM: dict[str, str] = {
    "first_name": "first_name",
    "middle_name": "middle_name",
    "last_name": "last_name",
    "ssn_eid": "ssn",
    "phone1": "phone1",
    "phone2": "phone2",
    "addr1": "address",
    "addr2": "address2",
    "city": "city",
    "state_short": "state",
    "zip": "zip",
    "email": "email",
    "cc_emails": "cc_email",
}

_FALSEY_TEXT = {"", "0", "false", "no", "off"}


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSEY_TEXT
    return bool(value)


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return ""


def build_prefill_from_row(row: Mapping[str, Any]) -> RescheduleRecord:
    """Turn a row of the results table into a :class:`RescheduleRecord`."""

    return RescheduleRecord(
        company_name=str(row.get("companyName") or ""),
        company_email="",
        package_name=str(_first(row, "packageName", "selectedPackageId")),
        order_reason=str(_first(row, "orderReason", "testType", "selectedOrderReasonId")),
        dot_agency=str(row.get("dotAgency") or ""),
        first_name=str(row.get("firstName") or ""),
        middle_name=str(row.get("middleName") or ""),
        last_name=str(row.get("lastName") or ""),
        ssn_eid=str(_first(row, "ssnEid", "licenseNumber")),
        dob=to_calendar_date(row.get("dobString")),
        phone1=str(row.get("phone1") or ""),
        phone2=str(row.get("phone2") or ""),
        observed=_flag(row.get("observedBool")),
        order_expires=str(row.get("orderExpires") or ""),
        addr1=str(row.get("address") or ""),
        addr2=str(row.get("address2") or ""),
        city=str(row.get("city") or ""),
        state_short=str(row.get("state") or ""),
        zip=str(row.get("zip") or ""),
        send_scheduling_link=_flag(row.get("sendLink")),
        send_donor_pass=_flag(row.get("donorPass")),
        email=str(row.get("email") or ""),
        cc_emails=str(row.get("ccEmail") or ""),
    )


class PrefillBootstrapper:
    def __init__(
        self,
        form: FormState,
        resolver: AgencyResolver,
        directory: CompanyDirectory,
        record: RescheduleRecord | None,
    ) -> None:
        self._form = form
        self._resolver = resolver
        self._directory = directory
        self._record = record
        self._company_applied = False

    @property
    def record(self) -> RescheduleRecord | None:
        return self._record

    @property
    def company_applied(self) -> bool:
        return self._company_applied

    def apply_record(self) -> None:
        """Copy the participant, address and communication fields."""

        record = self._record
        if record is None:
            return
        current = self._form.get()
        update: dict[str, Any] = {}
        for attribute, field in _RECORD_TO_FORM.items():
            value = getattr(record, attribute)
            update[field] = current[field] if value is None else value

        dob = to_calendar_date(record.dob)
        update["dob"] = dob or current["dob"]
        update["order_expires"] = record.order_expires or current["order_expires"]
        update["observed"] = "1" if _flag(record.observed) else "0"
        # The two switches stay native booleans, unlike ``observed``.
        update["send_link"] = _flag(record.send_scheduling_link)
        update["donor_pass"] = _flag(record.send_donor_pass)
        self._form.merge(update)

    def on_directory_changed(self, companies: Sequence[CompanyEntry]) -> None:
        """Select the record's company once the directory contains it."""

        record = self._record
        if record is None or not companies or self._company_applied:
            return
        if self._form.value("company_id"):
            self._company_applied = True
            return

        match = self._directory.match_name(record.company_name)
        if match is None:
            logger.info("Reschedule company %r not found in the directory.", record.company_name)
            return

        update: dict[str, Any] = {
            "company_id": match.id,
            "company_email": match.contact_email or record.company_email or "",
        }
        if record.package_name:
            update["package_name"] = record.package_name
        if record.order_reason:
            update["order_reason_name"] = record.order_reason
        if record.dot_agency:
            update["dot_agency"] = record.dot_agency
        self._form.merge(update)
        self._company_applied = True
        self._resolver.resolve(match.id, match.display_name)
