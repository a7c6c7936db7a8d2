"""Send-scheduling-link and donor-pass preferences.

Only one of the two can be on. While the donor pass is on, the CC list
stored in the form is the de-duplicated union of the editable company CC
and agency CC fields.
"""

from __future__ import annotations

from state.form_state import FormState
from utils.contact import first_invalid_email, join_emails, split_emails


class CommunicationPreferences:
    def __init__(self, form: FormState) -> None:
        self._form = form
        self.company_cc = ""
        self.agency_cc = ""

    @property
    def send_link(self) -> bool:
        return bool(self._form.value("send_link"))

    @property
    def donor_pass(self) -> bool:
        return bool(self._form.value("donor_pass"))

    def seed(self) -> None:
        """Fill the empty CC fields from the company and agency emails."""

        if not self.donor_pass:
            return
        values = self._form.get()
        if not self.company_cc and values["company_email"]:
            self.company_cc = values["company_email"]
        if not self.agency_cc and values["managing_agency_email"]:
            self.agency_cc = values["managing_agency_email"]
        self.sync()

    def combined_cc(self) -> str:
        return join_emails([*split_emails(self.company_cc), *split_emails(self.agency_cc)])

    def sync(self) -> None:
        """Write the combined CC list into the form while the donor pass is on."""

        if not self.donor_pass:
            return
        combined = self.combined_cc()
        if self._form.value("cc_email") != combined:
            self._form.merge({"cc_email": combined})

    def set_company_cc(self, value: str) -> None:
        self.company_cc = value
        self.sync()

    def set_agency_cc(self, value: str) -> None:
        self.agency_cc = value
        self.sync()

    def set_send_link(self, on: bool) -> None:
        values = self._form.get()
        if on:
            self._form.merge(
                {
                    "send_link": True,
                    "donor_pass": False,
                    "email": values["email"] or values["company_email"],
                    "cc_email": "",
                    "donor_email": "",
                }
            )
        else:
            self._form.merge({"send_link": False})

    def set_donor_pass(self, on: bool) -> None:
        if on:
            self._form.merge({"donor_pass": True, "send_link": False})
            self.seed()
            self._form.merge({"cc_email": self.combined_cc()})
        else:
            self._form.merge({"donor_pass": False, "cc_email": "", "donor_email": ""})

    def cc_error(self) -> str:
        """Return a message for the first malformed CC address, or ``""``."""

        invalid = first_invalid_email(self._form.value("cc_email"))
        return f"Invalid email: {invalid}" if invalid else ""
