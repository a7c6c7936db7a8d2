"""First wizard step: company, package, order reason and DOT agency.

The four selections depend on each other. Picking a company resets the
package, the order reason and the DOT agency; picking a package resets the
reason and the DOT agency. The DOT agency is only asked for (and required)
when the package is a DOT package.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from constants.orders import DOT_AGENCY_LIST, is_dot_package
from core.errors import InvalidSelectionError
from models.orders import CompanyEntry, OrderReasonOption, PackageOption
from utils.contact import maybe_abbrev_state
from wizard.agency_resolver import AgencyResolution
from wizard.navigation_types import WizardContext

logger = logging.getLogger(__name__)

_CLEARED_SELECTION = {"package_name": "", "order_reason_name": "", "dot_agency": ""}


class OrderInfoState(StrEnum):
    NO_COMPANY = "no_company"
    NO_PACKAGE = "no_package"
    NO_REASON = "no_reason"
    REASON_SELECTED = "reason_selected"


class OrderInformationStep:
    """Field-dependency rules of the order information screen."""

    def __init__(self, context: WizardContext) -> None:
        self._ctx = context

    def mount(self) -> None:
        """Fetch the directory unless an earlier load already succeeded."""

        if self._ctx.directory.needs_load() and not self._ctx.directory.loading:
            self._ctx.directory.load(self._ctx.token)

    # -- reads -----------------------------------------------------------

    @property
    def companies(self) -> list[CompanyEntry]:
        return self._ctx.directory.companies

    @property
    def companies_loading(self) -> bool:
        return self._ctx.directory.loading

    @property
    def selected_company(self) -> CompanyEntry | None:
        return self._ctx.directory.find(self._ctx.form.value("company_id"))

    @property
    def available_packages(self) -> list[PackageOption]:
        company = self.selected_company
        return list(company.packages) if company else []

    @property
    def available_reasons(self) -> list[OrderReasonOption]:
        company = self.selected_company
        if company is None or not self._ctx.form.value("package_name"):
            return []
        return list(company.order_reasons)

    @property
    def package_enabled(self) -> bool:
        return bool(self._ctx.form.value("company_id"))

    @property
    def reason_enabled(self) -> bool:
        return bool(self._ctx.form.value("package_name"))

    @property
    def dot_agency_visible(self) -> bool:
        return is_dot_package(self._ctx.form.value("package_name"))

    @property
    def dot_agency_options(self) -> tuple[str, ...]:
        return DOT_AGENCY_LIST

    @property
    def agency_status(self) -> AgencyResolution:
        return self._ctx.resolver.status

    @property
    def state(self) -> OrderInfoState:
        values = self._ctx.form.get()
        if not values["company_id"]:
            return OrderInfoState.NO_COMPANY
        if not values["package_name"]:
            return OrderInfoState.NO_PACKAGE
        if not values["order_reason_name"]:
            return OrderInfoState.NO_REASON
        return OrderInfoState.REASON_SELECTED

    @property
    def can_continue(self) -> bool:
        return order_information_complete(self._ctx.form.get())

    # -- transitions -----------------------------------------------------

    def select_company(self, company_id: str | None) -> None:
        """Select (or, with ``None``, clear) the company."""

        if not company_id:
            self._clear_company()
            return

        company = self._ctx.directory.find(company_id)
        if company is None:
            raise InvalidSelectionError(f"Unknown company: {company_id}")

        previous_state = self._ctx.form.value("state")
        incoming_state = company.details.state or company.details.state_short
        self._ctx.form.merge(
            {
                "company_id": company.id,
                **_CLEARED_SELECTION,
                "address": company.details.address,
                "city": company.details.city,
                "zip": company.details.zip,
                "phone1": company.details.contact_number,
                "state": maybe_abbrev_state(incoming_state) or previous_state,
                "company_email": company.contact_email,
                "managing_agency_email": "",
            }
        )
        self._ctx.resolver.resolve(company.id, company.display_name)

    def _clear_company(self) -> None:
        values = self._ctx.form.get()
        self._ctx.resolver.reset()
        self._ctx.form.merge(
            {
                "company_id": "",
                **_CLEARED_SELECTION,
                "address": "",
                "city": "",
                "zip": "",
                "phone1": "",
                "state": "",
                "company_email": "",
                "managing_agency_email": "",
                # The donor pass flow keeps its CC list when the company is cleared.
                "cc_email": values["cc_email"] if values["donor_pass"] else "",
            }
        )

    def select_package(self, package_name: str) -> None:
        company = self.selected_company
        if company is None:
            raise InvalidSelectionError("Select a company before choosing a package.")
        if package_name not in company.package_names():
            raise InvalidSelectionError(f"{company.display_name} does not offer package {package_name!r}.")
        self._ctx.form.merge({"package_name": package_name, "order_reason_name": "", "dot_agency": ""})

    def select_order_reason(self, reason_name: str) -> None:
        company = self.selected_company
        if company is None or not self._ctx.form.value("package_name"):
            raise InvalidSelectionError("Select a package before choosing an order reason.")
        if reason_name not in company.order_reason_names():
            raise InvalidSelectionError(f"{company.display_name} does not offer order reason {reason_name!r}.")
        self._ctx.form.merge({"order_reason_name": reason_name})

    def select_dot_agency(self, agency: str) -> None:
        if not self.dot_agency_visible:
            raise InvalidSelectionError("A DOT agency only applies to DOT packages.")
        if agency not in DOT_AGENCY_LIST:
            raise InvalidSelectionError(f"Unknown DOT agency: {agency!r}")
        self._ctx.form.merge({"dot_agency": agency})

    def continue_(self) -> bool:
        """Advance to the participant step when every selection is complete."""

        if not self.can_continue:
            return False
        self._ctx.sequencer.advance()
        return True

    def debug_summary(self) -> str:
        values = self._ctx.form.get()
        parts = [
            f"companyId={values['company_id'] or '-'}",
            f"package={values['package_name'] or '-'}",
            f"reason={values['order_reason_name'] or '-'}",
        ]
        if self.dot_agency_visible:
            parts.append(f"dotAgency={values['dot_agency'] or '-'}")
        parts.append(f"companyEmail={values['company_email'] or '-'}")
        parts.append(f"agencyEmail={values['managing_agency_email'] or '-'}")
        return " | ".join(parts)


def order_information_complete(values: dict) -> bool:
    """Company, package and reason set, plus a DOT agency for DOT packages."""

    if not (values.get("company_id") and values.get("package_name") and values.get("order_reason_name")):
        return False
    return not is_dot_package(values.get("package_name")) or bool(values.get("dot_agency"))
