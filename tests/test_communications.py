from __future__ import annotations

from state.form_state import FormState
from wizard.steps.communications import CommunicationPreferences


def _prefs(**values) -> tuple[CommunicationPreferences, FormState]:
    form = FormState(values)
    return CommunicationPreferences(form), form


def test_send_link_and_donor_pass_are_exclusive() -> None:
    prefs, form = _prefs(company_email="ops@acme-corp.com")

    prefs.set_send_link(True)
    assert form.value("send_link") is True
    assert form.value("donor_pass") is False
    assert form.value("email") == "ops@acme-corp.com"
    assert form.value("cc_email") == ""

    prefs.set_donor_pass(True)
    assert form.value("donor_pass") is True
    assert form.value("send_link") is False


def test_send_link_keeps_an_existing_email() -> None:
    prefs, form = _prefs(company_email="ops@acme-corp.com", email="donor@mail-box.com")

    prefs.set_send_link(True)

    assert form.value("email") == "donor@mail-box.com"


def test_donor_pass_cc_is_the_deduplicated_union() -> None:
    prefs, form = _prefs(company_email="ops@acme-corp.com", managing_agency_email="agent@agency-one.com")

    prefs.seed()
    assert form.value("cc_email") == "ops@acme-corp.com;agent@agency-one.com"

    prefs.set_agency_cc("agent@agency-one.com; OPS@acme-corp.com ;extra@agency-one.com")
    assert form.value("cc_email") == "ops@acme-corp.com;agent@agency-one.com;extra@agency-one.com"


def test_turning_donor_pass_off_clears_cc() -> None:
    prefs, form = _prefs(company_email="ops@acme-corp.com", donor_email="d@mail-box.com")
    prefs.seed()

    prefs.set_donor_pass(False)

    assert form.value("cc_email") == ""
    assert form.value("donor_email") == ""
    prefs.set_company_cc("other@acme-corp.com")
    assert form.value("cc_email") == ""


def test_cc_error_names_the_first_bad_address() -> None:
    prefs, form = _prefs()
    prefs.set_company_cc("ops@acme-corp.com;not-an-email;also bad")

    assert prefs.cc_error() == "Invalid email: not-an-email"

    prefs.set_company_cc("ops@acme-corp.com")
    assert prefs.cc_error() == ""
