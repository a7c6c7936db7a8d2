from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import BackendError, SubmissionError
from wizard.session import WizardMode, WizardSession

PARTICIPANT = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "ssn": "123456789",
    "dob": "1990-05-01",
    "phone1": "555-0101",
    "address": "12 Analytical Way",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
}


@pytest.fixture
def completed() -> list[str]:
    return []


@pytest.fixture
def session(backend, immediate, completed) -> WizardSession:
    wizard = WizardSession(
        mode=WizardMode.CREATE,
        client=backend,
        auth_token="token",
        on_complete=completed.append,
        executor=immediate,
        wizard_id="p1",
    )
    wizard.mount()
    step = wizard.order_information
    step.select_company("c1")
    step.select_package("NON-DOT 5 PANEL")
    step.select_order_reason("RANDOM")
    step.continue_()
    return wizard


def test_mount_applies_defaults(session) -> None:
    step = session.participant_information
    step.mount(now=datetime(2026, 3, 1, 9, 30))

    assert session.form.value("order_expires") == "2026-03-11T09:30"
    assert session.form.value("email") == "ops@acme-corp.com"
    assert session.form.value("cc_email") == "ops@acme-corp.com"


def test_mount_keeps_existing_values(session) -> None:
    session.form.merge({"order_expires": "2026-01-01T00:00", "email": "donor@mail-box.com"})

    session.participant_information.mount(now=datetime(2026, 3, 1))

    assert session.form.value("order_expires") == "2026-01-01T00:00"
    assert session.form.value("email") == "donor@mail-box.com"


def test_required_fields_gate_continue(session) -> None:
    step = session.participant_information
    assert "first_name" in step.missing_fields()
    assert not step.continue_()

    step.update(**PARTICIPANT)
    assert step.missing_fields() == []
    assert step.can_continue


def test_update_rejects_fields_owned_by_other_steps(session) -> None:
    with pytest.raises(KeyError):
        session.participant_information.update(company_id="c2")


def test_observed_is_stored_as_text_flag(session) -> None:
    step = session.participant_information
    step.update(observed=True)
    assert session.form.value("observed") == "1"
    step.update(observed=False)
    assert session.form.value("observed") == "0"


def test_ssn_state_prefix(session) -> None:
    step = session.participant_information
    step.update(ssn="D1234567")
    step.set_ssn_state("ca")

    assert session.form.value("ssn") == "CAD1234567"
    assert step.display_ssn == "D1234567"

    step.set_ssn("D7654321")
    assert session.form.value("ssn") == "CAD7654321"

    step.set_ssn_state("")
    assert session.form.value("ssn") == "D7654321"


def test_continue_advances_and_requests_sites(session, backend) -> None:
    step = session.participant_information
    step.update(**PARTICIPANT)

    assert step.continue_()

    assert session.sequencer.current_position == 3
    assert session.form.value("case_number") == "CASE-1"
    assert [site.id for site in session.collection_site.sites] == ["s1", "s2"]
    body = backend.calls_named("sites")[0]
    assert body["companyId"] == "c1"
    assert body["formData"]["firstName"] == "Ada"


def test_send_link_completes_the_session(session, completed, backend) -> None:
    step = session.participant_information
    step.update(**PARTICIPANT)
    step.communications.set_send_link(True)

    assert step.continue_()

    assert completed == ["CASE-1"]
    assert step.notice == "Scheduling URL sent successfully"
    assert session.closed
    assert len(backend.calls_named("sites")) == 1


def test_send_link_failure_keeps_the_session_open(session, completed, backend) -> None:
    backend.site_error = BackendError("rejected", status_code=400)
    step = session.participant_information
    step.update(**PARTICIPANT)
    step.communications.set_send_link(True)

    with pytest.raises(SubmissionError):
        step.continue_()

    assert completed == []
    assert not session.closed
    assert session.sequencer.current_position == 2


def test_back_returns_to_order_information(session) -> None:
    session.participant_information.back()

    assert session.sequencer.current_position == 1
    assert session.sequencer.max_position == 2
