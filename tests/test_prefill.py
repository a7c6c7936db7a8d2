from __future__ import annotations

import pytest

from config import ActorRole
from models.orders import RescheduleRecord
from wizard.prefill import build_prefill_from_row
from wizard.session import WizardMode, WizardSession

ROW = {
    "companyName": "acme corp ",
    "selectedPackageId": "DOT PANEL",
    "testType": "RANDOM",
    "dotAgency": "FMCSA",
    "firstName": "Ada",
    "lastName": "Lovelace",
    "licenseNumber": "D1234567",
    "dobString": "1990-05-01T23:30:00-05:00",
    "phone1": 5550101,
    "observedBool": True,
    "address": "12 Analytical Way",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
    "sendLink": False,
    "donorPass": 1,
    "email": "ada@mail-box.com",
    "ccEmail": "boss@acme-corp.com",
}


def _session(backend, executor, record: RescheduleRecord) -> WizardSession:
    return WizardSession(
        mode=WizardMode.RESCHEDULE,
        client=backend,
        auth_token="token",
        prefill_record=record,
        on_complete=lambda result_id: None,
        executor=executor,
        wizard_id="r1",
    )


def test_build_prefill_uses_row_fallbacks() -> None:
    record = build_prefill_from_row(ROW)

    assert record.package_name == "DOT PANEL"
    assert record.order_reason == "RANDOM"
    assert record.ssn_eid == "D1234567"
    assert record.dob == "1990-05-02"
    assert record.phone1 == "5550101"
    assert record.observed is True
    assert record.send_scheduling_link is False
    assert record.send_donor_pass is True
    assert record.addr1 == "12 Analytical Way"
    assert record.state_short == "IL"
    assert record.cc_emails == "boss@acme-corp.com"


def test_reschedule_requires_a_record(backend, immediate) -> None:
    with pytest.raises(ValueError):
        WizardSession(
            mode=WizardMode.RESCHEDULE,
            client=backend,
            auth_token="token",
            on_complete=lambda result_id: None,
            executor=immediate,
        )


def test_phase_one_applies_before_the_directory_arrives(backend, deferred) -> None:
    session = _session(backend, deferred, build_prefill_from_row(ROW))

    session.mount()

    values = session.form.get()
    assert values["first_name"] == "Ada"
    assert values["ssn"] == "D1234567"
    assert values["dob"] == "1990-05-02"
    assert values["address"] == "12 Analytical Way"
    assert values["observed"] == "1"
    assert values["send_link"] is False
    assert values["donor_pass"] is True
    assert values["cc_email"] == "boss@acme-corp.com"
    assert values["company_id"] == ""


def test_phase_two_selects_the_company_once_loaded(backend, deferred) -> None:
    backend.agencies[(ActorRole.AGENCY, "Acme Corp")] = "agent@agency-one.com"
    session = _session(backend, deferred, build_prefill_from_row(ROW))
    session.mount()

    deferred.run_next()

    values = session.form.get()
    assert values["company_id"] == "c1"
    assert values["package_name"] == "DOT PANEL"
    assert values["order_reason_name"] == "RANDOM"
    assert values["dot_agency"] == "FMCSA"
    assert values["company_email"] == "ops@acme-corp.com"
    # participant fields from phase one survive the company selection
    assert values["address"] == "12 Analytical Way"
    assert session.resolver.status.loading

    deferred.run_all()
    assert session.form.value("managing_agency_email") == "agent@agency-one.com"
    assert session.order_information.can_continue


def test_phase_two_runs_only_once(backend, deferred) -> None:
    session = _session(backend, deferred, build_prefill_from_row(ROW))
    session.mount()
    deferred.run_all()

    session.order_information.select_company("c2")
    session.directory.load("token", force=True)

    assert session.form.value("company_id") == "c2"
    assert session.form.value("package_name") == ""


def test_unknown_company_leaves_the_selection_empty(backend, deferred) -> None:
    session = _session(backend, deferred, build_prefill_from_row({**ROW, "companyName": "Initech"}))
    session.mount()
    deferred.run_all()

    assert session.form.value("company_id") == ""
    assert session.form.value("first_name") == "Ada"
    assert not session.prefill.company_applied


def test_empty_directory_is_a_no_op(backend, deferred) -> None:
    backend.companies = []
    session = _session(backend, deferred, build_prefill_from_row(ROW))
    session.mount()
    deferred.run_all()

    assert session.form.value("company_id") == ""
    backend.companies = [
        {"_id": "c1", "companyName": "Acme Corp", "packages": [{"packageName": "DOT PANEL"}]},
    ]
    session.directory.load("token", force=True)
    assert session.form.value("company_id") == "c1"


def test_apply_record_is_idempotent(backend, deferred) -> None:
    record = RescheduleRecord.model_validate(
        {"firstName": "Ada", "middleName": None, "observed": "0", "sendSchedulingLink": True}
    )
    session = _session(backend, deferred, record)
    session.form.merge({"middle_name": "King", "city": "London"})

    session.prefill.apply_record()
    first = session.form.get()
    session.prefill.apply_record()

    assert session.form.get() == first
    assert first["middle_name"] == "King"
    assert first["city"] == "London"
    assert first["observed"] == "0"
    assert first["send_link"] is True
    assert first["donor_pass"] is False


def test_record_without_company_name_selects_nothing(backend, deferred) -> None:
    backend.companies = [{"_id": "c9", "packages": [{"packageName": "DOT PANEL"}]}, *backend.companies]
    row = {key: value for key, value in ROW.items() if key != "companyName"}
    session = _session(backend, deferred, build_prefill_from_row(row))
    session.mount()
    deferred.run_all()

    assert session.directory.find("c9").display_name == ""
    assert session.form.value("company_id") == ""
    assert session.form.value("package_name") == ""
    assert not session.prefill.company_applied
    assert backend.calls_named("agency") == []
