from __future__ import annotations

from types import SimpleNamespace

import pytest
import streamlit as st
from streamlit.runtime.state import SessionStateProxy
from streamlit.testing.v1 import AppTest

import ui.order_wizard as order_ui
from config import ActorRole
from constants.keys import UIKeys
from wizard.navigation.keys import WizardSessionKeys
from wizard.session import WizardMode, WizardSession

KEYS = WizardSessionKeys("ui")
COMPANY = KEYS.widget(UIKeys.COMPANY_SELECT)
PACKAGE = KEYS.widget(UIKeys.PACKAGE_SELECT)
REASON = KEYS.widget(UIKeys.REASON_SELECT)
DOT_AGENCY = KEYS.widget(UIKeys.DOT_AGENCY_SELECT)


def _fake_streamlit(captured: list[tuple[str, str]]) -> SimpleNamespace:
    return SimpleNamespace(
        caption=lambda text: captured.append(("caption", text)),
        warning=lambda text: captured.append(("warning", text)),
    )


def _session(backend, executor) -> WizardSession:
    session = WizardSession(
        mode=WizardMode.CREATE,
        client=backend,
        auth_token="token",
        on_complete=lambda result_id: None,
        executor=executor,
    )
    session.mount()
    return session


def test_stepper_highlights_current_step(monkeypatch, backend, immediate) -> None:
    captured: list[tuple[str, str]] = []
    monkeypatch.setattr(order_ui, "st", _fake_streamlit(captured))
    session = _session(backend, immediate)
    session.sequencer.advance()

    order_ui.render_stepper(session)

    assert captured == [
        ("caption", "Order Information → **Participant Info** → Collection Site → Submit Order → Confirmation")
    ]


def test_agency_status_chip(monkeypatch, backend, deferred) -> None:
    captured: list[tuple[str, str]] = []
    monkeypatch.setattr(order_ui, "st", _fake_streamlit(captured))
    backend.agencies[(ActorRole.AGENCY, "Acme Corp")] = "agent@agency-one.com"
    session = _session(backend, deferred)
    deferred.run_next()
    step = session.order_information

    order_ui.render_agency_status(step)
    assert captured == []

    step.select_company("c1")
    order_ui.render_agency_status(step)
    deferred.run_all()
    order_ui.render_agency_status(step)
    step.select_company("c2")
    deferred.run_all()
    order_ui.render_agency_status(step)

    assert captured == [
        ("caption", "Finding managing agency…"),
        ("caption", "Agency: agent@agency-one.com"),
        ("caption", "No managing agency found"),
    ]


def test_settled_lookups_trigger_a_rerun(monkeypatch, backend, deferred) -> None:
    reruns: list[bool] = []
    monkeypatch.setattr(order_ui, "st", SimpleNamespace(rerun=lambda: reruns.append(True)))
    session = _session(backend, deferred)

    order_ui._rerun_when_settled(session)
    assert reruns == []

    deferred.run_all()
    order_ui._rerun_when_settled(session)
    assert reruns == [True]


def _order_information_page(backend, executor) -> None:
    import streamlit as st

    from ui.order_wizard import render_order_information
    from wizard.session import WizardMode, WizardSession

    session = st.session_state.get("order_session")
    if session is None:
        session = WizardSession(
            mode=WizardMode.CREATE,
            client=backend,
            auth_token="token",
            on_complete=lambda result_id: None,
            executor=executor,
            store=st.session_state,
            wizard_id="ui",
        )
        st.session_state["order_session"] = session
    session.mount()
    render_order_information(session, session.order_information)


@pytest.fixture
def page(monkeypatch):
    # widgets need the runtime session state, not the dictionary stub
    monkeypatch.setattr(st, "session_state", SessionStateProxy())

    def _build(backend, executor) -> AppTest:
        app = AppTest.from_function(_order_information_page, kwargs={"backend": backend, "executor": executor})
        app.run()
        assert not app.exception
        return app

    return _build


def _form(app: AppTest) -> dict:
    return app.session_state["order_session"].form.get()


def test_order_selects_follow_the_dependency_rules(page, backend, immediate) -> None:
    app = page(backend, immediate)

    app.selectbox(key=COMPANY).select("c1").run()
    app.selectbox(key=PACKAGE).select("DOT PANEL").run()
    app.selectbox(key=REASON).select("RANDOM").run()
    app.selectbox(key=DOT_AGENCY).select("FMCSA").run()
    assert not app.exception
    values = _form(app)
    assert (values["package_name"], values["order_reason_name"], values["dot_agency"]) == (
        "DOT PANEL",
        "RANDOM",
        "FMCSA",
    )

    app.selectbox(key=PACKAGE).select("NON-DOT 5 PANEL").run()
    app.run()
    values = _form(app)
    assert values["package_name"] == "NON-DOT 5 PANEL"
    assert values["order_reason_name"] == ""
    assert values["dot_agency"] == ""
    assert app.selectbox(key=REASON).value == ""

    app.selectbox(key=REASON).select("PRE-EMPLOYMENT").run()
    app.selectbox(key=COMPANY).select("c2").run()
    app.run()
    values = _form(app)
    assert values["company_id"] == "c2"
    assert values["package_name"] == ""
    assert values["order_reason_name"] == ""
    assert app.selectbox(key=PACKAGE).value == ""
    assert app.selectbox(key=REASON).value == ""
    assert not app.exception


def test_pending_directory_load_is_watched(monkeypatch, page, backend, deferred) -> None:
    watched: list[WizardSession] = []
    monkeypatch.setattr(order_ui, "_watch_lookups", watched.append)

    app = page(backend, deferred)

    assert [info.value for info in app.info] == ["Loading companies…"]
    assert len(watched) == 1
    assert watched[0].directory.loading

    deferred.run_all()
    watched.clear()
    app.run()
    assert watched == []
    assert app.selectbox(key=COMPANY).options == ["Select…", "Acme Corp", "Globex"]
