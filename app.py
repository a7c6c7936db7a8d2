# app.py — order workflow entrypoint
from __future__ import annotations

import json
import logging
from pathlib import Path
import sys
from typing import Any

import streamlit as st

APP_ROOT = Path(__file__).resolve().parent
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

import config as app_config  # noqa: E402
from constants.keys import StateKeys, UIKeys  # noqa: E402
from infra.logging import configure_logging  # noqa: E402
from integrations.backend import BackendClient  # noqa: E402
from ui.order_wizard import render_wizard  # noqa: E402
from wizard.navigation.keys import WizardSessionKeys  # noqa: E402
from wizard.prefill import build_prefill_from_row  # noqa: E402
from wizard.session import WizardMode, WizardSession  # noqa: E402

logger = logging.getLogger(__name__)

configure_logging(app_config.LOG_LEVEL)

st.set_page_config(page_title="Orders", page_icon="🧪", layout="centered")


def _finish(mode: WizardMode, result_id: str) -> None:
    st.session_state[StateKeys.LAST_RESULT_ID] = result_id
    st.session_state[StateKeys.LAST_RESULT_MODE] = mode.value
    st.session_state.pop(StateKeys.ACTIVE_WIZARD_ID, None)


def _abandon() -> None:
    st.session_state.pop(StateKeys.ACTIVE_WIZARD_ID, None)


def _active_session() -> WizardSession | None:
    wizard_id = st.session_state.get(StateKeys.ACTIVE_WIZARD_ID)
    if not wizard_id:
        return None
    session = st.session_state.get(WizardSessionKeys(wizard_id).session)
    if isinstance(session, WizardSession) and not session.closed:
        return session
    return None


def _start_session(mode: WizardMode, row: dict[str, Any] | None = None) -> WizardSession:
    record = build_prefill_from_row(row) if row is not None else None
    session = WizardSession(
        mode=mode,
        client=BackendClient(),
        auth_token=st.session_state.get(StateKeys.AUTH_TOKEN) or app_config.get_api_token(),
        prefill_record=record,
        on_complete=lambda result_id: _finish(mode, result_id),
        on_close=_abandon,
        store=st.session_state,
    )
    st.session_state[session.keys.session] = session
    st.session_state[StateKeys.ACTIVE_WIZARD_ID] = session.keys.wizard_id
    return session


def _render_last_result() -> None:
    result_id = st.session_state.get(StateKeys.LAST_RESULT_ID)
    if result_id is None:
        return
    verb = "rescheduled" if st.session_state.get(StateKeys.LAST_RESULT_MODE) == WizardMode.RESCHEDULE else "created"
    st.success(f"Order {verb}. Reference: {result_id or 'n/a'}")


def _render_launcher() -> None:
    _render_last_result()
    mode = st.radio(
        "What do you want to do?",
        [WizardMode.CREATE.value, WizardMode.RESCHEDULE.value],
        format_func=lambda value: "Create new order" if value == WizardMode.CREATE else "Reschedule order",
        key=UIKeys.MODE_SELECT,
        horizontal=True,
    )
    row: dict[str, Any] | None = None
    if mode == WizardMode.RESCHEDULE:
        raw_row = st.text_area("Result row (JSON)", key=UIKeys.RESCHEDULE_ROW)
        if raw_row.strip():
            try:
                parsed = json.loads(raw_row)
            except json.JSONDecodeError as exc:
                st.error(f"Invalid JSON: {exc}")
                return
            if not isinstance(parsed, dict):
                st.error("The result row must be a JSON object.")
                return
            row = parsed
    start_disabled = mode == WizardMode.RESCHEDULE and row is None
    if st.button("Start", type="primary", disabled=start_disabled):
        st.session_state.pop(StateKeys.LAST_RESULT_ID, None)
        _start_session(WizardMode(mode), row)
        st.rerun()


session = _active_session()
if session is None:
    _render_launcher()
else:
    render_wizard(session)
