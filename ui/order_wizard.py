"""Streamlit rendering for the order wizard.

Renderers only read from the step objects and forward user input to them;
every rule lives in ``wizard.steps``. Widget keys are namespaced per wizard
session so a create and a reschedule wizard never share widget state.
"""

from __future__ import annotations

import logging
from datetime import date

import streamlit as st

import config as app_config
from constants.keys import UIKeys
from core.errors import InvalidSelectionError, SubmissionError
from integrations.backend import Attachment
from wizard.date_utils import default_date
from wizard.session import WizardSession
from wizard.step_registry import COLLECTION_SITE, ORDER_INFORMATION, PARTICIPANT_INFORMATION, SUBMIT_ORDER
from wizard.steps import (
    CollectionSiteStep,
    OrderInformationStep,
    ParticipantInformationStep,
    SubmitOrderStep,
)
from utils.errors import display_error

logger = logging.getLogger(__name__)

_PLACEHOLDER = "Select…"
_LOOKUP_POLL_SECONDS = 1.0
_US_STATES = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL", "GA", "HI", "ID", "IL", "IN", "IA", "KS",
    "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC",
    "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)


def _index_of(options: list[str], value: str) -> int:
    return options.index(value) if value in options else 0


def _seed_widget(key: str, value: str, options: list[str]) -> None:
    """Push a form value into the widget state when the form changed it.

    Selections are cleared by the step rules (a new package drops the reason)
    and by the reschedule prefill, so the widget must follow the form rather
    than keep the option the user picked earlier.
    """

    seed_key = f"{key}.__seed"
    if st.session_state.get(seed_key) != value or key not in st.session_state:
        st.session_state[seed_key] = value
        st.session_state[key] = value if value in options else ""


def _lookups_pending(session: WizardSession) -> bool:
    return session.directory.loading or session.resolver.status.loading


def _rerun_when_settled(session: WizardSession) -> None:
    if not _lookups_pending(session):
        st.rerun()


_watch_lookups = st.fragment(run_every=_LOOKUP_POLL_SECONDS)(_rerun_when_settled)


def render_stepper(session: WizardSession) -> None:
    labels = session.step_labels
    position = session.sequencer.current_position
    parts = [f"**{label}**" if index == position else label for index, label in enumerate(labels, start=1)]
    st.caption(" → ".join(parts))


def render_agency_status(step: OrderInformationStep) -> None:
    status = step.agency_status
    if not step.selected_company:
        return
    if status.loading:
        st.caption("Finding managing agency…")
    elif status.error:
        st.warning(status.error)
    elif status.email:
        st.caption(f"Agency: {status.email}")
    else:
        st.caption("No managing agency found")


def render_order_information(session: WizardSession, step: OrderInformationStep) -> None:
    keys = session.keys
    step.mount()
    values = session.form.get()

    companies = step.companies
    if step.companies_loading and not companies:
        st.selectbox("Company", [_PLACEHOLDER], disabled=True, key=keys.widget(UIKeys.COMPANY_SELECT) + ".loading")
        st.info("Loading companies…")
    else:
        labels = {company.id: company.display_name for company in companies}
        options = ["", *labels]
        company_key = keys.widget(UIKeys.COMPANY_SELECT)
        _seed_widget(company_key, values["company_id"], options)
        choice = st.selectbox(
            "Company",
            options,
            format_func=lambda company_id: labels.get(company_id, _PLACEHOLDER),
            key=company_key,
        )
        if choice != values["company_id"]:
            step.select_company(choice or None)
            st.rerun()
        if session.directory.degraded:
            st.warning("Companies could not be loaded. Try again later.")
    render_agency_status(step)
    if _lookups_pending(session):
        _watch_lookups(session)

    options = ["", *(package.name for package in step.available_packages)]
    package_key = keys.widget(UIKeys.PACKAGE_SELECT)
    _seed_widget(package_key, values["package_name"], options)
    package = st.selectbox("Package", options, disabled=not step.package_enabled, key=package_key)
    if package and package != values["package_name"]:
        step.select_package(package)
        st.rerun()

    options = ["", *(reason.name for reason in step.available_reasons)]
    reason_key = keys.widget(UIKeys.REASON_SELECT)
    _seed_widget(reason_key, values["order_reason_name"], options)
    reason = st.selectbox("Order reason", options, disabled=not step.reason_enabled, key=reason_key)
    if reason and reason != values["order_reason_name"]:
        step.select_order_reason(reason)

    if step.dot_agency_visible:
        options = ["", *step.dot_agency_options]
        agency_key = keys.widget(UIKeys.DOT_AGENCY_SELECT)
        _seed_widget(agency_key, values["dot_agency"], options)
        agency = st.selectbox("DOT agency", options, key=agency_key)
        if agency and agency != values["dot_agency"]:
            step.select_dot_agency(agency)

    if app_config.DEBUG_UI:
        st.caption(step.debug_summary())

    if st.button("Continue", type="primary", disabled=not step.can_continue, key=keys.widget("order.continue")):
        step.continue_()
        st.rerun()


def _render_communications(session: WizardSession, step: ParticipantInformationStep) -> None:
    keys = session.keys
    prefs = step.communications
    send_link = st.toggle("Send scheduling link", value=prefs.send_link, key=keys.widget(UIKeys.SEND_LINK_TOGGLE))
    if send_link != prefs.send_link:
        prefs.set_send_link(send_link)
        st.rerun()
    donor_pass = st.toggle("Send donor pass", value=prefs.donor_pass, key=keys.widget(UIKeys.DONOR_PASS_TOGGLE))
    if donor_pass != prefs.donor_pass:
        prefs.set_donor_pass(donor_pass)
        st.rerun()
    if prefs.donor_pass:
        company_cc = st.text_input("Company CC", value=prefs.company_cc, key=keys.widget(UIKeys.COMPANY_CC_INPUT))
        if company_cc != prefs.company_cc:
            prefs.set_company_cc(company_cc)
        agency_cc = st.text_input("Agency CC", value=prefs.agency_cc, key=keys.widget(UIKeys.AGENCY_CC_INPUT))
        if agency_cc != prefs.agency_cc:
            prefs.set_agency_cc(agency_cc)
        error = prefs.cc_error()
        if error:
            st.error(error)


def render_participant_information(session: WizardSession, step: ParticipantInformationStep) -> None:
    keys = session.keys
    step.mount()
    values = session.form.get()

    col_first, col_middle, col_last = st.columns(3)
    edits: dict[str, object] = {
        "first_name": col_first.text_input("First name *", value=values["first_name"], key=keys.widget("p.first")),
        "middle_name": col_middle.text_input("Middle name", value=values["middle_name"], key=keys.widget("p.middle")),
        "last_name": col_last.text_input("Last name *", value=values["last_name"], key=keys.widget("p.last")),
    }
    col_state, col_ssn = st.columns([1, 3])
    ssn_state = col_state.selectbox(
        "ID state",
        ["", *_US_STATES],
        index=_index_of(["", *_US_STATES], values["ssn_state"]),
        key=keys.widget("p.ssn_state"),
    )
    if ssn_state != values["ssn_state"]:
        step.set_ssn_state(ssn_state)
    ssn = col_ssn.text_input("SSN / employee ID *", value=step.display_ssn, key=keys.widget("p.ssn"))
    if ssn != step.display_ssn:
        step.set_ssn(ssn)

    dob = st.date_input(
        "Date of birth *",
        value=default_date(values["dob"]),
        min_value=date(1900, 1, 1),
        key=keys.widget("p.dob"),
    )
    edits["dob"] = dob.isoformat() if isinstance(dob, date) else ""
    col_phone1, col_phone2 = st.columns(2)
    edits["phone1"] = col_phone1.text_input("Phone *", value=values["phone1"], key=keys.widget("p.phone1"))
    edits["phone2"] = col_phone2.text_input("Alt. phone", value=values["phone2"], key=keys.widget("p.phone2"))
    edits["email"] = st.text_input("Participant email", value=values["email"], key=keys.widget("p.email"))
    edits["order_expires"] = st.text_input(
        "Order expires", value=values["order_expires"], key=keys.widget("p.expires")
    )
    edits["observed"] = st.checkbox("Observed collection", value=values["observed"] == "1", key=keys.widget("p.observed"))

    edits["address"] = st.text_input("Address *", value=values["address"], key=keys.widget("p.address"))
    edits["address2"] = st.text_input("Address line 2", value=values["address2"], key=keys.widget("p.address2"))
    col_city, col_st, col_zip = st.columns(3)
    edits["city"] = col_city.text_input("City *", value=values["city"], key=keys.widget("p.city"))
    edits["state"] = col_st.text_input("State *", value=values["state"], key=keys.widget("p.state"))
    edits["zip"] = col_zip.text_input("Zip *", value=values["zip"], key=keys.widget("p.zip"))
    step.update(**edits)

    _render_communications(session, step)

    col_back, col_next = st.columns(2)
    if col_back.button("Back", key=keys.widget("p.back")):
        step.back()
        st.rerun()
    if col_next.button("Continue", type="primary", disabled=not step.can_continue, key=keys.widget("p.continue")):
        try:
            step.continue_()
        except SubmissionError as exc:
            display_error("The scheduling link could not be sent.", str(exc))
            return
        st.rerun()


def render_collection_site(session: WizardSession, step: CollectionSiteStep) -> None:
    keys = session.keys
    if step.last_error:
        display_error("Collection sites could not be loaded.", step.last_error)

    zip_code = st.text_input("Search another zip", key=keys.widget(UIKeys.ZIP_SEARCH_INPUT))
    if st.button("Search", key=keys.widget("site.search"), disabled=not zip_code.strip()):
        step.search_zip(zip_code)
        st.rerun()

    if not step.sites:
        st.info("No collection sites found yet.")
    else:
        labels = {site.id: site.label() for site in step.sites}
        ids = list(labels)
        choice = st.radio(
            "Collection site",
            ids,
            index=_index_of(ids, step.selected_site_id or ""),
            format_func=labels.__getitem__,
            key=keys.widget(UIKeys.SITE_SELECT),
        )
        if choice and choice != step.selected_site_id:
            try:
                step.select_site(choice)
            except InvalidSelectionError as exc:
                logger.warning("Ignoring stale site selection: %s", exc)

    col_back, col_next = st.columns(2)
    if col_back.button("Back", key=keys.widget("site.back")):
        step.back()
        st.rerun()
    if col_next.button("Continue", type="primary", disabled=not step.can_continue, key=keys.widget("site.continue")):
        step.confirm()
        st.rerun()


def render_submit_order(session: WizardSession, step: SubmitOrderStep) -> None:
    keys = session.keys
    values = session.form.get()
    site = session.collection_site.final_site
    st.markdown(f"**Participant:** {values['first_name']} {values['last_name']}")
    st.markdown(f"**Package:** {values['package_name']} ({values['order_reason_name']})")
    if values["dot_agency"]:
        st.markdown(f"**DOT agency:** {values['dot_agency']}")
    if site is not None:
        st.markdown(f"**Collection site:** {site.label()}")
    missing = step.missing_requirements()
    if missing:
        st.warning("Missing: " + ", ".join(missing))

    upload = st.file_uploader("Attachment (optional)", key=keys.widget(UIKeys.ATTACHMENT_UPLOADER))
    col_back, col_submit = st.columns(2)
    if col_back.button("Back", key=keys.widget("submit.back")):
        step.back()
        st.rerun()
    if col_submit.button("Submit order", type="primary", disabled=not step.can_submit, key=keys.widget("submit.go")):
        attachment = None
        if upload is not None:
            attachment = Attachment(
                filename=upload.name,
                content=upload.getvalue(),
                content_type=upload.type or "application/octet-stream",
            )
        try:
            step.submit(attachment)
        except SubmissionError as exc:
            display_error("The order could not be submitted.", str(exc))
            return
        st.rerun()


def render_wizard(session: WizardSession) -> None:
    """Render the active step of ``session``."""

    session.mount()
    st.header(session.title)
    render_stepper(session)
    step_definition = session.current_step
    st.subheader(step_definition.label)
    st.caption(step_definition.subheader)

    step = session.active_step()
    if step_definition.key == ORDER_INFORMATION:
        render_order_information(session, step)
    elif step_definition.key == PARTICIPANT_INFORMATION:
        render_participant_information(session, step)
    elif step_definition.key == COLLECTION_SITE:
        render_collection_site(session, step)
    elif step_definition.key == SUBMIT_ORDER:
        render_submit_order(session, step)

    if st.button("Cancel", key=session.keys.widget("cancel")):
        session.close()
        st.rerun()
