"""Utility helpers for rendering error messages in Streamlit."""

from __future__ import annotations

import streamlit as st

import config as app_config


def display_error(msg: str, detail: str | None = None) -> None:
    """Render a user-facing error with optional debug details.

    Args:
        msg: Short error message for the user.
        detail: Optional technical detail shown when ``ORDER_DEBUG`` is on.
    """

    st.error(msg)
    if detail and app_config.DEBUG_UI:
        with st.expander("Details"):
            st.code(detail)
