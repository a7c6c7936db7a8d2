"""Utility helpers for the order workflow."""

from __future__ import annotations

from .contact import (
    extract_company_email as extract_company_email,
    first_invalid_email as first_invalid_email,
    join_emails as join_emails,
    split_emails as split_emails,
)
from .errors import display_error as display_error
