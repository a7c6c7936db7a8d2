"""Helpers for working with contact information."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from email_validator import EmailNotValidError, validate_email

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_STATE_CODE_RE = re.compile(r"^[A-Za-z]{2}$")

# Places where company payloads have been seen carrying the contact address.
_COMPANY_EMAIL_PATHS: tuple[tuple[str, ...], ...] = (
    ("companyDetails", "contactEmail"),
    ("companyDetails", "email"),
    ("companyDetails", "companyEmail"),
    ("companyDetails", "company_email"),
    ("companyDetails", "primaryEmail"),
    ("companyInfoData", "email"),
    ("companyInfoData", "companyEmail"),
    ("email",),
    ("companyEmail",),
    ("contactEmail",),
)


def looks_like_email(value: object) -> bool:
    """Return ``True`` when ``value`` is a string shaped like an email."""

    return isinstance(value, str) and bool(_EMAIL_RE.match(value.strip()))


def _dig(payload: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    current: Any = payload
    for part in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def extract_company_email(company: Mapping[str, Any] | None) -> str:
    """Return the best contact email found in a raw company payload.

    Known fields are checked first; otherwise the payload is scanned for the
    first string that looks like an email address.
    """

    if not isinstance(company, Mapping):
        return ""
    for path in _COMPANY_EMAIL_PATHS:
        candidate = _dig(company, path)
        if looks_like_email(candidate):
            return candidate.strip()

    seen: set[int] = set()
    stack: list[Any] = [company]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        values: Iterable[Any]
        if isinstance(current, Mapping):
            values = current.values()
        elif isinstance(current, (list, tuple)):
            values = current
        else:
            continue
        for value in values:
            if looks_like_email(value):
                return value.strip()
            if isinstance(value, (Mapping, list, tuple)):
                stack.append(value)
    return ""


def split_emails(raw: str | None) -> list[str]:
    """Split a ``;`` separated email list into trimmed, non-empty entries."""

    return [token.strip() for token in str(raw or "").split(";") if token.strip()]


def unique_emails(emails: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates while keeping the first spelling."""

    seen: dict[str, str] = {}
    for email in emails:
        key = email.lower()
        if key and key not in seen:
            seen[key] = email
    return list(seen.values())


def join_emails(emails: Iterable[str]) -> str:
    """Join ``emails`` with ``;`` (no spaces) after de-duplication."""

    return ";".join(unique_emails(emails))


def first_invalid_email(raw: str | None) -> str | None:
    """Return the first entry of ``raw`` that is not a valid email address."""

    for email in split_emails(raw):
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return email
    return None


def maybe_abbrev_state(value: object) -> str:
    """Upper-case two-letter state codes and leave other values trimmed."""

    text = str(value or "").strip()
    if _STATE_CODE_RE.match(text):
        return text.upper()
    return text


def normalize_name(value: object) -> str:
    """Normalise a display name for matching (trim + lowercase)."""

    return str(value or "").strip().lower()
