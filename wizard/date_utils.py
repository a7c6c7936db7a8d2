"""Date helper utilities shared across order wizard steps."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

ORDER_EXPIRY_FORMAT = "%Y-%m-%dT%H:%M"


def to_calendar_date(value: Any) -> str:
    """Return ``value`` as a plain ``YYYY-MM-DD`` string, or ``""``.

    Timestamps carrying an offset are converted to UTC first so that
    ``1990-05-01T23:30:00-05:00`` becomes ``1990-05-02``.
    """

    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return ""
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            try:
                return date.fromisoformat(candidate[:10]).isoformat()
            except ValueError:
                return ""
    else:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def default_order_expiry(now: datetime, days: int) -> str:
    """Return the default order expiry ``days`` after ``now``."""

    return (now + timedelta(days=days)).strftime(ORDER_EXPIRY_FORMAT)


def default_date(value: Any, *, fallback: date | None = None) -> date | None:
    """Return a ``date`` for widgets, parsing ISO strings when possible."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    return fallback
