"""Structured logging utilities for the order workflow."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

LOGGER = logging.getLogger("order_wizard.http")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""

    resolved = level if isinstance(level, int) else getattr(logging, str(level).upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    root.setLevel(resolved)


def _redact(value: str, secrets: tuple[str, ...] = ()) -> str:
    """Redact bearer tokens and known secrets from a string."""

    candidates = [*secrets, os.getenv("ORDER_API_TOKEN")]
    for secret in candidates:
        if secret:
            value = value.replace(secret, "[redacted]")
    return value


def log_event(
    level: str,
    *,
    endpoint: str | None = None,
    method: str | None = None,
    status: int | None = None,
    duration: float | None = None,
    outcome: str | None = None,
    secrets: tuple[str, ...] = (),
) -> Dict[str, Any]:
    """Emit a structured log line for a backend call.

    Args:
        level: Logging level name (e.g., ``"info"``).
        endpoint: Backend path that was called.
        method: HTTP method.
        status: HTTP status code, when a response arrived.
        duration: Duration of the call in seconds.
        outcome: Short outcome label (``ok``, ``not_found``, ``error``).
        secrets: Extra values to redact, typically the bearer token in use.

    Returns:
        The record that was logged, after redaction.
    """

    record = {
        "level": level.lower(),
        "endpoint": endpoint,
        "method": method,
        "status": status,
        "duration": round(duration, 3) if duration is not None else None,
        "outcome": outcome,
    }
    safe_record = {k: _redact(str(v), secrets) for k, v in record.items() if v is not None}
    LOGGER.log(getattr(logging, level.upper(), logging.INFO), json.dumps(safe_record))
    return safe_record
