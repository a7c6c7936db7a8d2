"""Central configuration for the order workflow front end.

Values come from the process environment (optionally seeded from a ``.env``
file) and, for the API token, from Streamlit secrets. ``ORDER_ACTOR_ROLE``
selects which role-scoped backend endpoints the wizard talks to (``agency``
or ``admin``); the managing-agency lookup always keeps the admin endpoint as
its fallback.
"""

import logging
import os
import warnings
from enum import StrEnum
from typing import Mapping

import streamlit as st
from dotenv import load_dotenv

load_dotenv()


logger = logging.getLogger(__name__)

_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")


class ActorRole(StrEnum):
    """Roles whose endpoints the wizard can be scoped to."""

    AGENCY = "agency"
    ADMIN = "admin"


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _parse_positive_int_env(value: object | None, *, env_var: str, default: int) -> int:
    """Return a positive integer parsed from ``value`` or ``default``."""

    if value is None:
        return default
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        try:
            parsed = int(float(candidate))
        except ValueError:
            warnings.warn(
                "%s is not a number; ignoring %s" % (candidate, env_var),
                RuntimeWarning,
            )
            return default
    elif isinstance(value, (int, float)):
        parsed = int(value)
    else:
        warnings.warn(
            "Unsupported %s value '%s'; using %d." % (env_var, value, default),
            RuntimeWarning,
        )
        return default
    if parsed <= 0:
        warnings.warn(
            "%s must be positive; using %d." % (env_var, default),
            RuntimeWarning,
        )
        return default
    return parsed


def _normalise_timeout(value: object | None, *, default: float = 15.0) -> float:
    """Return a positive timeout value in seconds."""

    if value is None:
        return default
    candidate = value
    if isinstance(candidate, str):
        stripped = candidate.strip()
        if not stripped:
            return default
        try:
            candidate = float(stripped)
        except ValueError:
            warnings.warn(
                "Unsupported ORDER_HTTP_TIMEOUT '%s'; falling back to %.1f seconds." % (candidate, default),
                RuntimeWarning,
            )
            return default
    if isinstance(candidate, (int, float)):
        timeout = float(candidate)
        if timeout > 0:
            return timeout
    warnings.warn(
        "ORDER_HTTP_TIMEOUT must be a positive number; falling back to %.1f seconds." % default,
        RuntimeWarning,
    )
    return default


def normalise_role(value: object | None, *, default: ActorRole = ActorRole.AGENCY) -> ActorRole:
    """Return a supported :class:`ActorRole` or ``default`` when invalid."""

    if isinstance(value, ActorRole):
        return value
    if not isinstance(value, str) or not value.strip():
        return default
    candidate = value.strip().lower()
    try:
        return ActorRole(candidate)
    except ValueError:
        warnings.warn(
            "Unsupported ORDER_ACTOR_ROLE '%s'; falling back to '%s'." % (candidate, default.value),
            RuntimeWarning,
        )
        return default


def _coerce_secret_value(value: object) -> str:
    """Return ``value`` as a trimmed string without raising on unexpected types."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="ignore").strip()
    return str(value).strip()


def get_api_token() -> str:
    """Return the bearer token from Streamlit secrets or the environment."""

    try:
        direct_secret = st.secrets["ORDER_API_TOKEN"]
    except Exception:
        direct_secret = None
    token = _coerce_secret_value(direct_secret)
    if token:
        return token

    try:
        api_section = st.secrets["order_api"]
    except Exception:
        api_section = None
    if isinstance(api_section, Mapping):
        section_token = _coerce_secret_value(api_section.get("token"))
        if section_token:
            return section_token

    env_token = _coerce_secret_value(os.getenv("ORDER_API_TOKEN"))
    if not env_token:
        logger.info("ORDER_API_TOKEN not configured; the user must sign in before ordering.")
    return env_token


STREAMLIT_ENV = os.getenv("STREAMLIT_ENV", "development")
API_URL = os.getenv("ORDER_API_URL", "http://localhost:5000/api").strip().rstrip("/")
ACTOR_ROLE = normalise_role(os.getenv("ORDER_ACTOR_ROLE"))
HTTP_TIMEOUT = _normalise_timeout(os.getenv("ORDER_HTTP_TIMEOUT"), default=15.0)
ORDER_EXPIRY_DAYS = _parse_positive_int_env(os.getenv("ORDER_EXPIRY_DAYS"), env_var="ORDER_EXPIRY_DAYS", default=10)
LOOKUP_WORKERS = _parse_positive_int_env(
    os.getenv("ORDER_LOOKUP_WORKERS"),
    env_var="ORDER_LOOKUP_WORKERS",
    default=2,
)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
DEBUG_UI = _is_truthy_flag(os.getenv("ORDER_DEBUG"))


__all__ = [
    "ACTOR_ROLE",
    "API_URL",
    "ActorRole",
    "DEBUG_UI",
    "HTTP_TIMEOUT",
    "LOG_LEVEL",
    "LOOKUP_WORKERS",
    "ORDER_EXPIRY_DAYS",
    "STREAMLIT_ENV",
    "get_api_token",
    "normalise_role",
]
