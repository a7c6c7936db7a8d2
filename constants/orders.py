"""Fixed catalogs used by the order workflow."""

from __future__ import annotations

from typing import Final

DOT_AGENCY_LIST: Final[tuple[str, ...]] = ("FAA", "FMCSA", "FRA", "FTA", "HHS", "NRC", "PHMSA", "USCG")

DOT_PACKAGES: Final[tuple[str, ...]] = (
    "DOT BAT",
    "DOT PANEL",
    "DOT PANEL + DOT BAT",
    "DOT PHYSICAL",
)
# Package names arrive with inconsistent casing from the company catalogs.
DOT_PACKAGES_NORMALIZED: Final[frozenset[str]] = frozenset(name.lower() for name in DOT_PACKAGES)

PARTICIPANT_REQUIRED_FIELDS: Final[tuple[str, ...]] = (
    "first_name",
    "last_name",
    "ssn",
    "dob",
    "phone1",
    "address",
    "city",
    "state",
    "zip",
)

AGENCY_LOOKUP_FAILED_MESSAGE: Final[str] = "Agency lookup failed"
SCHEDULING_LINK_SENT_MESSAGE: Final[str] = "Scheduling URL sent successfully"


def is_dot_package(package_name: str | None) -> bool:
    """Return ``True`` when ``package_name`` belongs to the DOT package set."""

    return (package_name or "").strip().lower() in DOT_PACKAGES_NORMALIZED
