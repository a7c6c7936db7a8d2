"""Managing-agency lookup for the selected company.

The lookup is an ordered chain of strategies. Each strategy answers with a
:class:`LookupResult` carrying one of three outcomes; the first ``FOUND``
wins and only the last strategy's failure is ever shown to the user. A
``NOT_FOUND`` at the end of the chain simply means the company has no
managing agency.

Resolutions run on the session executor and are tagged with the company that
asked for them. When a result arrives after the user picked another company
it is dropped without touching the form.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import StrEnum
from threading import RLock

from config import ActorRole
from constants.orders import AGENCY_LOOKUP_FAILED_MESSAGE
from core.errors import BackendError, NotFoundError
from state.form_state import FormState

logger = logging.getLogger(__name__)


class LookupOutcome(StrEnum):
    """Possible answers of a single lookup strategy."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class LookupResult:
    outcome: LookupOutcome
    email: str = ""
    detail: str = ""

    @property
    def found(self) -> bool:
        return self.outcome is LookupOutcome.FOUND


@dataclass(frozen=True)
class LookupStrategy:
    """A named way of finding the agency email for a company display name."""

    name: str
    lookup: Callable[[str], LookupResult]

    def __call__(self, display_name: str) -> LookupResult:
        return self.lookup(display_name)


@dataclass(frozen=True)
class AgencyResolution:
    """What the order information step shows next to the company field."""

    email: str = ""
    loading: bool = False
    error: str = ""
    company_id: str = ""


def backend_strategy(client, token: str | None, *, role: ActorRole | None = None, name: str | None = None) -> LookupStrategy:
    """Wrap :meth:`BackendClient.find_agency_email` as a lookup strategy."""

    resolved_role = role or client.role

    def _lookup(display_name: str) -> LookupResult:
        try:
            email = client.find_agency_email(token, display_name, role=resolved_role)
        except NotFoundError as exc:
            return LookupResult(LookupOutcome.NOT_FOUND, detail=str(exc))
        except BackendError as exc:
            return LookupResult(LookupOutcome.ERROR, detail=str(exc))
        return LookupResult(LookupOutcome.FOUND, email=email)

    return LookupStrategy(name=name or f"{resolved_role.value}-agency-lookup", lookup=_lookup)


def default_strategies(client, token: str | None) -> list[LookupStrategy]:
    """Role-scoped lookup first, the admin endpoint as fallback."""

    return [
        backend_strategy(client, token, name="primary"),
        backend_strategy(client, token, role=ActorRole.ADMIN, name="admin-fallback"),
    ]


def run_strategies(strategies: Sequence[LookupStrategy], display_name: str) -> LookupResult:
    """Try ``strategies`` in order; the first ``FOUND`` wins, else the last result."""

    if not strategies:
        return LookupResult(LookupOutcome.NOT_FOUND)
    last = LookupResult(LookupOutcome.NOT_FOUND)
    for strategy in strategies:
        last = strategy(display_name)
        if last.found:
            return last
        logger.debug("Agency lookup '%s' gave %s for %r.", strategy.name, last.outcome, display_name)
    return last


class AgencyResolver:
    """Resolve the managing agency email and write it into the form."""

    def __init__(
        self,
        form_state: FormState,
        strategies: Sequence[LookupStrategy],
        *,
        executor: Executor,
    ) -> None:
        self._form = form_state
        self._strategies = list(strategies)
        self._executor = executor
        self._lock = RLock()
        self._status = AgencyResolution()

    @property
    def status(self) -> AgencyResolution:
        with self._lock:
            return self._status

    def reset(self) -> None:
        with self._lock:
            self._status = AgencyResolution()

    def resolve(self, company_id: str, display_name: str) -> Future[LookupResult] | None:
        """Start a lookup for ``display_name`` on behalf of ``company_id``.

        Returns the pending future, or ``None`` when there is nothing to look up.
        """

        name = (display_name or "").strip()
        if not name:
            with self._lock:
                self._status = AgencyResolution(company_id=company_id)
            self._form.merge({"managing_agency_email": ""})
            return None

        with self._lock:
            self._status = AgencyResolution(loading=True, company_id=company_id)
        future = self._executor.submit(run_strategies, list(self._strategies), name)
        future.add_done_callback(lambda done: self._apply(company_id, name, done))
        return future

    def _apply(self, company_id: str, display_name: str, future: Future[LookupResult]) -> None:
        try:
            result = future.result()
        except Exception as exc:  # worker crashed outside the strategy contract
            logger.warning("Agency lookup for %r crashed: %s", display_name, exc)
            result = LookupResult(LookupOutcome.ERROR, detail=str(exc))

        if result.found:
            resolution = AgencyResolution(email=result.email, company_id=company_id)
        elif result.outcome is LookupOutcome.NOT_FOUND:
            resolution = AgencyResolution(company_id=company_id)
        else:
            logger.warning("Agency lookup for %r failed: %s", display_name, result.detail)
            resolution = AgencyResolution(error=AGENCY_LOOKUP_FAILED_MESSAGE, company_id=company_id)

        applied = self._form.merge_if({"company_id": company_id}, {"managing_agency_email": resolution.email})
        if not applied:
            logger.debug(
                "Discarding agency lookup for %r; company %s is no longer selected.",
                display_name,
                company_id,
            )
            return
        with self._lock:
            if self._status.company_id == company_id:
                self._status = resolution
