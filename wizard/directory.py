"""The list of companies the current actor may order for."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future
from threading import RLock

from core.errors import BackendError
from models.orders import CompanyEntry, parse_companies
from utils.contact import normalize_name

logger = logging.getLogger(__name__)

DirectoryListener = Callable[[list[CompanyEntry]], None]


class CompanyDirectory:
    """Company catalog fetched once per wizard session.

    A failed fetch is not fatal: the directory degrades to an empty list so
    the rest of the wizard stays usable, and the next ``load`` tries again.
    """

    def __init__(self, client, *, executor: Executor | None = None) -> None:
        self._client = client
        self._executor = executor
        self._lock = RLock()
        self._companies: list[CompanyEntry] = []
        self._loaded = False
        self._degraded = False
        self._loading = False
        self._listeners: list[DirectoryListener] = []

    @property
    def companies(self) -> list[CompanyEntry]:
        with self._lock:
            return list(self._companies)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def degraded(self) -> bool:
        """``True`` when the last load failed and an empty list is shown."""

        return self._degraded

    def needs_load(self) -> bool:
        return not self._loaded or self._degraded

    def load(self, token: str | None, *, force: bool = False) -> list[CompanyEntry]:
        """Fetch the directory; never raises, degrades to ``[]`` instead."""

        if not force and not self.needs_load():
            self._loading = False
            return self.companies
        self._loading = True
        try:
            raw = self._client.get_company_directory(token)
            companies = parse_companies(raw)
            degraded = False
        except (BackendError, ValueError) as exc:
            logger.warning("Company directory unavailable, continuing without companies: %s", exc)
            companies = []
            degraded = True
        except Exception:
            with self._lock:
                self._loading = False
            raise
        # ``loading`` drops in the same critical section that sets ``loaded``.
        with self._lock:
            self._companies = companies
            self._loaded = True
            self._degraded = degraded
            self._loading = False
            listeners = list(self._listeners)
        logger.debug("Company directory loaded with %d entries.", len(companies))
        for listener in listeners:
            listener(list(companies))
        return list(companies)

    def load_async(self, token: str | None, *, force: bool = False) -> Future[list[CompanyEntry]]:
        """Run :meth:`load` on the session executor."""

        if self._executor is None:
            raise RuntimeError("CompanyDirectory was created without an executor")
        self._loading = True
        return self._executor.submit(self.load, token, force=force)

    def find(self, company_id: str | None) -> CompanyEntry | None:
        if not company_id:
            return None
        with self._lock:
            return next((company for company in self._companies if company.id == company_id), None)

    def match_name(self, name: str | None) -> CompanyEntry | None:
        """Return the company whose display name equals ``name`` (trimmed, any case)."""

        target = normalize_name(name)
        if not target:
            return None
        with self._lock:
            return next(
                (company for company in self._companies if normalize_name(company.display_name) == target),
                None,
            )

    def subscribe(self, listener: DirectoryListener) -> Callable[[], None]:
        """Call ``listener`` with the company list after every load."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe
