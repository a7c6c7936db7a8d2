"""The flat, mutable record every wizard step reads from and writes to."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from threading import RLock
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)

FormListener = Callable[[dict[str, Any]], None]

FORM_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        # participant
        "first_name": "",
        "middle_name": "",
        "last_name": "",
        "ssn": "",
        "ssn_state": "",
        "dob": "",
        "phone1": "",
        "phone2": "",
        # address
        "participant_address": True,
        "address": "",
        "address2": "",
        "city": "",
        "state": "",
        "zip": "",
        # selection
        "company_id": "",
        "package_name": "",
        "order_reason_name": "",
        "dot_agency": "",
        "case_number": "",
        # order
        "order_expires": "",
        "observed": "0",
        # communications
        "email": "",
        "cc_email": "",
        "donor_email": "",
        "send_link": False,
        "donor_pass": True,
        # display only
        "company_email": "",
        "managing_agency_email": "",
    }
)


class FormState:
    """Every field the order wizard can produce, across all of its steps.

    ``merge`` is a shallow, last-write-wins update. Listeners are notified
    with a fresh snapshot after every ``merge`` and ``reset`` so that bound
    views never render from a stale copy. Agency lookups finish on worker
    threads, hence the lock.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._lock = RLock()
        self._values: dict[str, Any] = dict(FORM_DEFAULTS)
        self._listeners: list[FormListener] = []
        if initial:
            self.merge(initial)

    def get(self) -> dict[str, Any]:
        """Return a snapshot copy of the current values."""

        with self._lock:
            return dict(self._values)

    def value(self, key: str) -> Any:
        with self._lock:
            return self._values[key]

    def merge(self, partial: Mapping[str, Any]) -> None:
        """Shallow-merge ``partial`` into the form.

        Raises:
            KeyError: when ``partial`` names a field the form does not have.
        """

        unknown = sorted(set(partial) - set(FORM_DEFAULTS))
        if unknown:
            raise KeyError(f"Unknown form fields: {', '.join(unknown)}")
        with self._lock:
            self._values.update(partial)
            snapshot = dict(self._values)
        self._notify(snapshot)

    def merge_if(self, expected: Mapping[str, Any], partial: Mapping[str, Any]) -> bool:
        """Merge ``partial`` only while every ``expected`` field still holds its value.

        The check and the write happen under one lock, so a concurrent
        ``merge`` cannot slip in between. Returns whether the merge happened.
        """

        unknown = sorted((set(partial) | set(expected)) - set(FORM_DEFAULTS))
        if unknown:
            raise KeyError(f"Unknown form fields: {', '.join(unknown)}")
        with self._lock:
            if any(self._values.get(key) != value for key, value in expected.items()):
                return False
            self._values.update(partial)
            snapshot = dict(self._values)
        self._notify(snapshot)
        return True

    def reset(self) -> None:
        """Restore every field to its default."""

        with self._lock:
            self._values = dict(FORM_DEFAULTS)
            snapshot = dict(self._values)
        self._notify(snapshot)

    def subscribe(self, listener: FormListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, snapshot: dict[str, Any]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(dict(snapshot))
