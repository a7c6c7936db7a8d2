from pathlib import Path
import sys
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any, Callable

import streamlit as st

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import ActorRole  # noqa: E402
from core.errors import BackendError, NotFoundError  # noqa: E402


@dataclass
class _SessionDict(dict[str, object]):
    """Lightweight replacement for ``st.session_state`` during tests."""

    def clear(self) -> None:  # type: ignore[override]
        super().clear()


@pytest.fixture(autouse=True)
def _stub_streamlit_session_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Streamlit's runtime-bound session state with a plain dictionary."""

    session_state = _SessionDict()
    monkeypatch.setattr(st, "session_state", session_state, raising=False)
    yield


class DeferredExecutor(Executor):
    """Executor that queues work until the test decides to run it."""

    def __init__(self) -> None:
        self.pending: list[tuple[Future, Callable[..., Any], tuple, dict]] = []
        self.shut_down = False

    def submit(self, fn, /, *args, **kwargs):  # type: ignore[override]
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_next(self) -> None:
        future, fn, args, kwargs = self.pending.pop(0)
        self._run(future, fn, args, kwargs)

    def run_at(self, index: int) -> None:
        future, fn, args, kwargs = self.pending.pop(index)
        self._run(future, fn, args, kwargs)

    def run_all(self) -> None:
        while self.pending:
            self.run_next()

    @staticmethod
    def _run(future: Future, fn, args, kwargs) -> None:
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self.shut_down = True


class ImmediateExecutor(DeferredExecutor):
    """Executor that runs work synchronously on submit."""

    def submit(self, fn, /, *args, **kwargs):  # type: ignore[override]
        future: Future = Future()
        self._run(future, fn, args, kwargs)
        return future


ACME = {
    "_id": "c1",
    "companyName": "Acme Corp",
    "companyDetails": {
        "address": "1 Main St",
        "city": "Springfield",
        "zip": "62701",
        "contactNumber": "555-0100",
        "state": "il",
        "contactEmail": "ops@acme-corp.com",
    },
    "packages": [
        {"_id": "p1", "packageName": "DOT PANEL"},
        {"_id": "p2", "packageName": "NON-DOT 5 PANEL"},
    ],
    "orderReasons": [
        {"_id": "r1", "orderReasonName": "RANDOM"},
        {"_id": "r2", "orderReasonName": "PRE-EMPLOYMENT"},
    ],
}

GLOBEX = {
    "_id": "c2",
    "companyName": "Globex",
    "companyDetails": {"address": "9 Elm Rd", "city": "Shelbyville", "zip": "62565", "stateShort": "IL"},
    "email": "hello@globex-inc.com",
    "packages": [{"_id": "p3", "packageName": "NON-DOT 10 PANEL"}],
    "orderReasons": [{"_id": "r3", "orderReasonName": "POST-ACCIDENT"}],
}

SITES = [
    {"_id": "s1", "name": "North Clinic", "address": "10 North Ave", "city": "Springfield", "distance": "2.5 mi"},
    {"_id": "s2", "name": "South Lab", "city": "Springfield", "distance": 4},
]


@dataclass
class FakeBackend:
    """In-memory stand-in for :class:`integrations.backend.BackendClient`."""

    companies: list[Any] = field(default_factory=lambda: [ACME, GLOBEX])
    directory_error: Exception | None = None
    # (role, company name) -> email, or an exception to raise
    agencies: dict[tuple[ActorRole, str], Any] = field(default_factory=dict)
    site_response: dict[str, Any] = field(default_factory=lambda: {"caseNumber": "CASE-1", "data": SITES})
    site_error: Exception | None = None
    pincode_sites: list[Any] = field(default_factory=list)
    submit_response: dict[str, Any] = field(default_factory=lambda: {"orderId": "ORD-9"})
    submit_error: Exception | None = None
    role: ActorRole = ActorRole.AGENCY
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def get_company_directory(self, token):
        self.calls.append(("directory", token))
        if self.directory_error is not None:
            raise self.directory_error
        return list(self.companies)

    def find_agency_email(self, token, company_name, *, role=None):
        role = role or self.role
        self.calls.append(("agency", (role, company_name)))
        answer = self.agencies.get((role, company_name), NotFoundError("no agency", status_code=404))
        if isinstance(answer, Exception):
            raise answer
        return answer

    def get_site_information(self, token, body):
        self.calls.append(("sites", body))
        if self.site_error is not None:
            raise self.site_error
        return dict(self.site_response)

    def handle_new_pincode(self, token, case_number, data):
        self.calls.append(("pincode", (case_number, data)))
        return list(self.pincode_sites)

    def submit_order(self, token, body, attachment=None):
        self.calls.append(("submit", (body, attachment)))
        if self.submit_error is not None:
            raise self.submit_error
        return dict(self.submit_response)

    def calls_named(self, name: str) -> list[Any]:
        return [payload for call, payload in self.calls if call == name]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def deferred() -> DeferredExecutor:
    return DeferredExecutor()


@pytest.fixture
def immediate() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def server_error() -> BackendError:
    return BackendError("boom", status_code=500)
