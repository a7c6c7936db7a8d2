"""HTTP client for the order backend.

Every call carries the caller's bearer token explicitly; nothing is stored on
module level. Transport failures, timeouts and undecodable bodies surface as
:class:`core.errors.BackendUnavailableError`, ``404`` as
:class:`core.errors.NotFoundError` and any other non-2xx status as
:class:`core.errors.BackendError`.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

import requests

import config as app_config
from config import ActorRole
from core.errors import BackendError, BackendUnavailableError, NotFoundError
from infra.logging import log_event

logger = logging.getLogger(__name__)

COMPANY_DIRECTORY_PATH = "/{role}/getAllCompanyAllDetials"
AGENCY_LOOKUP_PATH = "/{role}/findAgencyByCompanyName"
SITE_INFORMATION_PATH = "/{role}/getSiteInformation"
NEW_PINCODE_PATH = "/{role}/handleNewPincode"
SUBMIT_ORDER_PATH = "/{role}/newDriverSubmitOrder"


@dataclass(frozen=True)
class Attachment:
    """A file uploaded together with the final order submission."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def _message_from(payload: object, fallback: str) -> str:
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return fallback


class BackendClient:
    """Thin ``requests`` wrapper around the order REST endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        role: ActorRole | str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or app_config.API_URL).rstrip("/")
        self.role = app_config.normalise_role(role, default=app_config.ACTOR_ROLE)
        self.timeout = timeout or app_config.HTTP_TIMEOUT
        self._session = session or requests.Session()

    def path(self, template: str, *, role: ActorRole | None = None) -> str:
        return template.format(role=(role or self.role).value)

    def request(
        self,
        method: str,
        path: str,
        token: str | None,
        *,
        json_body: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""

        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        secrets = (token,) if token else ()
        started = time.monotonic()
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                json=json_body if files is None else None,
                files=files,
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log_event(
                "warning",
                endpoint=path,
                method=method,
                duration=time.monotonic() - started,
                outcome="unreachable",
                secrets=secrets,
            )
            raise BackendUnavailableError(f"{method} {path} failed: {exc}", endpoint=path) from exc

        duration = time.monotonic() - started
        status = response.status_code
        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = None

        if status == 404:
            log_event("info", endpoint=path, method=method, status=status, duration=duration, outcome="not_found", secrets=secrets)
            raise NotFoundError(_message_from(payload, "Not found"), endpoint=path, status_code=status)
        if not response.ok:
            log_event("warning", endpoint=path, method=method, status=status, duration=duration, outcome="error", secrets=secrets)
            raise BackendError(
                _message_from(payload, f"{method} {path} returned {status}"),
                endpoint=path,
                status_code=status,
            )
        if payload is None:
            log_event("warning", endpoint=path, method=method, status=status, duration=duration, outcome="invalid_json", secrets=secrets)
            raise BackendUnavailableError(f"{method} {path} returned invalid JSON", endpoint=path, status_code=status)
        log_event("debug", endpoint=path, method=method, status=status, duration=duration, outcome="ok", secrets=secrets)
        return payload

    def get_company_directory(self, token: str | None) -> list[Any]:
        """Return the raw company list visible to the current actor."""

        payload = self.request("GET", self.path(COMPANY_DIRECTORY_PATH), token)
        data = payload.get("data") if isinstance(payload, Mapping) else None
        if data is None:
            return []
        if not isinstance(data, list):
            raise BackendUnavailableError("company directory payload is not a list", endpoint=COMPANY_DIRECTORY_PATH)
        return data

    def find_agency_email(self, token: str | None, company_name: str, *, role: ActorRole | None = None) -> str:
        """Return the managing agency email for ``company_name`` (may be ``""``)."""

        payload = self.request(
            "POST",
            self.path(AGENCY_LOOKUP_PATH, role=role),
            token,
            json_body={"companyName": company_name},
        )
        data = payload.get("data") if isinstance(payload, Mapping) else None
        if isinstance(data, Mapping):
            email = data.get("agencyEmail")
            if isinstance(email, str):
                return email.strip()
        return ""

    def get_site_information(self, token: str | None, body: Mapping[str, Any]) -> Mapping[str, Any]:
        payload = self.request("POST", self.path(SITE_INFORMATION_PATH), token, json_body=body)
        return payload if isinstance(payload, Mapping) else {}

    def handle_new_pincode(self, token: str | None, case_number: str, data: Any) -> list[Any]:
        payload = self.request(
            "POST",
            self.path(NEW_PINCODE_PATH),
            token,
            json_body={"caseNumber": case_number, "data": data},
        )
        sites = payload.get("data") if isinstance(payload, Mapping) else None
        return sites if isinstance(sites, list) else []

    def submit_order(
        self,
        token: str | None,
        body: Mapping[str, Any],
        attachment: Attachment | None = None,
    ) -> Mapping[str, Any]:
        """Submit the final order, as JSON or as multipart when a file is attached."""

        path = self.path(SUBMIT_ORDER_PATH)
        if attachment is None:
            payload = self.request("POST", path, token, json_body=body)
        else:
            payload = self.request(
                "POST",
                path,
                token,
                data={"payload": json.dumps(body)},
                files={"file": (attachment.filename, attachment.content, attachment.content_type)},
            )
        return payload if isinstance(payload, Mapping) else {}
