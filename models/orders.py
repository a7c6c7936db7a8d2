"""Pydantic models for the company directory, reschedule records and sites."""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from utils.contact import extract_company_email

logger = logging.getLogger(__name__)


def _as_text(value: object) -> str:
    """Coerce ids, zip codes and similar scalars to trimmed strings."""

    if value is None:
        return ""
    return str(value).strip()


class PackageOption(BaseModel):
    """A test package offered by a company."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(default="", validation_alias=AliasChoices("_id", "id"))
    name: str = Field(validation_alias=AliasChoices("packageName", "name"))

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _as_text(value)


class OrderReasonOption(BaseModel):
    """An order reason (random, pre-employment, ...) offered by a company."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(default="", validation_alias=AliasChoices("_id", "id"))
    name: str = Field(validation_alias=AliasChoices("orderReasonName", "name"))

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _as_text(value)


class CompanyDetails(BaseModel):
    """Address and contact block of a directory entry."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    address: str = ""
    city: str = ""
    zip: str = ""
    contact_number: str = Field(default="", validation_alias=AliasChoices("contactNumber", "contact_number"))
    state: str = ""
    state_short: str = Field(default="", validation_alias=AliasChoices("stateShort", "state_short"))

    @field_validator("address", "city", "zip", "contact_number", "state", "state_short", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _as_text(value)


class CompanyEntry(BaseModel):
    """A company visible to the current actor, with its order catalogs."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    display_name: str = Field(default="", validation_alias=AliasChoices("companyName", "display_name"))
    details: CompanyDetails = Field(
        default_factory=CompanyDetails,
        validation_alias=AliasChoices("companyDetails", "details"),
    )
    contact_email: str = Field(default="", validation_alias=AliasChoices("contact_email", "contactEmail"))
    packages: tuple[PackageOption, ...] = ()
    order_reasons: tuple[OrderReasonOption, ...] = Field(
        default=(),
        validation_alias=AliasChoices("orderReasons", "order_reasons"),
    )

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        """Fill the display name and contact email from the raw payload."""

        if not isinstance(data, dict):
            return data
        payload = dict(data)
        if not isinstance(payload.get("companyDetails"), dict):
            payload.pop("companyDetails", None)
        if not payload.get("companyName") and not payload.get("display_name"):
            for block in ("companyDetails", "companyInfoData"):
                nested = payload.get(block)
                if isinstance(nested, dict) and nested.get("companyName"):
                    payload["companyName"] = nested["companyName"]
                    break
        if not payload.get("contact_email"):
            payload["contact_email"] = extract_company_email(data)
        for key in ("packages", "orderReasons"):
            items = payload.get(key)
            if isinstance(items, list):
                payload[key] = [item for item in items if isinstance(item, dict)]
        return payload

    @field_validator("id", "display_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _as_text(value)

    def package_names(self) -> list[str]:
        return [package.name for package in self.packages]

    def order_reason_names(self) -> list[str]:
        return [reason.name for reason in self.order_reasons]


def parse_companies(raw: object) -> list[CompanyEntry]:
    """Parse a directory payload, skipping entries that fail validation."""

    if not isinstance(raw, list):
        raise ValueError("company directory payload must be a list")
    companies: list[CompanyEntry] = []
    for item in raw:
        try:
            companies.append(CompanyEntry.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed company entry: %s", exc.errors()[:1])
    return companies


class RescheduleRecord(BaseModel):
    """A previously recorded test, as handed over by the results screen.

    ``None`` means the record does not carry the field; the wizard then keeps
    whatever the form already holds.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    company_name: Optional[str] = None
    company_email: Optional[str] = None
    package_name: Optional[str] = None
    order_reason: Optional[str] = None
    dot_agency: Optional[str] = None

    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    ssn_eid: Optional[str] = None
    dob: Any = None
    phone1: Optional[str] = None
    phone2: Optional[str] = None
    observed: Any = None
    order_expires: Optional[str] = None

    addr1: Optional[str] = None
    addr2: Optional[str] = None
    city: Optional[str] = None
    state_short: Optional[str] = None
    zip: Optional[str] = None

    send_scheduling_link: Any = None
    send_donor_pass: Any = None
    email: Optional[str] = None
    cc_emails: Optional[str] = None

    @field_validator("zip", "phone1", "phone2", "ssn_eid", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class CollectionSite(BaseModel):
    """A collection site proposed by the backend for the order."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id", "siteId", "siteCode"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "siteName", "collectionSiteName"))
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    distance: Optional[float] = None
    payload: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _keep_payload(cls, data: Any) -> Any:
        if isinstance(data, dict) and "payload" not in data:
            return {**data, "payload": dict(data)}
        return data

    @field_validator("id", "name", "address", "city", "state", "zip", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _as_text(value)

    @field_validator("distance", mode="before")
    @classmethod
    def _parse_distance(cls, value: object) -> object:
        if value in (None, ""):
            return None
        try:
            return float(str(value).split()[0])
        except ValueError:
            return None

    def label(self) -> str:
        parts = [self.name or self.id]
        location = ", ".join(part for part in (self.address, self.city, self.state, self.zip) if part)
        if location:
            parts.append(location)
        if self.distance is not None:
            parts.append(f"{self.distance:g} mi")
        return " · ".join(parts)


def parse_collection_sites(raw: object) -> list[CollectionSite]:
    """Parse a site list, skipping entries that fail validation."""

    if not isinstance(raw, list):
        return []
    sites: list[CollectionSite] = []
    for item in raw:
        try:
            sites.append(CollectionSite.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed collection site: %s", exc.errors()[:1])
    return sites
