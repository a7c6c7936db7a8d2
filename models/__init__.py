"""Pydantic models for order workflow payloads."""

from .orders import (
    CollectionSite,
    CompanyDetails,
    CompanyEntry,
    OrderReasonOption,
    PackageOption,
    RescheduleRecord,
    parse_collection_sites,
    parse_companies,
)

__all__ = [
    "CollectionSite",
    "CompanyDetails",
    "CompanyEntry",
    "OrderReasonOption",
    "PackageOption",
    "RescheduleRecord",
    "parse_collection_sites",
    "parse_companies",
]
