"""Pydantic models for Crossref responses and records."""

from .base import CrossrefModel, FacetValues, Page, QueryInfo, ResponseEnvelope
from .registry import (
    CrossrefType,
    Funder,
    Journal,
    Member,
    MemberCounts,
    MemberPrefix,
    Prefix,
)
from .work import (
    Affiliation,
    Agency,
    Contributor,
    License,
    PartialDate,
    Work,
    WorkAgency,
    WorkFunder,
)

__all__ = [
    "Affiliation",
    "Agency",
    "Contributor",
    "CrossrefModel",
    "CrossrefType",
    "FacetValues",
    "Funder",
    "Journal",
    "License",
    "Member",
    "MemberCounts",
    "MemberPrefix",
    "Page",
    "PartialDate",
    "Prefix",
    "QueryInfo",
    "ResponseEnvelope",
    "Work",
    "WorkAgency",
    "WorkFunder",
]
