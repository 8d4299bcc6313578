"""Filter, field query and facet value objects.

Each filter holds one key of a closed, resource-specific vocabulary and a
string value. Values are normalized on construction so that two filters
built from equivalent inputs (``date(2020, 1, 1)`` and ``"2020-01-01"``,
``True`` and ``"true"``) compare and render identically.
"""

from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from .log_config import logger
from .vocabulary import (
    Facet,
    FundersFilterKey,
    MembersFilterKey,
    QueryField,
    WorksFilterKey,
)


def normalize_value(value: Any) -> str:
    """Converts a filter or query value into its wire representation."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class ResourceFilter(BaseModel):
    """Base class for a single ``key:value`` filter predicate.

    Flag filters such as ``has-orcid`` take the default value ``true``.
    """

    model_config = ConfigDict(frozen=True)

    value: str = "true"

    @field_validator("value", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> str:
        return normalize_value(v)

    @property
    def fragment(self) -> str:
        return f"{self.key.value}:{self.value}"


class WorksFilter(ResourceFilter):
    key: WorksFilterKey


class MembersFilter(ResourceFilter):
    key: MembersFilterKey


class FundersFilter(ResourceFilter):
    key: FundersFilterKey


def join_filters(filters: Iterable[ResourceFilter]) -> str:
    """Renders filters as the composite ``filter`` parameter value."""
    return ",".join(f.fragment for f in filters)


class FieldQuery(BaseModel):
    """A free-text query restricted to one metadata field."""

    model_config = ConfigDict(frozen=True)

    field: QueryField
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> str:
        return " ".join(normalize_value(v).split())

    @property
    def param(self) -> tuple[str, str]:
        return f"query.{self.field.value}", self.value


class FacetCount(BaseModel):
    """A facet to compute, with an optional maximum number of values.

    Counts below 1 are raised to 1. Counts for facets the server caps
    (``orcid``, ``container-title``, ``issn``) are clamped to that cap;
    without a count, uncapped facets request every value with ``*``.
    """

    model_config = ConfigDict(frozen=True)

    facet: Facet
    count: int | None = None

    _wildcard: ClassVar[str] = "*"

    @field_validator("count")
    @classmethod
    def _clamp_count(cls, v: int | None, info: ValidationInfo) -> int | None:
        facet = info.data.get("facet")
        cap = facet.max_count if facet is not None else None
        if v is None:
            return None
        clamped = max(v, 1) if cap is None else min(max(v, 1), cap)
        if clamped != v:
            logger.debug(f"Clamped facet count {v} to {clamped}")
        return clamped

    @property
    def fragment(self) -> str:
        if self.count is not None:
            return f"{self.facet.value}:{self.count}"
        cap = self.facet.max_count
        return f"{self.facet.value}:{cap if cap is not None else self._wildcard}"


def join_facets(facets: Iterable[FacetCount]) -> str:
    return ",".join(f.fragment for f in facets)
