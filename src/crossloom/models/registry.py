# crossloom/models/registry.py
"""Pydantic models for the registry resources of Crossref.

Members, funders, journals, types and prefixes describe who deposits works
and how they are classified. The models keep unknown fields.
"""

from typing import Any

from pydantic import Field, field_validator

from .base import CrossrefModel


class MemberCounts(CrossrefModel):
    total_dois: int | None = Field(default=None, alias="total-dois")
    current_dois: int | None = Field(default=None, alias="current-dois")
    backfile_dois: int | None = Field(default=None, alias="backfile-dois")


class MemberPrefix(CrossrefModel):
    value: str
    name: str | None = None
    public_references: bool | None = Field(default=None, alias="public-references")
    reference_visibility: str | None = Field(
        default=None, alias="reference-visibility"
    )


class Member(CrossrefModel):
    """A Crossref member (publisher or other depositing organization).

    Attributes:
        id: Numeric member id.
        primary_name: Display name of the member.
        prefixes: DOI prefixes owned by the member.
        counts: DOI counts split into current and backfile.
    """

    id: int
    primary_name: str | None = Field(default=None, alias="primary-name")
    location: str | None = None
    names: list[str] = Field(default_factory=list)
    prefixes: list[str] = Field(default_factory=list)
    prefix: list[MemberPrefix] = Field(default_factory=list)
    counts: MemberCounts | None = None
    flags: dict[str, bool] = Field(default_factory=dict)
    coverage: dict[str, Any] = Field(default_factory=dict)


class Funder(CrossrefModel):
    """A funder from the Open Funder Registry."""

    id: str
    name: str
    location: str | None = None
    uri: str | None = None
    alt_names: list[str] = Field(default_factory=list, alias="alt-names")
    replaces: list[str] = Field(default_factory=list)
    replaced_by: list[str] = Field(default_factory=list, alias="replaced-by")
    tokens: list[str] = Field(default_factory=list)
    work_count: int | None = Field(default=None, alias="work-count")
    descendant_work_count: int | None = Field(
        default=None, alias="descendant-work-count"
    )
    descendants: list[str] = Field(default_factory=list)


class Journal(CrossrefModel):
    title: str | None = None
    publisher: str | None = None
    issn: list[str] = Field(default_factory=list, alias="ISSN")
    issn_type: list[dict[str, Any]] = Field(default_factory=list, alias="issn-type")
    subjects: list[Any] = Field(default_factory=list)
    counts: dict[str, Any] | None = None
    flags: dict[str, Any] | None = None

    @field_validator("issn", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> Any:
        return [] if v is None else v


class CrossrefType(CrossrefModel):
    """A work type as listed by ``/types``."""

    id: str
    label: str


class Prefix(CrossrefModel):
    member: str
    name: str
    prefix: str
