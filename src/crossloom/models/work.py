# crossloom/models/work.py
"""Pydantic models for Crossref works.

The models declare the commonly used fields of the ``/works`` records and
keep everything else as extra attributes, so new fields returned by the API
never break parsing.
Reference: https://api.crossref.org/swagger-ui/index.html
"""

from typing import Any

from pydantic import Field, field_validator

from .base import CrossrefModel


class PartialDate(CrossrefModel):
    """A date given as ``[[year, month, day]]`` parts, month and day optional."""

    date_parts: list[list[int | None]] = Field(default_factory=list, alias="date-parts")
    date_time: str | None = Field(default=None, alias="date-time")
    timestamp: int | None = None

    @property
    def year(self) -> int | None:
        if self.date_parts and self.date_parts[0]:
            return self.date_parts[0][0]
        return None


class Affiliation(CrossrefModel):
    name: str | None = None


class Contributor(CrossrefModel):
    """An author, editor, chair or translator of a work."""

    given: str | None = None
    family: str | None = None
    name: str | None = None
    orcid: str | None = Field(default=None, alias="ORCID")
    authenticated_orcid: bool | None = Field(default=None, alias="authenticated-orcid")
    sequence: str | None = None
    affiliation: list[Affiliation] = Field(default_factory=list)


class WorkFunder(CrossrefModel):
    name: str | None = None
    doi: str | None = Field(default=None, alias="DOI")
    award: list[str] = Field(default_factory=list)
    doi_asserted_by: str | None = Field(default=None, alias="doi-asserted-by")


class License(CrossrefModel):
    url: str | None = Field(default=None, alias="URL")
    content_version: str | None = Field(default=None, alias="content-version")
    delay_in_days: int | None = Field(default=None, alias="delay-in-days")
    start: PartialDate | None = None


class Work(CrossrefModel):
    """A record of the ``/works`` resource.

    Attributes:
        doi: The DOI of the work.
        title: Work titles; usually a single element.
        type: Work type id (e.g. ``journal-article``).
        publisher: Name of the publisher.
        container_title: Title of the journal, book or proceedings.
        author: Authors in the order given by the publisher.
        issued: Earliest known publication date.
        references_count: Number of references the work deposits.
        is_referenced_by_count: Number of works citing this one.
    """

    doi: str = Field(alias="DOI")
    title: list[str] = Field(default_factory=list)
    type: str | None = None
    publisher: str | None = None
    prefix: str | None = None
    member: str | None = None
    url: str | None = Field(default=None, alias="URL")
    container_title: list[str] = Field(default_factory=list, alias="container-title")
    author: list[Contributor] = Field(default_factory=list)
    editor: list[Contributor] = Field(default_factory=list)
    issued: PartialDate | None = None
    published_print: PartialDate | None = Field(default=None, alias="published-print")
    published_online: PartialDate | None = Field(
        default=None, alias="published-online"
    )
    created: PartialDate | None = None
    deposited: PartialDate | None = None
    indexed: PartialDate | None = None
    issn: list[str] = Field(default_factory=list, alias="ISSN")
    isbn: list[str] = Field(default_factory=list, alias="ISBN")
    subject: list[str] = Field(default_factory=list)
    funder: list[WorkFunder] = Field(default_factory=list)
    license: list[License] = Field(default_factory=list)
    abstract: str | None = None
    volume: str | None = None
    issue: str | None = None
    page: str | None = None
    references_count: int | None = Field(default=None, alias="references-count")
    is_referenced_by_count: int | None = Field(
        default=None, alias="is-referenced-by-count"
    )
    score: float | None = None

    @field_validator("title", "container_title", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class Agency(CrossrefModel):
    id: str
    label: str | None = None


class WorkAgency(CrossrefModel):
    """Registration agency of a DOI, from ``/works/{doi}/agency``."""

    doi: str = Field(alias="DOI")
    agency: Agency
