"""Immutable, chainable query builders for each Crossref resource.

Every builder method returns a new frozen query and never raises on the
combination of settings it is given. Combinations the server does not
accept (an order without a sort, a cursor next to an offset) are resolved
when the query is rendered by :func:`crossloom.render.render`.

Filters, field queries and facets follow a last-write-wins policy: adding
an entry whose key is already present replaces the earlier value in its
original position, so no key is ever emitted twice.

Example:
    >>> q = WorksQuery().term("Machine Learning").sort(Sort.SCORE).order(Order.ASC)
    >>> q = q.add_filter(WorksFilterKey.HAS_ORCID).limit(20)
"""

from collections.abc import Callable, Hashable
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypeVar

from pydantic import BaseModel, ConfigDict

from .config import MAX_ROWS, MAX_SAMPLE
from .filters import (
    FacetCount,
    FieldQuery,
    FundersFilter,
    MembersFilter,
    ResourceFilter,
    WorksFilter,
)
from .log_config import logger
from .vocabulary import Facet, Order, QueryField, ResourceKind, Sort

if TYPE_CHECKING:
    from .targets import ResourceTarget

START_CURSOR = "*"
"""Cursor value that starts a new deep paging walk."""

_T = TypeVar("_T")


def _upsert(
    entries: tuple[_T, ...], new: _T, key_of: Callable[[_T], Hashable]
) -> tuple[_T, ...]:
    key = key_of(new)
    for index, entry in enumerate(entries):
        if key_of(entry) == key:
            return entries[:index] + (new,) + entries[index + 1 :]
    return entries + (new,)


def _clamp(name: str, value: int, low: int, high: int) -> int:
    clamped = min(max(value, low), high)
    if clamped != value:
        logger.debug(f"Clamped {name}={value} to {clamped} (allowed {low}..{high})")
    return clamped


class ResourceQuery(BaseModel):
    """Query options shared by every resource that supports listing."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ResourceKind]

    text: str | None = None
    sort_field: Sort | None = None
    sort_order: Order | None = None
    rows: int | None = None
    skip: int | None = None

    def _replace(self, **update: Any) -> Self:
        return self.model_copy(update=update)

    def term(self, text: str | None) -> Self:
        """Sets the free-text ``query`` term, replacing any previous term.

        Whitespace runs are collapsed; an empty term matches everything.
        """
        if text is None:
            return self._replace(text=None)
        collapsed = " ".join(str(text).split())
        return self._replace(text=collapsed or None)

    def sort(self, field: Sort | str) -> Self:
        return self._replace(sort_field=Sort(field))

    def order(self, direction: Order | str) -> Self:
        """Sets the sort direction. Ignored on the wire unless a sort is set."""
        return self._replace(sort_order=Order(direction))

    def limit(self, rows: int) -> Self:
        """Limits the number of rows returned.

        The value is clamped to the server maximum of 1000. A query with a
        limit is always fetched as exactly one page, even when deep paging
        is requested.
        """
        return self._replace(rows=_clamp("rows", int(rows), 0, MAX_ROWS))

    def offset(self, offset: int) -> Self:
        offset = int(offset)
        return self._replace(skip=_clamp("offset", offset, 0, max(offset, 0)))

    def into_query(self) -> "ResourceTarget":
        from .targets import ResourceTarget

        return ResourceTarget.of_query(self)

    def into_identifier(self, id: str) -> "ResourceTarget":
        """Targets a single item of this query's resource kind.

        The query options are discarded; single items take no parameters.
        """
        from .targets import ResourceTarget

        return ResourceTarget.identifier(self.kind, id)


class FilterableQuery(ResourceQuery):
    """A query whose resource accepts a ``filter`` parameter."""

    filter_type: ClassVar[type[ResourceFilter]]

    filters: tuple[ResourceFilter, ...] = ()

    def add_filter(
        self, filter: ResourceFilter | Enum | str, value: Any = True
    ) -> Self:
        """Adds a filter, replacing an existing filter with the same key.

        Args:
            filter: A filter instance of this query's filter type, or a
                filter key (enum member or its wire name).
            value: The filter value when a key is given. Flag filters
                default to ``true``.
        """
        if not isinstance(filter, self.filter_type):
            filter = self.filter_type(key=filter, value=value)
        return self._replace(filters=_upsert(self.filters, filter, lambda f: f.key))


class NestsWorksMixin:
    """Conversion for resources that own a list of works."""

    kind: ClassVar[ResourceKind]

    def into_nested_works(
        self, id: str, works: "WorksQuery | None" = None
    ) -> "ResourceTarget":
        """Targets the works registered under item ``id`` of this resource."""
        from .targets import ResourceTarget

        return ResourceTarget.nested_works(self.kind, id, works)


class WorksQuery(FilterableQuery):
    """Query for the ``/works`` resource.

    Only works support field queries, facets, sampling and deep paging
    cursors.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.WORKS
    filter_type: ClassVar[type[ResourceFilter]] = WorksFilter

    filters: tuple[WorksFilter, ...] = ()
    field_queries: tuple[FieldQuery, ...] = ()
    facets: tuple[FacetCount, ...] = ()
    cursor_token: str | None = None
    sample_size: int | None = None

    def add_field_query(self, field: QueryField | str, value: str) -> Self:
        entry = FieldQuery(field=field, value=value)
        return self._replace(
            field_queries=_upsert(self.field_queries, entry, lambda q: q.field)
        )

    def add_facet(
        self, facet: FacetCount | Facet | str, count: int | None = None
    ) -> Self:
        if not isinstance(facet, FacetCount):
            facet = FacetCount(facet=facet, count=count)
        return self._replace(facets=_upsert(self.facets, facet, lambda f: f.facet))

    def cursor(self, token: str) -> Self:
        """Resumes from a server-issued cursor token."""
        return self._replace(cursor_token=token)

    def new_cursor(self) -> Self:
        return self._replace(cursor_token=START_CURSOR)

    def without_cursor(self) -> Self:
        return self._replace(cursor_token=None)

    def sample(self, size: int) -> Self:
        """Requests ``size`` random works (at most 100) instead of a listing."""
        return self._replace(sample_size=_clamp("sample", int(size), 1, MAX_SAMPLE))

    def combine_with(self, kind: ResourceKind | str, id: str) -> "ResourceTarget":
        """Reinterprets this query as the works of another resource's item.

        ``WorksQuery().combine_with(ResourceKind.MEMBERS, "98")`` renders the
        same request as ``ResourceTarget.nested_works(MEMBERS, "98", query)``.
        """
        from .targets import ResourceTarget

        return ResourceTarget.nested_works(kind, id, self)


class MembersQuery(NestsWorksMixin, FilterableQuery):
    kind: ClassVar[ResourceKind] = ResourceKind.MEMBERS
    filter_type: ClassVar[type[ResourceFilter]] = MembersFilter

    filters: tuple[MembersFilter, ...] = ()


class FundersQuery(NestsWorksMixin, FilterableQuery):
    kind: ClassVar[ResourceKind] = ResourceKind.FUNDERS
    filter_type: ClassVar[type[ResourceFilter]] = FundersFilter

    filters: tuple[FundersFilter, ...] = ()


class JournalsQuery(NestsWorksMixin, ResourceQuery):
    kind: ClassVar[ResourceKind] = ResourceKind.JOURNALS


class TypesQuery(NestsWorksMixin, ResourceQuery):
    kind: ClassVar[ResourceKind] = ResourceKind.TYPES


QUERY_TYPES: dict[ResourceKind, type[ResourceQuery]] = {
    ResourceKind.WORKS: WorksQuery,
    ResourceKind.MEMBERS: MembersQuery,
    ResourceKind.FUNDERS: FundersQuery,
    ResourceKind.JOURNALS: JournalsQuery,
    ResourceKind.TYPES: TypesQuery,
}
"""Query class per listable resource. Prefixes cannot be listed."""
