"""Rendering of resource targets into request paths and ordered parameters.

:func:`render` is pure: equal targets always render to equal
:class:`RenderedRequest` values, and therefore to byte-identical URLs.
Parameters are emitted in a fixed order::

    query, query.<field>..., filter, facet, sort, order, rows, offset, sample, cursor

Combinations the server rejects are normalized here rather than in the
query builders:

- ``order`` is only emitted together with ``sort``.
- ``cursor`` suppresses ``offset``.
- ``sample`` suppresses ``rows``, ``offset`` and ``cursor``.
"""

from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict

from .filters import join_facets, join_filters
from .log_config import logger
from .query import FilterableQuery, ResourceQuery, WorksQuery
from .targets import ResourceTarget, TargetVariant

CURSOR_PARAM = "cursor"
OFFSET_PARAM = "offset"

_ID_SAFE = "/:;()<>"


class RenderedRequest(BaseModel):
    """A request path plus its ordered query parameters."""

    model_config = ConfigDict(frozen=True)

    path: str
    params: tuple[tuple[str, str], ...] = ()

    def get(self, key: str) -> str | None:
        for name, value in self.params:
            if name == key:
                return value
        return None

    def with_cursor(self, token: str) -> "RenderedRequest":
        """Returns this request with its ``cursor`` parameter set to ``token``.

        Only the cursor changes; an ``offset`` is dropped since the two are
        mutually exclusive on the server.
        """
        params: list[tuple[str, str]] = []
        replaced = False
        for name, value in self.params:
            if name == OFFSET_PARAM:
                continue
            if name == CURSOR_PARAM:
                params.append((CURSOR_PARAM, token))
                replaced = True
            else:
                params.append((name, value))
        if not replaced:
            params.append((CURSOR_PARAM, token))
        return RenderedRequest(path=self.path, params=tuple(params))

    def query_string(self) -> str:
        return str(httpx.QueryParams(list(self.params)))

    def url(self, base_url: str) -> str:
        url = f"{base_url.rstrip('/')}{self.path}"
        qs = self.query_string()
        return f"{url}?{qs}" if qs else url


def _quote_id(id: str | None) -> str:
    return quote(id or "", safe=_ID_SAFE)

def _query_params(
    query: ResourceQuery, page_size: int | None
) -> list[tuple[str, str]]:
    works = query if isinstance(query, WorksQuery) else None
    params: list[tuple[str, str]] = []

    if query.text:
        params.append(("query", query.text))
    if works is not None:
        params.extend(fq.param for fq in works.field_queries)
    if isinstance(query, FilterableQuery) and query.filters:
        params.append(("filter", join_filters(query.filters)))
    if works is not None and works.facets:
        params.append(("facet", join_facets(works.facets)))

    if query.sort_field is not None:
        params.append(("sort", query.sort_field.value))
        if query.sort_order is not None:
            params.append(("order", query.sort_order.value))
    elif query.sort_order is not None:
        logger.debug(
            f"Dropping order={query.sort_order.value}: no sort field was given"
        )

    if works is not None and works.sample_size is not None:
        params.append(("sample", str(works.sample_size)))
        return params

    rows = query.rows if query.rows is not None else page_size
    if rows is not None:
        params.append(("rows", str(rows)))

    cursor = works.cursor_token if works is not None else None
    if cursor is not None:
        if query.skip is not None:
            logger.debug(f"Dropping offset={query.skip}: a cursor is set")
        params.append((CURSOR_PARAM, cursor))
    elif query.skip is not None:
        params.append((OFFSET_PARAM, str(query.skip)))
    return params


def render(
    target: ResourceTarget | ResourceQuery, *, page_size: int | None = None
) -> RenderedRequest:
    """Renders a target, or a bare query, into a request.

    Ids are percent-encoded into the path; ``/`` and the punctuation common
    in DOIs are kept as is.

    Args:
        target: The target to render. A query is rendered as its own
            ``QUERY`` target.
        page_size: Rows to request when the query sets no explicit limit.
            Used by the deep pager; omitted means the server default.

    Returns:
        RenderedRequest: The path and ordered parameters.
    """
    if isinstance(target, ResourceQuery):
        target = target.into_query()

    item_path = f"{target.kind.path}/{_quote_id(target.id)}"
    if target.variant is TargetVariant.IDENTIFIER:
        return RenderedRequest(path=item_path)
    if target.variant is TargetVariant.AGENCY:
        return RenderedRequest(path=f"{item_path}/agency")

    assert target.query is not None
    if target.variant is TargetVariant.NESTED_WORKS:
        path = f"{item_path}/works"
    else:
        path = target.kind.path
    return RenderedRequest(
        path=path, params=tuple(_query_params(target.query, page_size))
    )
