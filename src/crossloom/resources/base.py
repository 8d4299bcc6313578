# crossloom/resources/base.py
"""Composable mixins for the per-resource façade clients.

Each façade is a thin layer over the target algebra: it builds a
:class:`ResourceTarget` for its resource kind and hands it to the
:class:`CrossrefClient`, which renders it and talks to the transport.
A concrete resource client inherits from :class:`BaseResourceClient` plus
the mixins matching the routes its resource offers.
"""

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel

from ..exceptions import ValidationError
from ..log_config import logger
from ..models import Page, Work
from ..query import ResourceQuery, WorksQuery
from ..targets import ResourceTarget
from ..vocabulary import ResourceKind

if TYPE_CHECKING:
    from ..client import CrossrefClient
    from ..paging import DeepPager


class ResourceClientProtocol(Protocol):
    """Attributes the resource mixins rely on."""

    _api_client: "CrossrefClient"
    _kind: ResourceKind
    _message_type: str
    _entity_model: type[BaseModel] | None
    _query_type: type[ResourceQuery] | None

    def _coerce_query(self, query: ResourceQuery | None) -> ResourceQuery: ...


class BaseResourceClient:
    """Base class for all resource clients.

    Attributes:
        _api_client: The owning :class:`CrossrefClient`.
        _kind: The resource kind this client addresses.
        _message_type: Message type of a single item response, e.g. ``work``.
        _entity_model: Pydantic model for a single item. Items that fail to
            parse are returned as raw dicts.
        _query_type: Query class for listing this resource, if it can be listed.
    """

    _kind: ResourceKind
    _message_type: str
    _entity_model: type[BaseModel] | None = None
    _query_type: type[ResourceQuery] | None = None

    def __init__(self, api_client: "CrossrefClient"):
        self._api_client = api_client
        logger.debug(f"{self.__class__.__name__} initialized")

    def new_query(self) -> ResourceQuery:
        """Returns an empty query for this resource."""
        if self._query_type is None:
            raise ValidationError(f"/{self._kind.value} cannot be queried")
        return self._query_type()

    def _coerce_query(self, query: ResourceQuery | None) -> ResourceQuery:
        if query is None:
            return self.new_query()
        if query.kind is not self._kind:
            raise ValidationError(
                f"{type(query).__name__} cannot be used with /{self._kind.value}"
            )
        return query


class GettableMixin:
    """Fetches single items by id from ``/<kind>/<id>``."""

    async def get(self: ResourceClientProtocol, id: str) -> Any:
        """Retrieve a single item by its id.

        Args:
            id: The item id (a DOI, member id, funder id, ISSN, type id or prefix).

        Returns:
            Any: The parsed item, or the raw dict if parsing failed.

        Raises:
            NotFoundError: If no item has this id.
            UnexpectedMessageError: If the server answers with another message type.
        """
        logger.info(f"Fetching /{self._kind.value}/{id}")
        target = ResourceTarget.identifier(self._kind, id)
        return await self._api_client.fetch_item(
            target, self._message_type, self._entity_model
        )


class SearchableMixin:
    """Lists one page of ``/<kind>`` for a query."""

    async def search(
        self: ResourceClientProtocol, query: ResourceQuery | None = None
    ) -> Page:
        """Fetch a single page of results.

        Args:
            query: The query to run; an empty query lists everything.

        Returns:
            Page: The page, items parsed into the resource model where possible.
        """
        query = self._coerce_query(query)
        return await self._api_client.fetch_page(
            query.into_query(), self._entity_model
        )


class CursorIterableMixin:
    """Walks all results of a works query with a deep paging cursor."""

    def pager(
        self: ResourceClientProtocol,
        query: ResourceQuery | None = None,
        *,
        page_size: int | None = None,
    ) -> "DeepPager":
        query = self._coerce_query(query)
        return self._api_client.deep_page(
            query.into_query(), page_size=page_size, item_model=self._entity_model
        )

    async def iterate(
        self,
        query: ResourceQuery | None = None,
        *,
        page_size: int | None = None,
    ) -> AsyncIterator[Any]:
        """Iterate over every result of ``query``.

        A query with a ``limit`` yields at most that many items from a single
        request.

        Yields:
            Any: Items in server order.
        """
        pager = self.pager(query, page_size=page_size)
        async for item in pager.items():
            yield item


class NestedWorksMixin:
    """Lists the works registered under an item, ``/<kind>/<id>/works``."""

    async def works(
        self: ResourceClientProtocol, id: str, query: WorksQuery | None = None
    ) -> Page:
        """Fetch one page of works belonging to item ``id``."""
        target = ResourceTarget.nested_works(self._kind, id, query)
        return await self._api_client.fetch_page(target, Work)

    async def iterate_works(
        self: ResourceClientProtocol,
        id: str,
        query: WorksQuery | None = None,
        *,
        page_size: int | None = None,
    ) -> AsyncIterator[Any]:
        """Iterate over every work belonging to item ``id``."""
        target = ResourceTarget.nested_works(self._kind, id, query)
        pager = self._api_client.deep_page(
            target, page_size=page_size, item_model=Work
        )
        async for item in pager.items():
            yield item
