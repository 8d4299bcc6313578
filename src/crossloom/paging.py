"""Cursor based deep paging over works listings.

A :class:`DeepPager` walks an unbounded works listing one page at a time.
It renders its target once, keeps that request as a template and only
rewrites the ``cursor`` parameter between requests::

    INIT -> ACTIVE -> EXHAUSTED
                   -> ERROR

Each :meth:`DeepPager.advance` issues exactly one transport call. The walk
ends when a page comes back empty, when the server stops returning a
cursor, or when it returns the cursor that was just sent. A transport error
ends the walk for good and is re-raised unchanged.

Queries with an explicit ``limit`` (or a ``sample``) are never deep paged:
they produce exactly one request without a cursor and exactly one page.
"""

from collections.abc import AsyncIterator
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .config import DEFAULT_DEEP_PAGE_ROWS, MAX_ROWS
from .exceptions import ValidationError
from .log_config import logger
from .models.base import Page
from .query import START_CURSOR, ResourceQuery, _clamp
from .render import RenderedRequest, render
from .targets import ResourceTarget
from .transport import Transport


class PagerState(Enum):
    INIT = "init"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    ERROR = "error"


class DeepPager:
    """Pull-based page walker for a works listing.

    Not restartable and not safe for concurrent advancement: construct a
    new pager to walk the listing again.

    Attributes:
        state: The current :class:`PagerState`.
        cursor: The cursor the next request will carry.
        template: The rendered request without a cursor.
    """

    def __init__(
        self,
        transport: Transport,
        target: ResourceTarget | ResourceQuery,
        *,
        page_size: int = DEFAULT_DEEP_PAGE_ROWS,
        item_model: type[BaseModel] | None = None,
    ):
        """Prepare a walk over ``target``.

        Args:
            transport: The transport issuing the requests.
            target: A works query, or a target listing works (a works query
                or nested works).
            page_size: Rows per request when the query sets no limit,
                clamped to 1..1000.
            item_model: Optional model each item is parsed into.

        Raises:
            ValidationError: If ``target`` does not list works.
        """
        if isinstance(target, ResourceQuery):
            target = target.into_query()
        works = target.works_query
        if works is None:
            raise ValidationError(
                f"Deep paging needs a works listing, got a {target.variant.value} "
                f"target on /{target.kind.value}"
            )

        self._transport = transport
        self._item_model = item_model
        self._single_page = works.rows is not None or works.sample_size is not None
        self._cursor: str = works.cursor_token or START_CURSOR
        page_size = _clamp("page_size", int(page_size), 1, MAX_ROWS)
        self._template: RenderedRequest = render(
            target.with_query(works.without_cursor()), page_size=page_size
        )
        self._state = PagerState.INIT
        if self._single_page:
            logger.debug(
                f"Deep paging disabled for {self._template.path}: "
                "the query sets a limit or a sample"
            )

    @property
    def state(self) -> PagerState:
        return self._state

    @property
    def cursor(self) -> str:
        return self._cursor

    @property
    def template(self) -> RenderedRequest:
        return self._template

    def _next_request(self) -> RenderedRequest:
        if self._single_page:
            return self._template
        return self._template.with_cursor(self._cursor)

    def _transition(self, state: PagerState) -> None:
        if state is not self._state:
            logger.debug(
                f"Pager {self._template.path}: {self._state.value} -> {state.value}"
            )
        self._state = state

    async def advance(self) -> Page | None:
        """Fetch the next page.

        Returns:
            Page | None: The next page, or ``None`` once the walk is over.

        Raises:
            TransportError: Propagated unchanged from the transport. The
                pager is then in the ``ERROR`` state, as it is when a page
                cannot be built from the response.
        """
        if self._state in (PagerState.EXHAUSTED, PagerState.ERROR):
            return None
        self._transition(PagerState.ACTIVE)

        request = self._next_request()
        try:
            envelope = await self._transport.fetch(request.path, request.params)
            page = Page.from_envelope(envelope, self._item_model)
        except Exception:
            self._transition(PagerState.ERROR)
            raise

        if self._single_page:
            self._transition(PagerState.EXHAUSTED)
            return page

        if not page.items:
            self._transition(PagerState.EXHAUSTED)
            return None

        next_cursor = page.next_cursor
        if next_cursor is None or next_cursor == self._cursor:
            if next_cursor is not None:
                logger.debug(f"Cursor did not advance ({next_cursor!r}), stopping")
            self._transition(PagerState.EXHAUSTED)
        else:
            self._cursor = next_cursor
        return page

    async def pages(self) -> AsyncIterator[Page]:
        """Yield pages lazily, one request per page, until the walk ends."""
        while (page := await self.advance()) is not None:
            yield page

    async def items(self) -> AsyncIterator[Any]:
        """Yield the items of every page in server order."""
        async for page in self.pages():
            for item in page.items:
                yield item

    def __aiter__(self) -> AsyncIterator[Page]:
        return self.pages()
