# crossloom/models/base.py
"""Envelope and page models shared by every Crossref response.

Every Crossref response is wrapped in the same envelope::

    {
        "status": "ok",
        "message-type": "work-list",
        "message-version": "1.0.0",
        "message": {
            "facets": {},
            "next-cursor": "AoJ...",
            "total-results": 1000,
            "items-per-page": 20,
            "query": {"start-index": 0, "search-terms": null},
            "items": [...]
        }
    }

Single item routes carry the item itself as ``message``.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..log_config import logger

ItemType = TypeVar("ItemType", bound=BaseModel)


class CrossrefModel(BaseModel):
    """Base for loose record models.

    Fields are declared in snake case and read from the kebab-case keys the
    API uses. Unknown fields are kept.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class QueryInfo(CrossrefModel):
    start_index: int | None = Field(default=None, alias="start-index")
    search_terms: str | None = Field(default=None, alias="search-terms")


class FacetValues(CrossrefModel):
    value_count: int | None = Field(default=None, alias="value-count")
    values: dict[str, int] = Field(default_factory=dict)


class ResponseEnvelope(BaseModel):
    """A decoded Crossref response.

    Attributes:
        status: ``ok`` for successful responses.
        message_type: The kind of message, e.g. ``work-list`` or ``member``.
        message_version: Version of the message schema.
        message: The message body: a list message (dict with ``items``), a
            single record, or ``None``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: str
    message_type: str = Field(alias="message-type")
    message_version: str = Field(default="1.0.0", alias="message-version")
    message: Any = None

    @property
    def is_list(self) -> bool:
        return self.message_type.endswith("-list")

    def _list_field(self, key: str) -> Any:
        if self.is_list and isinstance(self.message, dict):
            return self.message.get(key)
        return None

    @property
    def items(self) -> list[dict[str, Any]]:
        items = self._list_field("items")
        return items if isinstance(items, list) else []

    @property
    def total_results(self) -> int | None:
        return self._list_field("total-results")

    @property
    def items_per_page(self) -> int | None:
        return self._list_field("items-per-page")

    @property
    def next_cursor(self) -> str | None:
        cursor = self._list_field("next-cursor")
        return cursor or None

    @property
    def facets(self) -> dict[str, Any]:
        return self._list_field("facets") or {}


class Page(BaseModel):
    """One page of a list response, items in server order.

    Attributes:
        items: The page items, parsed into the requested model where
            possible, raw dicts otherwise.
        total_results: Total hits of the query across all pages.
        items_per_page: The page size the server applied.
        next_cursor: Cursor to request the following page, if any.
        facets: Facet counts, keyed by facet name.
        query: Echo of the start index and search terms.
    """

    items: list[Any] = Field(default_factory=list)
    total_results: int | None = None
    items_per_page: int | None = None
    next_cursor: str | None = None
    facets: dict[str, FacetValues] = Field(default_factory=dict)
    query: QueryInfo | None = None

    @field_validator("facets", mode="before")
    @classmethod
    def handle_null_facets(cls, v: Any) -> Any:
        return v or {}

    @classmethod
    def from_envelope(
        cls, envelope: ResponseEnvelope, item_model: type[ItemType] | None = None
    ) -> "Page":
        """Builds a page from a list envelope.

        Items that do not validate against ``item_model`` are kept as the raw
        dict and a warning is logged.
        """
        items: list[Any] = []
        for raw in envelope.items:
            if item_model is None:
                items.append(raw)
                continue
            try:
                items.append(item_model.model_validate(raw))
            except Exception as e:
                logger.warning(
                    f"Failed to parse item as {item_model.__name__}: {e}. "
                    "Keeping raw data."
                )
                items.append(raw)
        query = envelope._list_field("query")
        return cls(
            items=items,
            total_results=envelope.total_results,
            items_per_page=envelope.items_per_page,
            next_cursor=envelope.next_cursor,
            facets=envelope.facets,
            query=query if isinstance(query, dict) else None,
        )
