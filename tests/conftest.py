# tests/conftest.py
from typing import Any

import pytest

from crossloom.config import CrossrefSettings
from crossloom.models import ResponseEnvelope


@pytest.fixture
def settings() -> CrossrefSettings:
    """Settings isolated from .env files, with fast retries."""
    return CrossrefSettings(_env_file=None, max_retries=2, backoff_factor=0.01)


@pytest.fixture
def list_payload():
    """Factory for the JSON body of a Crossref list response."""

    def _make(
        items: list[dict[str, Any]],
        *,
        next_cursor: str | None = None,
        total: int | None = None,
        message_type: str = "work-list",
    ) -> dict[str, Any]:
        message: dict[str, Any] = {
            "facets": {},
            "total-results": total if total is not None else len(items),
            "items-per-page": len(items),
            "query": {"start-index": 0, "search-terms": None},
            "items": items,
        }
        if next_cursor is not None:
            message["next-cursor"] = next_cursor
        return {
            "status": "ok",
            "message-type": message_type,
            "message-version": "1.0.0",
            "message": message,
        }

    return _make


@pytest.fixture
def item_payload():
    """Factory for the JSON body of a single item response."""

    def _make(message: dict[str, Any], message_type: str = "work") -> dict[str, Any]:
        return {
            "status": "ok",
            "message-type": message_type,
            "message-version": "1.0.0",
            "message": message,
        }

    return _make


@pytest.fixture
def work_list(list_payload):
    """Factory for decoded works list envelopes, as a transport returns them."""

    def _make(
        items: list[dict[str, Any]], next_cursor: str | None = None
    ) -> ResponseEnvelope:
        return ResponseEnvelope.model_validate(
            list_payload(items, next_cursor=next_cursor)
        )

    return _make
