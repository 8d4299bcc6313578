# crossloom/types.py
"""Core type definitions shared by the transport layer.

This module defines the data structure describing a single HTTP request
attempt and the type aliases for user supplied request hooks.
"""

from collections.abc import Callable, Sequence
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

QueryParams = Sequence[tuple[str, str]]
"""Ordered query parameters, as produced by :func:`crossloom.render.render`."""


class RequestData(BaseModel):
    """Encapsulates data for a single HTTP request attempt."""

    method: str
    url: str
    params: list[tuple[str, str]] | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def build_request(self, client: httpx.AsyncClient | None = None) -> httpx.Request:
        """Builds an httpx.Request object from the stored data.

        When a client is given the request picks up its default headers and
        timeout. Parameters are passed as a list of pairs so their order
        survives into the final URL.
        """
        if client is not None:
            return client.build_request(
                self.method, self.url, params=self.params, headers=self.headers
            )
        return httpx.Request(
            method=self.method,
            url=self.url,
            params=self.params,
            headers=self.headers,
        )


PreRequestHook = Callable[[str, str, list[tuple[str, str]] | None, httpx.Headers], None]
"""Type alias for a pre-request hook.

Called with the HTTP method, the full URL, the mutable list of query
parameter pairs and the mutable ``httpx.Headers`` before a request is sent.
Hooks modify their arguments in place.
"""

PostRequestHook = Callable[[httpx.Response, Any, int], None]
"""Type alias for a post-request hook.

Called with the raw ``httpx.Response``, the decoded envelope (or ``None``
when decoding failed) and the attempt number once a response was received.
"""
