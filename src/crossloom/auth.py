from typing import Protocol

import httpx

from .exceptions import ConfigurationError
from .log_config import logger

PLUS_TOKEN_HEADER = "Crossref-Plus-API-Token"


class AuthStrategy(Protocol):
    """Protocol defining the interface for authentication strategies.

    Concrete implementations add authentication information (headers, tokens)
    to an outgoing HTTP request.
    """

    async def async_authenticate(self, request: httpx.Request) -> None:
        """
        Asynchronously modifies the request to add authentication information.

        Args:
            request: The httpx.Request object to modify.
        """
        ...

    async def async_close(self) -> None:
        """Closes resources held by the strategy. Must be idempotent."""
        ...


class NoAuth:
    """AuthStrategy for the public Crossref pools.

    This strategy makes no modifications to the outgoing request.
    """

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Does nothing as no authentication is needed."""
        logger.trace("Using NoAuth strategy, no authentication applied.")

    async def async_close(self) -> None:
        """No resources to close for NoAuth, this method is a no-op."""


class PlusTokenAuth:
    """AuthStrategy for Crossref Metadata Plus subscribers.

    The token is sent as ``Crossref-Plus-API-Token: Bearer <token>``, which
    routes requests to the pool reserved for Plus users.

    Attributes:
        _token: The Plus API token.
    """

    def __init__(self, token: str | None):
        """Initializes PlusTokenAuth with the provided API token.

        Args:
            token: The Metadata Plus token to use for authentication.

        Raises:
            ConfigurationError: If the token is None or empty.
        """
        if not token:
            raise ConfigurationError("PlusTokenAuth requires a non-empty 'token'.")
        self._token: str = token
        logger.debug("PlusTokenAuth initialized.")

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Adds the Plus token header to the request."""
        logger.trace("Authenticating request using PlusTokenAuth.")
        request.headers[PLUS_TOKEN_HEADER] = f"Bearer {self._token}"

    async def async_close(self) -> None:
        """No resources to close for PlusTokenAuth, this method is a no-op."""
