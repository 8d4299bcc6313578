"""HTTP transport for the Crossref REST API.

The query and paging layers only depend on the :class:`Transport` protocol:
one awaited ``fetch(path, params)`` call returning a decoded
:class:`ResponseEnvelope`, raising a :class:`TransportError` subclass on
failure. :class:`HttpTransport` implements it on top of ``httpx`` with
retries for transient failures, pluggable authentication and request hooks.
"""

import ssl
from http import HTTPStatus
from typing import Any, Protocol, Self, runtime_checkable

import certifi
import httpx
import tenacity
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from .auth import AuthStrategy, NoAuth
from .config import CrossrefSettings
from .exceptions import (
    APIError,
    CrossloomError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    TimeoutError,
    TransportError,
)
from .log_config import logger
from .models.base import ResponseEnvelope
from .types import QueryParams, RequestData
from .unwrapper import CrossrefUnwrapper


@runtime_checkable
class Transport(Protocol):
    """The single collaborator the query and paging layers talk to."""

    async def fetch(self, path: str, params: QueryParams = ()) -> ResponseEnvelope:
        """Issue one GET request and return the decoded envelope.

        Raises:
            TransportError: On any network, HTTP or decoding failure.
        """
        ...

    async def aclose(self) -> None: ...


class HttpTransport:
    """Asynchronous httpx-backed transport with retries.

    Attributes:
        _settings: Configuration settings for the transport.
        _unwrapper: Decoder for Crossref envelopes.
        _base_url: The base URL for API requests.
        _retryable_status_codes: HTTP status codes that trigger a retry.
        _auth_strategy: Authentication strategy instance.
        _http_client: The underlying httpx.AsyncClient for making requests.
        _should_close_client: Flag indicating if this instance owns the _http_client.
    """

    DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset(
        [429, 500, 502, 503, 504]
    )
    """Default set of HTTP status codes considered retryable."""

    def __init__(
        self,
        settings: CrossrefSettings,
        auth_strategy: AuthStrategy | None = None,
        *,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        unwrapper: CrossrefUnwrapper | None = None,
        retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    ):
        """Initialize the transport.

        Args:
            settings: Configuration settings for timeouts, retries and identity.
            auth_strategy: Optional authentication strategy. If None, uses NoAuth.
            base_url: Override for ``settings.base_url``.
            http_client: Optional pre-configured httpx.AsyncClient instance.
                It is not closed by :meth:`aclose`.
            unwrapper: Optional envelope decoder.
            retryable_status_codes: Set of HTTP status codes to retry on.
        """
        self._settings = settings
        self._unwrapper = unwrapper or CrossrefUnwrapper()
        self._base_url: str = (base_url or settings.base_url).rstrip("/")
        self._retryable_status_codes: frozenset[int] = retryable_status_codes

        self._auth_strategy: AuthStrategy = auth_strategy or NoAuth()
        logger.info(
            f"Using authentication strategy: {type(self._auth_strategy).__name__}"
        )

        self._should_close_client = http_client is None
        self._http_client = http_client or self._create_default_http_client()

        logger.debug(f"HttpTransport initialized for {self._base_url}")

    @property
    def base_url(self) -> str:
        return self._base_url

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create a default httpx.AsyncClient with configured settings.

        Returns:
            httpx.AsyncClient: Configured HTTP client with SSL verification,
                timeout settings, and the polite pool user agent.
        """
        try:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            verify_ssl: ssl.SSLContext | bool = ssl_context
            logger.debug("Using certifi SSL context.")
        except (OSError, ssl.SSLError):
            verify_ssl = True
            logger.warning(
                "certifi bundle failed to load. Using default SSL verification."
            )

        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
            headers={"User-Agent": self._settings.effective_user_agent},
        )

    def _run_pre_request_hooks(self, request_data: RequestData) -> None:
        if not self._settings.pre_request_hooks:
            return
        hook_params = list(request_data.params or [])
        hook_headers = httpx.Headers(request_data.headers)
        logger.debug(
            f"Executing {len(self._settings.pre_request_hooks)} pre-request hooks "
            f"for {request_data.method} {request_data.url}"
        )
        for hook in self._settings.pre_request_hooks:
            try:
                hook(request_data.method, request_data.url, hook_params, hook_headers)
            except Exception as e:
                logger.error(
                    f"Error executing pre-request hook "
                    f"{getattr(hook, '__name__', str(hook))}: {e}"
                )
        request_data.params = hook_params
        request_data.headers = dict(hook_headers.items())

    def _run_post_request_hooks(
        self, response: httpx.Response, envelope: ResponseEnvelope | None, attempt: int
    ) -> None:
        for hook in self._settings.post_request_hooks:
            try:
                hook(response, envelope, attempt)
            except Exception as e:
                logger.error(
                    f"Error executing post-request hook "
                    f"{getattr(hook, '__name__', str(hook))}: {e}"
                )

    def _decode(self, response: httpx.Response) -> ResponseEnvelope:
        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                "Response body is not valid JSON", response=response
            ) from e
        try:
            return self._unwrapper.unwrap(payload)
        except ResponseDecodeError as e:
            raise ResponseDecodeError(e.message, response=response) from e

    async def _execute_single_request(
        self, request_data: RequestData, attempt_counter: list[int]
    ) -> ResponseEnvelope:
        """Execute a single HTTP request attempt and decode the envelope.

        Raises:
            NotFoundError: On 404.
            RateLimitError: On 429.
            APIError: For other HTTP error responses (4xx/5xx).
            TimeoutError: If the request times out.
            NetworkError: For network-related errors.
            ResponseDecodeError: If the body is not a Crossref envelope.
        """
        attempt_counter[0] += 1
        request = request_data.build_request(self._http_client)

        try:
            await self._auth_strategy.async_authenticate(request)
            if not request.headers.get("User-Agent"):
                request.headers["User-Agent"] = self._settings.effective_user_agent

            logger.debug(f"Sending request: {request.method} {request.url}")
            logger.trace(f"Request Headers: {request.headers}")

            response = await self._http_client.send(request)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error for {request.url}: {e}")
            raise TransportError(
                f"HTTP request error for {request.url}: {e}", request=request
            ) from e

        logger.debug(f"Received response: {response.status_code} for {request.url}")
        logger.trace(f"Response Headers: {response.headers}")

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            self._run_post_request_hooks(response, None, attempt_counter[0])
            if response.status_code == HTTPStatus.NOT_FOUND:
                raise NotFoundError("Resource not found", response=response)
            if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
                raise RateLimitError("API rate limit exceeded.", response=response)
            raise APIError(
                f"API request failed with status {response.status_code}",
                response=response,
            )

        envelope = self._decode(response)
        self._run_post_request_hooks(response, envelope, attempt_counter[0])
        return envelope

    def _should_retry_request(self, retry_state: tenacity.RetryCallState) -> bool:
        """Predicate for tenacity: should we retry this request?

        Args:
            retry_state: The current retry state from tenacity.

        Returns:
            bool: True if the request should be retried, False otherwise.
        """
        outcome = retry_state.outcome
        if not outcome or not outcome.failed:
            return False

        exc = outcome.exception()
        if isinstance(exc, TimeoutError | NetworkError | RateLimitError):
            logger.warning(f"Retrying due to {type(exc).__name__}: {exc}")
            return True
        if (
            isinstance(exc, APIError)
            and exc.response is not None
            and exc.response.status_code in self._retryable_status_codes
        ):
            logger.warning(
                f"Retrying due to status code {exc.response.status_code}: {exc}"
            )
            return True
        return False

    async def _before_retry_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        """Log details before tenacity sleeps between retries."""
        if not retry_state.outcome:
            return
        exc = retry_state.outcome.exception()
        sleep_time = (
            getattr(retry_state.next_action, "sleep", 0)
            if retry_state.next_action
            else 0
        )
        logger.info(
            f"Retrying request in {sleep_time:.2f} seconds after "
            f"{retry_state.attempt_number} attempt(s) due to: {type(exc).__name__} - {exc}"
        )

    async def fetch(self, path: str, params: QueryParams = ()) -> ResponseEnvelope:
        """Perform a GET request against ``path`` with ordered ``params``.

        Transient failures (timeouts, network errors, 429 and 5xx responses)
        are retried with exponential backoff up to ``settings.max_retries``
        times. The last error is re-raised once retries are exhausted.

        Args:
            path: Request path relative to the base URL, e.g. ``/works``.
            params: Ordered query parameter pairs.

        Returns:
            ResponseEnvelope: The decoded response envelope.
        """
        request_data = RequestData(
            method="GET",
            url=f"{self._base_url}/{path.lstrip('/')}",
            params=list(params),
        )
        self._run_pre_request_hooks(request_data)

        retry_strategy = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_retries + 1),
            wait=wait_exponential(multiplier=self._settings.backoff_factor),
            retry=self._should_retry_request,
            reraise=True,
            before_sleep=self._before_retry_sleep,
        )
        attempt_counter = [0]
        try:
            return await retry_strategy(
                self._execute_single_request, request_data, attempt_counter
            )
        except CrossloomError as e:
            logger.error(f"Request failed after {attempt_counter[0]} attempt(s): {e}")
            raise

    async def fetch_raw(self, url: str, headers: dict[str, Any]) -> httpx.Response:
        """GET an absolute URL without envelope decoding or retries.

        Used for content negotiation against the DOI resolver.

        Raises:
            NotFoundError: On 404.
            APIError: For other error statuses.
            TimeoutError: If the request times out.
            NetworkError: For network-related errors.
        """
        request = self._http_client.build_request("GET", url, headers=headers)
        logger.debug(f"Sending request: {request.method} {request.url}")
        try:
            response = await self._http_client.send(request, follow_redirects=True)
        except httpx.TimeoutException as e:
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e
        if response.status_code == HTTPStatus.NOT_FOUND:
            raise NotFoundError("Resource not found", response=response)
        if response.status_code >= HTTPStatus.BAD_REQUEST:
            raise APIError(
                f"API request failed with status {response.status_code}",
                response=response,
            )
        return response

    async def aclose(self) -> None:
        """Close the underlying HTTP client and the auth strategy."""
        if self._should_close_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.info("HttpTransport internal HTTP client closed.")
        await self._auth_strategy.async_close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
