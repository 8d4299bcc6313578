from typing import Any, Self

from pydantic import BaseModel

from .auth import AuthStrategy, NoAuth, PlusTokenAuth
from .cn import CnFormat, ContentNegotiator
from .config import CrossrefSettings, get_settings
from .exceptions import ConfigurationError, UnexpectedMessageError
from .log_config import logger
from .models import Page
from .paging import DeepPager
from .query import ResourceQuery
from .render import render
from .resources import (
    FundersClient,
    JournalsClient,
    MembersClient,
    PrefixesClient,
    TypesClient,
    WorksClient,
)
from .targets import ResourceTarget
from .transport import HttpTransport, Transport
from .unwrapper import CrossrefUnwrapper


class CrossrefClient:
    """Asynchronous client for the Crossref REST API.

    The client owns the configuration and the transport; resource clients
    for works, members, funders, journals, types and prefixes are available
    as properties. Requests are described with queries and targets, rendered
    deterministically and sent one at a time.

    Typical usage:
    ```python
    async with CrossrefClient(polite_email="me@example.org") as client:
        work = await client.works.get("10.1037/0003-066X.59.1.29")
        query = client.works.query("Machine Learning").sort(Sort.SCORE)
        async for work in client.works.iterate(query):
            print(work.doi)
    ```

    Attributes:
        works (WorksClient): Client for ``/works``.
        members (MembersClient): Client for ``/members``.
        funders (FundersClient): Client for ``/funders``.
        journals (JournalsClient): Client for ``/journals``.
        types (TypesClient): Client for ``/types``.
        prefixes (PrefixesClient): Client for ``/prefixes``.
        _settings (CrossrefSettings): The resolved settings for this client.
    """

    def __init__(
        self,
        settings: CrossrefSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        *,
        polite_email: str | None = None,
        plus_token: str | None = None,
        base_url: str | None = None,
        transport: Transport | None = None,
    ):
        """Initializes the CrossrefClient.

        Authentication Strategy Resolution:
        - If `auth_strategy` is explicitly provided, it is used.
        - Otherwise a Plus token passed here, or found in `settings`, selects
          `PlusTokenAuth`.
        - Without a token, requests use the public pools with `NoAuth`.

        Args:
            settings: An optional `CrossrefSettings` instance. If `None`,
                settings are loaded via `crossloom.config.get_settings()`.
            auth_strategy: An optional explicit `AuthStrategy` instance.
            polite_email: Contact email for the polite pool. Takes precedence
                over `settings.polite_email`.
            plus_token: Metadata Plus token. Takes precedence over
                `settings.plus_token`.
            base_url: Override for the API base URL.
            transport: An optional transport to use instead of creating an
                `HttpTransport`. The client then does not own it for
                content negotiation.
        """
        settings = settings or get_settings()
        overrides: dict[str, Any] = {}
        if polite_email:
            overrides["polite_email"] = polite_email
        if plus_token:
            overrides["plus_token"] = plus_token
        if base_url:
            overrides["base_url"] = base_url
        self._settings: CrossrefSettings = (
            settings.model_copy(update=overrides) if overrides else settings
        )

        if auth_strategy:
            logger.info(
                f"Using explicitly provided authentication strategy: {type(auth_strategy).__name__}"
            )
            resolved_auth_strategy = auth_strategy
        elif self._settings.plus_token:
            logger.info("Using Metadata Plus token authentication.")
            resolved_auth_strategy = PlusTokenAuth(self._settings.plus_token)
        else:
            logger.info("No Plus token found, using the public pools.")
            resolved_auth_strategy = NoAuth()

        if not self._settings.polite_email:
            logger.debug("No polite_email configured; requests use the public pool.")

        self._unwrapper = CrossrefUnwrapper()
        self._transport: Transport = transport or HttpTransport(
            self._settings,
            resolved_auth_strategy,
            unwrapper=self._unwrapper,
        )

        self._works = WorksClient(api_client=self)
        self._members = MembersClient(api_client=self)
        self._funders = FundersClient(api_client=self)
        self._journals = JournalsClient(api_client=self)
        self._types = TypesClient(api_client=self)
        self._prefixes = PrefixesClient(api_client=self)

        logger.debug("CrossrefClient initialized successfully.")

    @property
    def settings(self) -> CrossrefSettings:
        return self._settings

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def works(self) -> WorksClient:
        return self._works

    @property
    def members(self) -> MembersClient:
        return self._members

    @property
    def funders(self) -> FundersClient:
        return self._funders

    @property
    def journals(self) -> JournalsClient:
        return self._journals

    @property
    def types(self) -> TypesClient:
        return self._types

    @property
    def prefixes(self) -> PrefixesClient:
        return self._prefixes

    async def fetch_page(
        self,
        target: ResourceTarget | ResourceQuery,
        item_model: type[BaseModel] | None = None,
    ) -> Page:
        """Fetch exactly one page for a listing target.

        Args:
            target: A query, or a ``QUERY``/``NESTED_WORKS`` target.
            item_model: Optional model each item is parsed into.

        Returns:
            Page: The page; an empty result is an empty page.

        Raises:
            UnexpectedMessageError: If the response is not a list message.
            TransportError: If the request fails.
        """
        request = render(target)
        envelope = await self._transport.fetch(request.path, request.params)
        if not envelope.is_list:
            raise UnexpectedMessageError("list", envelope.message_type)
        return Page.from_envelope(envelope, item_model)

    async def fetch_item(
        self,
        target: ResourceTarget,
        expected_type: str,
        item_model: type[BaseModel] | None = None,
    ) -> Any:
        """Fetch a single record for an ``IDENTIFIER`` or ``AGENCY`` target.

        Returns:
            Any: The record parsed into ``item_model``, or the raw dict if
                parsing failed or no model was given.

        Raises:
            UnexpectedMessageError: If the message type is not ``expected_type``.
            TransportError: If the request fails.
        """
        request = render(target)
        envelope = await self._transport.fetch(request.path, request.params)
        data = self._unwrapper.unwrap_single_item(envelope, expected_type)
        if item_model is None:
            return data
        try:
            return item_model.model_validate(data)
        except Exception as e:
            logger.warning(
                f"Failed to parse {expected_type} with {item_model.__name__}: {e}. "
                "Returning raw data."
            )
            return data

    def deep_page(
        self,
        target: ResourceTarget | ResourceQuery,
        *,
        page_size: int | None = None,
        item_model: type[BaseModel] | None = None,
    ) -> DeepPager:
        """Create a pager walking every page of a works listing.

        Args:
            target: A works query or a works listing target.
            page_size: Rows per request; defaults to ``settings.deep_page_rows``.
            item_model: Optional model each item is parsed into.

        Raises:
            ValidationError: If ``target`` does not list works.
        """
        return DeepPager(
            self._transport,
            target,
            page_size=page_size or self._settings.deep_page_rows,
            item_model=item_model,
        )

    async def negotiate(
        self,
        doi: str,
        fmt: CnFormat = CnFormat.BIBTEX,
        *,
        style: str | None = None,
        locale: str | None = None,
    ) -> str:
        """Fetch ``doi`` in a negotiated format from the DOI resolver.

        Raises:
            ConfigurationError: If the client runs on a custom transport.
        """
        if not isinstance(self._transport, HttpTransport):
            raise ConfigurationError(
                "Content negotiation requires the built-in HttpTransport."
            )
        negotiator = ContentNegotiator(
            self._transport, self._settings.content_negotiation_url
        )
        return await negotiator.fetch(doi, fmt, style=style, locale=locale)

    async def aclose(self) -> None:
        """Close the transport and any resources it holds."""
        logger.info("Closing CrossrefClient.")
        await self._transport.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
