# crossloom/config.py
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import PostRequestHook, PreRequestHook

CROSSREF_API_BASE_URL = "https://api.crossref.org"
DOI_RESOLVER_BASE_URL = "https://doi.org"
CROSSLOOM_VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"crossloom/{CROSSLOOM_VERSION}"

MAX_ROWS = 1000
"""Largest ``rows`` value the Crossref API accepts."""

DEFAULT_DEEP_PAGE_ROWS = 100

MAX_SAMPLE = 100
"""Largest ``sample`` size the works resource accepts."""


class CrossrefSettings(BaseSettings):
    """
    User-configurable settings for the crossloom client, loaded from
    environment variables (prefixed with ``CROSSLOOM_``) or a .env file.

    The settings object is handed to the transport explicitly; nothing in the
    package reads process-wide mutable state.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),
        env_file_encoding="utf-8",
        env_prefix="CROSSLOOM_",
        extra="ignore",
        case_sensitive=False,
        arbitrary_types_allowed=True,  # hook callables
    )

    # --- Endpoints ---
    base_url: str = Field(
        default=CROSSREF_API_BASE_URL, description="Crossref REST API base URL"
    )
    content_negotiation_url: str = Field(
        default=DOI_RESOLVER_BASE_URL,
        description="DOI resolver used for content negotiation",
    )

    # --- Client Behavior Settings ---
    request_timeout: float = Field(
        default=30.0, description="Default request timeout in seconds"
    )
    max_retries: int = Field(
        default=3, description="Maximum number of retries for failed requests"
    )
    backoff_factor: float = Field(
        default=0.5, description="Backoff factor for retries (seconds)"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent header for requests"
    )
    deep_page_rows: int = Field(
        default=DEFAULT_DEEP_PAGE_ROWS,
        description="Rows requested per page while deep paging with a cursor",
    )

    # --- Crossref identity ---
    polite_email: str | None = Field(
        default=None,
        description="Contact email sent with every request to join the polite pool",
    )
    plus_token: str | None = Field(
        default=None, description="Crossref Metadata Plus API token (optional)"
    )

    # --- Hook Settings ---
    pre_request_hooks: list[PreRequestHook] = Field(
        default_factory=list,
        description="List of hooks to call before a request is made.",
    )
    post_request_hooks: list[PostRequestHook] = Field(
        default_factory=list,
        description="List of hooks to call after a response is received.",
    )

    @field_validator("deep_page_rows")
    @classmethod
    def check_deep_page_rows(cls, v: int) -> int:
        if not 1 <= v <= MAX_ROWS:
            raise ValueError(f"deep_page_rows must be between 1 and {MAX_ROWS}")
        return v

    @property
    def effective_user_agent(self) -> str:
        """User-Agent including the polite pool contact, when one is set."""
        if self.polite_email:
            return f"{self.user_agent} (mailto:{self.polite_email})"
        return self.user_agent


@lru_cache
def get_settings() -> CrossrefSettings:
    """
    Provides access to the crossloom settings.

    Settings are loaded from environment variables or .env/secrets.env files.
    The instance is cached for performance.

    Returns:
        CrossrefSettings: The settings instance.
    """
    return CrossrefSettings()
