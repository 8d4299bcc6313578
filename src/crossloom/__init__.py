"""crossloom: an asynchronous, typed client for the Crossref REST API."""

from .auth import AuthStrategy, NoAuth, PlusTokenAuth
from .client import CrossrefClient
from .cn import CnFormat, ContentNegotiator
from .config import CROSSLOOM_VERSION, CrossrefSettings, get_settings
from .exceptions import (
    APIError,
    ConfigurationError,
    CrossloomError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    TimeoutError,
    TransportError,
    UnexpectedMessageError,
    ValidationError,
)
from .filters import FacetCount, FieldQuery, FundersFilter, MembersFilter, WorksFilter
from .log_config import configure_logging
from .models import Page, ResponseEnvelope
from .paging import DeepPager, PagerState
from .query import (
    FundersQuery,
    JournalsQuery,
    MembersQuery,
    TypesQuery,
    WorksQuery,
)
from .render import RenderedRequest, render
from .targets import ResourceTarget, TargetVariant
from .transport import HttpTransport, Transport
from .vocabulary import (
    Facet,
    FundersFilterKey,
    MembersFilterKey,
    Order,
    QueryField,
    ResourceKind,
    Sort,
    Visibility,
    WorksFilterKey,
    WorkType,
)

__version__ = CROSSLOOM_VERSION

__all__ = [
    "APIError",
    "AuthStrategy",
    "CnFormat",
    "ConfigurationError",
    "ContentNegotiator",
    "CrossloomError",
    "CrossrefClient",
    "CrossrefSettings",
    "DeepPager",
    "Facet",
    "FacetCount",
    "FieldQuery",
    "FundersFilter",
    "FundersFilterKey",
    "FundersQuery",
    "HttpTransport",
    "JournalsQuery",
    "MembersFilter",
    "MembersFilterKey",
    "MembersQuery",
    "NetworkError",
    "NoAuth",
    "NotFoundError",
    "Order",
    "Page",
    "PagerState",
    "PlusTokenAuth",
    "QueryField",
    "RateLimitError",
    "RenderedRequest",
    "ResourceKind",
    "ResourceTarget",
    "ResponseDecodeError",
    "ResponseEnvelope",
    "Sort",
    "TargetVariant",
    "TimeoutError",
    "Transport",
    "TransportError",
    "TypesQuery",
    "UnexpectedMessageError",
    "ValidationError",
    "Visibility",
    "WorkType",
    "WorksFilter",
    "WorksFilterKey",
    "WorksQuery",
    "__version__",
    "configure_logging",
    "get_settings",
    "render",
]
