"""Resource clients for the Crossref REST API."""

from .base import (
    BaseResourceClient,
    CursorIterableMixin,
    GettableMixin,
    NestedWorksMixin,
    SearchableMixin,
)
from .registry_clients import (
    FundersClient,
    JournalsClient,
    MembersClient,
    PrefixesClient,
    TypesClient,
)
from .works_client import WorksClient

__all__ = [
    "BaseResourceClient",
    "CursorIterableMixin",
    "FundersClient",
    "GettableMixin",
    "JournalsClient",
    "MembersClient",
    "NestedWorksMixin",
    "PrefixesClient",
    "SearchableMixin",
    "TypesClient",
    "WorksClient",
]
