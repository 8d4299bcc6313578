# crossloom/resources/registry_clients.py
"""Clients for the registry resources: members, funders, journals, types
and prefixes.

Each of these resources can be fetched by id and owns a nested list of
works. All but prefixes can also be searched.
"""

from ..models import CrossrefType, Funder, Journal, Member, Prefix
from ..query import FundersQuery, JournalsQuery, MembersQuery, TypesQuery
from ..vocabulary import ResourceKind
from .base import (
    BaseResourceClient,
    GettableMixin,
    NestedWorksMixin,
    SearchableMixin,
)


class MembersClient(
    BaseResourceClient, GettableMixin, SearchableMixin, NestedWorksMixin
):
    _kind = ResourceKind.MEMBERS
    _message_type = "member"
    _entity_model = Member
    _query_type = MembersQuery


class FundersClient(
    BaseResourceClient, GettableMixin, SearchableMixin, NestedWorksMixin
):
    """Funders of the Open Funder Registry, addressed by the suffix of their
    registry DOI, e.g. ``501100000780``.
    """

    _kind = ResourceKind.FUNDERS
    _message_type = "funder"
    _entity_model = Funder
    _query_type = FundersQuery


class JournalsClient(
    BaseResourceClient, GettableMixin, SearchableMixin, NestedWorksMixin
):
    """Journals, addressed by ISSN."""

    _kind = ResourceKind.JOURNALS
    _message_type = "journal"
    _entity_model = Journal
    _query_type = JournalsQuery


class TypesClient(
    BaseResourceClient, GettableMixin, SearchableMixin, NestedWorksMixin
):
    _kind = ResourceKind.TYPES
    _message_type = "type"
    _entity_model = CrossrefType
    _query_type = TypesQuery


class PrefixesClient(BaseResourceClient, GettableMixin, NestedWorksMixin):
    """DOI prefixes. Prefixes cannot be listed, only fetched by id."""

    _kind = ResourceKind.PREFIXES
    _message_type = "prefix"
    _entity_model = Prefix
