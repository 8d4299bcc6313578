# crossloom/resources/works_client.py
"""Client for the Crossref ``/works`` resource."""

from typing import Any

from ..log_config import logger
from ..models import Work, WorkAgency
from ..query import WorksQuery
from ..targets import ResourceTarget
from ..vocabulary import ResourceKind
from .base import (
    BaseResourceClient,
    CursorIterableMixin,
    GettableMixin,
    SearchableMixin,
)


class WorksClient(
    BaseResourceClient, GettableMixin, SearchableMixin, CursorIterableMixin
):
    """Client for works: lookup by DOI, search, deep paging and agency lookup.

    Example:
    ```python
    async with CrossrefClient() as client:
        query = client.works.query("Machine Learning").sort(Sort.SCORE)
        async for work in client.works.iterate(query):
            print(work.doi)
    ```
    """

    _kind = ResourceKind.WORKS
    _message_type = "work"
    _entity_model = Work
    _query_type = WorksQuery

    def query(self, term: str | None = None) -> WorksQuery:
        """Start a works query, optionally with a free-text term."""
        return WorksQuery().term(term)

    async def agency(self, doi: str) -> Any:
        """Look up the registration agency of ``doi``.

        Returns:
            WorkAgency | dict: The DOI and its agency.
        """
        logger.info(f"Fetching registration agency of {doi}")
        return await self._api_client.fetch_item(
            ResourceTarget.agency(doi), "work-agency", WorkAgency
        )

    async def random_dois(self, count: int) -> list[str]:
        """Return up to ``count`` (at most 100) randomly sampled DOIs."""
        page = await self.search(WorksQuery().sample(count))
        dois: list[str] = []
        for item in page.items:
            doi = item.doi if isinstance(item, Work) else item.get("DOI")
            if doi:
                dois.append(doi)
        return dois
