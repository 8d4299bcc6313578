"""Addressing of Crossref resources.

A :class:`ResourceTarget` is a tagged value: a resource kind, a variant and
the id and/or query that variant needs. All ways of reaching the API
(listing by query, fetching one item, listing the works of another
resource's item, looking up a DOI's registration agency) share this one
shape, and :func:`crossloom.render.render` turns any of them into a request.
"""

from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .query import ResourceQuery, WorksQuery
from .vocabulary import ResourceKind


class TargetVariant(Enum):
    IDENTIFIER = "identifier"
    QUERY = "query"
    NESTED_WORKS = "nested-works"
    AGENCY = "agency"


class ResourceTarget(BaseModel):
    """One addressable request against a resource kind.

    Structural rules are enforced on construction:

    - ``IDENTIFIER``, ``NESTED_WORKS`` and ``AGENCY`` require an id.
    - ``QUERY`` requires a query of the same kind as the target.
    - ``NESTED_WORKS`` carries a works query and is not available for works.
    - ``AGENCY`` only exists for works.

    Prefer the named constructors over instantiating directly.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    variant: TargetVariant
    id: str | None = None
    query: ResourceQuery | None = None

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip().strip("/") or None

    @model_validator(mode="after")
    def _check_structure(self) -> Self:
        if self.variant is TargetVariant.QUERY:
            if self.query is None:
                raise ValueError("a query target needs a query")
            if self.query.kind is not self.kind:
                raise ValueError(
                    f"{type(self.query).__name__} cannot target /{self.kind.value}"
                )
            return self

        if self.id is None:
            raise ValueError(f"a {self.variant.value} target needs an id")
        if self.variant is TargetVariant.NESTED_WORKS:
            if self.kind is ResourceKind.WORKS:
                raise ValueError("works have no nested works")
            if not isinstance(self.query, WorksQuery):
                raise ValueError("nested works targets need a WorksQuery")
        elif self.variant is TargetVariant.AGENCY:
            if self.kind is not ResourceKind.WORKS:
                raise ValueError("only works have a registration agency")
        elif self.query is not None:
            raise ValueError("identifier targets take no query")
        return self

    @classmethod
    def identifier(cls, kind: ResourceKind | str, id: str) -> "ResourceTarget":
        return cls(kind=ResourceKind(kind), variant=TargetVariant.IDENTIFIER, id=id)

    @classmethod
    def of_query(cls, query: ResourceQuery) -> "ResourceTarget":
        return cls(kind=query.kind, variant=TargetVariant.QUERY, query=query)

    @classmethod
    def nested_works(
        cls, kind: ResourceKind | str, id: str, works: WorksQuery | None = None
    ) -> "ResourceTarget":
        """Targets ``/<kind>/<id>/works``, filtered by ``works`` if given."""
        return cls(
            kind=ResourceKind(kind),
            variant=TargetVariant.NESTED_WORKS,
            id=id,
            query=works if works is not None else WorksQuery(),
        )

    @classmethod
    def agency(cls, doi: str) -> "ResourceTarget":
        return cls(kind=ResourceKind.WORKS, variant=TargetVariant.AGENCY, id=doi)

    @property
    def works_query(self) -> WorksQuery | None:
        """The works query when this target lists works, else ``None``."""
        if isinstance(self.query, WorksQuery) and self.variant in (
            TargetVariant.QUERY,
            TargetVariant.NESTED_WORKS,
        ):
            return self.query
        return None

    def with_query(self, query: ResourceQuery) -> "ResourceTarget":
        """Returns a copy of this target carrying ``query``, revalidated."""
        return type(self)(kind=self.kind, variant=self.variant, id=self.id, query=query)
