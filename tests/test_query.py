"""Tests for the immutable query builders."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from crossloom.filters import WorksFilter
from crossloom.log_config import logger
from crossloom.query import (
    QUERY_TYPES,
    START_CURSOR,
    FundersQuery,
    JournalsQuery,
    MembersQuery,
    TypesQuery,
    WorksQuery,
)
from crossloom.targets import TargetVariant
from crossloom.vocabulary import (
    Facet,
    FundersFilterKey,
    Order,
    QueryField,
    ResourceKind,
    Sort,
    WorksFilterKey,
)


@pytest.fixture
def debug_records():
    """Collects DEBUG and above loguru messages emitted during a test."""
    records: list[str] = []
    handler_id = logger.add(lambda m: records.append(m.record["message"]), level="DEBUG")
    yield records
    logger.remove(handler_id)


def test_builders_return_new_queries():
    base = WorksQuery()

    changed = base.term("graphene").sort(Sort.PUBLISHED).limit(5)

    assert base == WorksQuery()
    assert base.text is None
    assert changed.text == "graphene"
    assert changed.sort_field is Sort.PUBLISHED
    assert changed.rows == 5


def test_queries_are_frozen():
    query = WorksQuery()

    with pytest.raises(PydanticValidationError):
        query.text = "mutated"


def test_term_collapses_whitespace():
    assert WorksQuery().term("  Machine \n  Learning ").text == "Machine Learning"
    assert WorksQuery().term("   ").text is None
    assert WorksQuery().term("x").term(None).text is None


def test_sort_and_order_accept_wire_names():
    query = WorksQuery().sort("is-referenced-by-count").order("desc")

    assert query.sort_field is Sort.IS_REFERENCED_BY_COUNT
    assert query.sort_order is Order.DESC


def test_limit_is_clamped(debug_records):
    assert WorksQuery().limit(5000).rows == 1000
    assert WorksQuery().limit(-3).rows == 0
    assert WorksQuery().limit(20).rows == 20
    assert any("Clamped rows=5000 to 1000" in m for m in debug_records)


def test_negative_offset_is_clamped(debug_records):
    assert WorksQuery().offset(-10).skip == 0
    assert WorksQuery().offset(12000).skip == 12000
    assert any("Clamped offset=-10 to 0" in m for m in debug_records)


def test_sample_is_clamped():
    assert WorksQuery().sample(500).sample_size == 100
    assert WorksQuery().sample(0).sample_size == 1
    assert WorksQuery().sample(7).sample_size == 7


def test_add_filter_with_key_and_value():
    query = WorksQuery().add_filter(WorksFilterKey.FROM_PUB_DATE, "2020-01")

    assert query.filters == (
        WorksFilter(key=WorksFilterKey.FROM_PUB_DATE, value="2020-01"),
    )


def test_add_filter_accepts_instances():
    flt = WorksFilter(key=WorksFilterKey.HAS_ABSTRACT)

    assert WorksQuery().add_filter(flt).filters == (flt,)


def test_add_filter_replaces_existing_key_in_place():
    query = (
        WorksQuery()
        .add_filter(WorksFilterKey.TYPE, "book")
        .add_filter(WorksFilterKey.HAS_ORCID)
        .add_filter(WorksFilterKey.TYPE, "journal-article")
    )

    assert [(f.key, f.value) for f in query.filters] == [
        (WorksFilterKey.TYPE, "journal-article"),
        (WorksFilterKey.HAS_ORCID, "true"),
    ]


def test_add_filter_rejects_keys_of_other_resources():
    with pytest.raises(PydanticValidationError):
        WorksQuery().add_filter("location", "Germany")
    with pytest.raises(PydanticValidationError):
        MembersQuery().add_filter("not-a-filter")


def test_funders_filter():
    query = FundersQuery().add_filter(FundersFilterKey.LOCATION, "Japan")

    assert query.filters[0].fragment == "location:Japan"


def test_field_queries_upsert():
    query = (
        WorksQuery()
        .add_field_query(QueryField.AUTHOR, "Smith")
        .add_field_query("title", "  deep   learning ")
        .add_field_query(QueryField.AUTHOR, "Jones")
    )

    assert [fq.param for fq in query.field_queries] == [
        ("query.author", "Jones"),
        ("query.title", "deep learning"),
    ]


def test_facets_upsert():
    query = (
        WorksQuery()
        .add_facet(Facet.TYPE_NAME, 10)
        .add_facet("published")
        .add_facet(Facet.TYPE_NAME, 3)
    )

    assert [f.fragment for f in query.facets] == ["type-name:3", "published:*"]


def test_cursor_helpers():
    query = WorksQuery().new_cursor()

    assert query.cursor_token == START_CURSOR
    assert query.cursor("AoJ9").cursor_token == "AoJ9"
    assert query.without_cursor().cursor_token is None


def test_into_query_and_into_identifier():
    query = MembersQuery().term("elsevier")

    listing = query.into_query()
    single = query.into_identifier("78")

    assert listing.variant is TargetVariant.QUERY
    assert listing.kind is ResourceKind.MEMBERS
    assert listing.query == query
    assert single.variant is TargetVariant.IDENTIFIER
    assert single.id == "78"
    assert single.query is None


def test_combine_with_builds_nested_works_target():
    works = WorksQuery().term("x")

    target = works.combine_with("journals", "0028-0836")

    assert target.variant is TargetVariant.NESTED_WORKS
    assert target.kind is ResourceKind.JOURNALS
    assert target.id == "0028-0836"
    assert target.works_query == works


@pytest.mark.parametrize(
    "query_type", [MembersQuery, FundersQuery, JournalsQuery, TypesQuery]
)
def test_registry_queries_nest_works(query_type):
    target = query_type().into_nested_works("some-id")

    assert target.kind is query_type.kind
    assert target.works_query == WorksQuery()


def test_query_types_cover_listable_resources():
    assert set(QUERY_TYPES) == {
        ResourceKind.WORKS,
        ResourceKind.MEMBERS,
        ResourceKind.FUNDERS,
        ResourceKind.JOURNALS,
        ResourceKind.TYPES,
    }
    for kind, query_type in QUERY_TYPES.items():
        assert query_type.kind is kind


def test_low_facet_counts_are_clamped(debug_records):
    query = WorksQuery().add_facet("type-name", 0).add_facet(Facet.ORCID, -5)

    assert [f.fragment for f in query.facets] == ["type-name:1", "orcid:1"]
    assert any("Clamped facet count 0 to 1" in m for m in debug_records)
