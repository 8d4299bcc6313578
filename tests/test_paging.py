"""Tests for cursor deep paging."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from crossloom.exceptions import NetworkError, ValidationError
from crossloom.models import Work
from crossloom.paging import DeepPager, PagerState
from crossloom.query import MembersQuery, WorksQuery
from crossloom.targets import ResourceTarget
from crossloom.vocabulary import ResourceKind


@pytest.fixture
def transport():
    """A transport double recording every fetch call."""
    mock = AsyncMock()
    mock.fetch = AsyncMock()
    return mock


def sent_params(transport) -> list[dict[str, str]]:
    return [dict(call.args[1]) for call in transport.fetch.await_args_list]


@pytest.mark.asyncio
async def test_walk_until_empty_page(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}, {"DOI": "10.1/b"}], next_cursor="c1"),
        work_list([{"DOI": "10.1/c"}], next_cursor="c2"),
        work_list([], next_cursor="c3"),
    ]
    pager = DeepPager(transport, WorksQuery().term("x"), page_size=2)

    pages = [page async for page in pager.pages()]

    assert [len(p.items) for p in pages] == [2, 1]
    assert pager.state is PagerState.EXHAUSTED
    assert transport.fetch.await_count == 3
    assert [p["cursor"] for p in sent_params(transport)] == ["*", "c1", "c2"]
    assert all(p["rows"] == "2" for p in sent_params(transport))


@pytest.mark.asyncio
async def test_stalled_cursor_stops_walk(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}], next_cursor="same"),
        work_list([{"DOI": "10.1/b"}], next_cursor="same"),
    ]
    pager = DeepPager(transport, WorksQuery())

    first = await pager.advance()
    second = await pager.advance()
    third = await pager.advance()

    assert first is not None and second is not None
    assert third is None
    assert pager.state is PagerState.EXHAUSTED
    assert transport.fetch.await_count == 2


@pytest.mark.asyncio
async def test_missing_cursor_stops_walk(transport, work_list):
    transport.fetch.side_effect = [work_list([{"DOI": "10.1/a"}])]
    pager = DeepPager(transport, WorksQuery())

    pages = [page async for page in pager]

    assert len(pages) == 1
    assert pager.state is PagerState.EXHAUSTED
    assert transport.fetch.await_count == 1


@pytest.mark.asyncio
async def test_first_page_empty_yields_nothing(transport, work_list):
    transport.fetch.side_effect = [work_list([], next_cursor="c1")]
    pager = DeepPager(transport, WorksQuery())

    pages = [page async for page in pager.pages()]

    assert pages == []
    assert pager.state is PagerState.EXHAUSTED


@pytest.mark.asyncio
async def test_limit_fetches_exactly_one_page(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}, {"DOI": "10.1/b"}], next_cursor="c1"),
    ]
    pager = DeepPager(transport, WorksQuery().limit(2), page_size=100)

    pages = [page async for page in pager.pages()]

    assert len(pages) == 1
    assert transport.fetch.await_count == 1
    params = sent_params(transport)[0]
    assert params["rows"] == "2"
    assert "cursor" not in params


@pytest.mark.asyncio
async def test_limit_returns_empty_page(transport, work_list):
    transport.fetch.side_effect = [work_list([])]
    pager = DeepPager(transport, WorksQuery().limit(10))

    page = await pager.advance()

    assert page is not None
    assert page.items == []
    assert await pager.advance() is None
    assert transport.fetch.await_count == 1


@pytest.mark.asyncio
async def test_sample_is_a_single_request(transport, work_list):
    transport.fetch.side_effect = [work_list([{"DOI": "10.1/a"}], next_cursor="c")]
    pager = DeepPager(transport, WorksQuery().sample(1))

    pages = [page async for page in pager.pages()]

    assert len(pages) == 1
    assert sent_params(transport) == [{"sample": "1"}]


@pytest.mark.asyncio
async def test_transport_error_moves_to_error_state(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}], next_cursor="c1"),
        NetworkError("connection reset"),
    ]
    pager = DeepPager(transport, WorksQuery())

    assert await pager.advance() is not None
    with pytest.raises(NetworkError):
        await pager.advance()

    assert pager.state is PagerState.ERROR
    assert await pager.advance() is None
    assert transport.fetch.await_count == 2


@pytest.mark.asyncio
async def test_starts_from_explicit_cursor(transport, work_list):
    transport.fetch.side_effect = [work_list([])]
    pager = DeepPager(transport, WorksQuery().cursor("resume-here"))

    assert pager.cursor == "resume-here"
    assert pager.template.get("cursor") is None
    await pager.advance()

    assert sent_params(transport)[0]["cursor"] == "resume-here"


@pytest.mark.asyncio
async def test_offset_is_dropped_from_cursor_requests(transport, work_list):
    transport.fetch.side_effect = [work_list([])]
    pager = DeepPager(transport, WorksQuery().offset(50), page_size=10)

    await pager.advance()

    assert transport.fetch.await_args.args[1] == (("rows", "10"), ("cursor", "*"))


@pytest.mark.asyncio
async def test_nested_works_target(transport, work_list):
    transport.fetch.side_effect = [work_list([])]
    target = ResourceTarget.nested_works(ResourceKind.MEMBERS, "98")
    pager = DeepPager(transport, target, page_size=5)

    await pager.advance()

    assert transport.fetch.await_args.args[0] == "/members/98/works"


def test_rejects_targets_that_do_not_list_works(transport):
    with pytest.raises(ValidationError):
        DeepPager(transport, MembersQuery())
    with pytest.raises(ValidationError):
        DeepPager(transport, ResourceTarget.identifier("works", "10.1/a"))


def test_initial_state(transport):
    pager = DeepPager(transport, WorksQuery())

    assert pager.state is PagerState.INIT
    assert pager.cursor == "*"
    transport.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_items_flatten_pages_in_order(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}, {"DOI": "10.1/b"}], next_cursor="c1"),
        work_list([{"DOI": "10.1/c"}], next_cursor="c2"),
        work_list([]),
    ]
    pager = DeepPager(transport, WorksQuery(), item_model=Work)

    works = [item async for item in pager.items()]

    assert [w.doi for w in works] == ["10.1/a", "10.1/b", "10.1/c"]
    assert all(isinstance(w, Work) for w in works)


@pytest.mark.asyncio
async def test_unparseable_items_are_kept_raw(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}, {"title": ["no doi"]}]),
    ]
    pager = DeepPager(transport, WorksQuery(), item_model=Work)

    page = await pager.advance()

    assert isinstance(page.items[0], Work)
    assert page.items[1] == {"title": ["no doi"]}


@pytest.mark.parametrize("page_size, rows", [(5000, "1000"), (0, "1"), (-3, "1")])
def test_page_size_is_clamped(transport, page_size, rows):
    pager = DeepPager(transport, WorksQuery(), page_size=page_size)

    assert pager.template.params == (("rows", rows),)


@pytest.mark.asyncio
async def test_zero_page_size_still_walks(transport, work_list):
    transport.fetch.side_effect = [
        work_list([{"DOI": "10.1/a"}], next_cursor="c1"),
        work_list([]),
    ]
    pager = DeepPager(transport, WorksQuery(), page_size=0)

    dois = [item["DOI"] async for item in pager.items()]

    assert dois == ["10.1/a"]
    assert sent_params(transport)[0]["rows"] == "1"


@pytest.mark.asyncio
async def test_unbuildable_page_moves_to_error_state(transport, work_list):
    envelope = work_list([{"DOI": "10.1/a"}], next_cursor="c1")
    envelope.message["facets"] = {"type-name": "not-a-facet-object"}
    transport.fetch.side_effect = [envelope]
    pager = DeepPager(transport, WorksQuery())

    with pytest.raises(PydanticValidationError):
        await pager.advance()

    assert pager.state is PagerState.ERROR
    assert await pager.advance() is None
    assert transport.fetch.await_count == 1
