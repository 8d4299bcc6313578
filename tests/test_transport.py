"""Tests for the httpx-backed transport."""

import httpx
import pytest
import pytest_asyncio

from crossloom.auth import PLUS_TOKEN_HEADER, PlusTokenAuth
from crossloom.config import CrossrefSettings
from crossloom.exceptions import (
    APIError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    TimeoutError,
)
from crossloom.transport import HttpTransport, Transport

@pytest_asyncio.fixture
async def transport(settings):
    async with HttpTransport(settings) as t:
        yield t


@pytest.mark.asyncio
async def test_http_transport_satisfies_protocol(transport):
    assert isinstance(transport, Transport)


@pytest.mark.asyncio
async def test_fetch_decodes_envelope(transport, httpx_mock, list_payload):
    httpx_mock.add_response(
        status_code=200,
        json=list_payload([{"DOI": "10.1/a"}], next_cursor="c1", total=42),
    )

    envelope = await transport.fetch("/works", [("query", "a")])

    assert envelope.message_type == "work-list"
    assert envelope.items == [{"DOI": "10.1/a"}]
    assert envelope.next_cursor == "c1"
    assert envelope.total_results == 42


@pytest.mark.asyncio
async def test_fetch_keeps_parameter_order(transport, httpx_mock, list_payload):
    httpx_mock.add_response(status_code=200, json=list_payload([]))
    params = [("query", "a b"), ("filter", "has-orcid:true"), ("rows", "5")]

    await transport.fetch("works", params)

    request = httpx_mock.get_requests()[0]
    assert request.url.path == "/works"
    assert request.url.host == "api.crossref.org"
    assert list(request.url.params.multi_items()) == params


@pytest.mark.asyncio
async def test_user_agent_carries_polite_email(httpx_mock, item_payload):
    settings = CrossrefSettings(_env_file=None, polite_email="me@example.org")
    httpx_mock.add_response(status_code=200, json=item_payload({"DOI": "10.1/a"}))

    async with HttpTransport(settings) as transport:
        await transport.fetch("/works/10.1/a")

    request = httpx_mock.get_requests()[0]
    assert request.headers["User-Agent"] == "crossloom/0.1.0 (mailto:me@example.org)"


@pytest.mark.asyncio
async def test_plus_token_header(settings, httpx_mock, item_payload):
    httpx_mock.add_response(status_code=200, json=item_payload({"DOI": "10.1/a"}))

    async with HttpTransport(settings, PlusTokenAuth("secret")) as transport:
        await transport.fetch("/works/10.1/a")

    request = httpx_mock.get_requests()[0]
    assert request.headers[PLUS_TOKEN_HEADER] == "Bearer secret"


@pytest.mark.asyncio
async def test_not_found_is_not_retried(transport, httpx_mock):
    httpx_mock.add_response(status_code=404, text="Resource not found.")

    with pytest.raises(NotFoundError) as exc_info:
        await transport.fetch("/works/10.1/missing")

    assert exc_info.value.response.status_code == 404
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_bad_request_is_not_retried(transport, httpx_mock):
    httpx_mock.add_response(status_code=400, json={"status": "failed"})

    with pytest.raises(APIError) as exc_info:
        await transport.fetch("/works", [("filter", "bogus:1")])

    assert not isinstance(exc_info.value, NotFoundError)
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_server_error_then_success(transport, httpx_mock, list_payload):
    httpx_mock.add_response(status_code=500)
    httpx_mock.add_response(status_code=200, json=list_payload([{"DOI": "10.1/a"}]))

    envelope = await transport.fetch("/works")

    assert envelope.items == [{"DOI": "10.1/a"}]
    assert len(httpx_mock.get_requests()) == 2


@pytest.mark.asyncio
async def test_rate_limit_exhausts_retries(transport, httpx_mock):
    httpx_mock.add_response(status_code=429, is_reusable=True)

    with pytest.raises(RateLimitError):
        await transport.fetch("/works")

    # max_retries=2 in the settings fixture
    assert len(httpx_mock.get_requests()) == 3


@pytest.mark.asyncio
async def test_timeout_is_retried_then_raised(transport, httpx_mock):
    httpx_mock.add_exception(httpx.ReadTimeout("too slow"), is_reusable=True)

    with pytest.raises(TimeoutError) as exc_info:
        await transport.fetch("/works")

    assert exc_info.value.request is not None
    assert len(httpx_mock.get_requests()) == 3


@pytest.mark.asyncio
async def test_invalid_json_raises_decode_error(transport, httpx_mock):
    httpx_mock.add_response(status_code=200, text="<html>maintenance</html>")

    with pytest.raises(ResponseDecodeError):
        await transport.fetch("/works")

    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_non_envelope_json_raises_decode_error(transport, httpx_mock):
    httpx_mock.add_response(status_code=200, json=["not", "an", "envelope"])

    with pytest.raises(ResponseDecodeError):
        await transport.fetch("/works")


@pytest.mark.asyncio
async def test_request_hooks(httpx_mock, list_payload):
    seen_attempts: list[int] = []

    def add_param(method, url, params, headers):
        params.append(("mailto", "hook@example.org"))
        headers["X-Trace"] = "on"

    def record(response, envelope, attempt):
        seen_attempts.append(attempt)

    def broken(response, envelope, attempt):
        raise RuntimeError("hook failure is logged, not raised")

    settings = CrossrefSettings(
        _env_file=None,
        backoff_factor=0.01,
        pre_request_hooks=[add_param],
        post_request_hooks=[record, broken],
    )
    httpx_mock.add_response(status_code=503)
    httpx_mock.add_response(status_code=200, json=list_payload([]))

    async with HttpTransport(settings) as transport:
        await transport.fetch("/works", [("rows", "1")])

    requests = httpx_mock.get_requests()
    assert list(requests[1].url.params.multi_items()) == [
        ("rows", "1"),
        ("mailto", "hook@example.org"),
    ]
    assert requests[1].headers["X-Trace"] == "on"
    assert seen_attempts == [1, 2]


@pytest.mark.asyncio
async def test_fetch_raw_returns_response(transport, httpx_mock):
    httpx_mock.add_response(
        url="https://doi.org/10.1/a", status_code=200, text="@article{a}"
    )

    response = await transport.fetch_raw(
        "https://doi.org/10.1/a", headers={"Accept": "application/x-bibtex"}
    )

    assert response.text == "@article{a}"
    assert httpx_mock.get_requests()[0].headers["Accept"] == "application/x-bibtex"


@pytest.mark.asyncio
async def test_fetch_raw_does_not_send_plus_token(settings, httpx_mock):
    httpx_mock.add_response(status_code=200, text="ok")

    async with HttpTransport(settings, PlusTokenAuth("secret")) as transport:
        await transport.fetch_raw("https://doi.org/10.1/a", headers={})

    assert PLUS_TOKEN_HEADER not in httpx_mock.get_requests()[0].headers


@pytest.mark.asyncio
async def test_fetch_raw_not_found(transport, httpx_mock):
    httpx_mock.add_response(status_code=404)

    with pytest.raises(NotFoundError):
        await transport.fetch_raw("https://doi.org/10.1/missing", headers={})


@pytest.mark.asyncio
async def test_external_client_is_not_closed(settings):
    client = httpx.AsyncClient()
    transport = HttpTransport(settings, http_client=client)

    await transport.aclose()

    assert not client.is_closed
    await client.aclose()
