"""Tests for the kinopoisk.dev API client."""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx
import pytest

from kinonotes.config import Settings
from kinonotes.errors import (
    EmptyResultError,
    ErrorCategory,
    InvalidInputError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
    UnknownApiError,
)
from kinonotes.services.kinopoisk import KinopoiskClient, build_query_params


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base: dict[str, Any] = {"KINOPOISK_API_URL": "https://api.example.com/v1.4"}
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


def make_client(
    handler: Callable[[httpx.Request], httpx.Response], **overrides: Any
) -> tuple[KinopoiskClient, httpx.AsyncClient]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return KinopoiskClient(build_settings(**overrides), http_client), http_client


def _unexpected(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"Network access should not be triggered: {request.url}")


@pytest.mark.anyio("asyncio")
async def test_search_sends_query_limit_and_trimmed_token() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"docs": [{"id": 301, "name": "Матрица"}], "total": 1})

    client, http_client = make_client(handler)
    async with http_client:
        results = await client.search("  Матрица ", "  secret-token \n")

    assert results == [{"id": 301, "name": "Матрица"}]
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v1.4/movie/search"
    assert request.url.params["query"] == "Матрица"
    assert request.url.params["limit"] == "50"
    assert request.headers["X-API-KEY"] == "secret-token"
    assert request.headers["Accept"] == "*/*"
    assert "token" not in request.url.params


@pytest.mark.anyio("asyncio")
async def test_search_without_token_fails_before_network() -> None:
    client, http_client = make_client(_unexpected)
    async with http_client:
        with pytest.raises(InvalidInputError) as excinfo:
            await client.search("Матрица", "   ")

    assert excinfo.value.category is ErrorCategory.INVALID_INPUT


@pytest.mark.anyio("asyncio")
async def test_search_with_blank_query_fails_before_network() -> None:
    client, http_client = make_client(_unexpected)
    async with http_client:
        with pytest.raises(InvalidInputError):
            await client.search("  ", "token")


@pytest.mark.anyio("asyncio")
async def test_search_without_documents_reports_query() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"docs": [], "total": 0})

    client, http_client = make_client(handler)
    async with http_client:
        with pytest.raises(EmptyResultError) as excinfo:
            await client.search("Несуществующий фильм", "token")

    assert "Несуществующий фильм" in excinfo.value.user_message


@pytest.mark.anyio("asyncio")
async def test_fetch_by_id_returns_raw_payload() -> None:
    requests: list[httpx.Request] = []
    body = {"id": 301, "name": "Матрица", "persons": []}

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=body)

    client, http_client = make_client(handler)
    async with http_client:
        payload = await client.fetch_by_id(301, "token")

    assert payload == body
    assert requests[0].url.path == "/v1.4/movie/301"
    assert not requests[0].url.params


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("movie_id", [0, -1])
async def test_fetch_by_id_rejects_invalid_ids(movie_id: int) -> None:
    client, http_client = make_client(_unexpected)
    async with http_client:
        with pytest.raises(InvalidInputError):
            await client.fetch_by_id(movie_id, "token")


@pytest.mark.anyio("asyncio")
async def test_fetch_by_id_empty_body_is_empty_result() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    client, http_client = make_client(handler)
    async with http_client:
        with pytest.raises(EmptyResultError):
            await client.fetch_by_id(301, "token")


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (401, UnauthorizedError),
        (403, UnauthorizedError),
        (404, NotFoundError),
        (429, RateLimitedError),
        (500, ServerError),
        (503, ServerError),
        (400, UnknownApiError),
    ],
)
async def test_http_failures_are_translated(status: int, error_type: type) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": "upstream says no"})

    client, http_client = make_client(handler)
    async with http_client:
        with pytest.raises(error_type) as excinfo:
            await client.fetch_by_id(301, "token")

    assert excinfo.value.status_code == status
    assert "upstream says no" in (excinfo.value.detail or "")
    assert "upstream says no" not in excinfo.value.user_message


@pytest.mark.anyio("asyncio")
async def test_transport_failures_are_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http_client = make_client(handler)
    async with http_client:
        with pytest.raises(NetworkError):
            await client.search("Матрица", "token")


@pytest.mark.anyio("asyncio")
async def test_invalid_json_is_unknown_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    client, http_client = make_client(handler)
    async with http_client:
        with pytest.raises(UnknownApiError):
            await client.fetch_by_id(301, "token")


@pytest.mark.anyio("asyncio")
async def test_validate_token_probe() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"docs": [{"id": 1}]})

    client, http_client = make_client(handler)
    async with http_client:
        assert await client.validate_token("token") is True

    assert requests[0].url.path == "/v1.4/movie"
    assert requests[0].url.params["page"] == "1"
    assert requests[0].url.params["limit"] == "1"


@pytest.mark.anyio("asyncio")
async def test_validate_token_swallows_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["X-API-KEY"] == "offline":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(401, json={"message": "bad token"})

    client, http_client = make_client(handler)
    async with http_client:
        assert await client.validate_token("expired") is False
        assert await client.validate_token("offline") is False
        assert await client.validate_token("") is False


@pytest.mark.anyio("asyncio")
async def test_messages_follow_configured_language() -> None:
    client, http_client = make_client(_unexpected, UI_LANGUAGE="ru")
    async with http_client:
        with pytest.raises(InvalidInputError) as excinfo:
            await client.fetch_by_id(0, "token")

    assert excinfo.value.user_message == "Некорректный ID фильма."


def test_build_query_params_skips_missing_values() -> None:
    params = build_query_params({"query": "dune", "limit": 50, "page": None, "type": ""})

    assert params == {"query": "dune", "limit": "50"}


def _warnings(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [
        record
        for record in caplog.records
        if record.name.startswith("kinonotes") and record.levelno >= logging.WARNING
    ]


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    ("call", "error_type", "category"),
    [
        (lambda client: client.search("x", ""), InvalidInputError, "invalid_input"),
        (lambda client: client.search("  ", "token"), InvalidInputError, "invalid_input"),
        (lambda client: client.fetch_by_id(0, "token"), InvalidInputError, "invalid_input"),
        (lambda client: client.fetch_by_id(301, " "), InvalidInputError, "invalid_input"),
    ],
)
async def test_rejected_input_is_logged_once(
    caplog: pytest.LogCaptureFixture,
    call: Callable[[KinopoiskClient], Any],
    error_type: type,
    category: str,
) -> None:
    client, http_client = make_client(_unexpected)
    with caplog.at_level(logging.WARNING, logger="kinonotes"):
        async with http_client:
            with pytest.raises(error_type) as excinfo:
                await call(client)

    records = _warnings(caplog)
    assert len(records) == 1
    assert category in records[0].getMessage()
    assert excinfo.value.detail


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    ("status", "body", "error_type", "category"),
    [
        (200, {"docs": []}, EmptyResultError, "empty_result"),
        (401, {"message": "bad token"}, UnauthorizedError, "unauthorized"),
        (429, {"message": "limit"}, RateLimitedError, "rate_limited"),
        (404, {"message": "missing"}, NotFoundError, "not_found"),
        (500, {"message": "boom"}, ServerError, "server_error"),
    ],
)
async def test_failed_search_is_logged_once(
    caplog: pytest.LogCaptureFixture,
    status: int,
    body: dict[str, Any],
    error_type: type,
    category: str,
) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    client, http_client = make_client(handler)
    with caplog.at_level(logging.WARNING, logger="kinonotes"):
        async with http_client:
            with pytest.raises(error_type):
                await client.search("Матрица", "token")

    records = _warnings(caplog)
    assert len(records) == 1
    assert category in records[0].getMessage()


@pytest.mark.anyio("asyncio")
async def test_empty_movie_record_is_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    client, http_client = make_client(handler)
    with caplog.at_level(logging.WARNING, logger="kinonotes"):
        async with http_client:
            with pytest.raises(EmptyResultError):
                await client.fetch_by_id(301, "token")

    assert len(_warnings(caplog)) == 1


@pytest.mark.anyio("asyncio")
async def test_network_failure_is_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http_client = make_client(handler)
    with caplog.at_level(logging.WARNING, logger="kinonotes"):
        async with http_client:
            with pytest.raises(NetworkError):
                await client.fetch_by_id(301, "token")

    records = _warnings(caplog)
    assert len(records) == 1
    assert "network_error" in records[0].getMessage()
