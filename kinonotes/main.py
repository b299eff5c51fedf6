"""Entry point for the FastAPI service exposing Kinopoisk search and notes."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .errors import ErrorCategory, KinopoiskError
from .services.kinopoisk import KinopoiskClient
from .services.provider import KinopoiskProvider

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI

STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.INVALID_INPUT: 400,
    ErrorCategory.EMPTY_RESULT: 404,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.UNAUTHORIZED: 401,
    ErrorCategory.RATE_LIMITED: 429,
}


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0),
        )
    )
    client = KinopoiskClient(settings, http_client)
    fastapi_app.state.provider = KinopoiskProvider(client, settings.folder_paths)

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Kinopoisk movie and series data flattened for note templates",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_provider(app: FastAPI) -> KinopoiskProvider:
    provider = getattr(app.state, "provider", None)
    if not isinstance(provider, KinopoiskProvider):
        raise RuntimeError("Kinopoisk provider not initialised")
    return provider


def _error_to_http(exc: KinopoiskError) -> HTTPException:
    status = STATUS_BY_CATEGORY.get(exc.category, 502)
    logger.debug(
        "Request failed with %s: %s (%s)",
        exc.category.value,
        exc.user_message,
        exc.detail or "no detail",
    )
    return HTTPException(
        status_code=status,
        detail={"category": exc.category.value, "message": exc.user_message},
    )


def register_routes(fastapi_app: FastAPI) -> None:
    def _resolve_token(header_token: str | None) -> str:
        if header_token and header_token.strip():
            return header_token
        return settings.kinopoisk_api_token or ""

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/search")
    async def search(
        q: str = Query(default=""),
        x_api_key: str | None = Header(default=None),
    ) -> list[dict[str, Any]]:
        provider = get_provider(fastapi_app)
        try:
            return await provider.search(q, _resolve_token(x_api_key))
        except KinopoiskError as exc:
            raise _error_to_http(exc) from exc

    @fastapi_app.get("/movies/{movie_id}")
    async def movie(
        movie_id: int,
        x_api_key: str | None = Header(default=None),
    ) -> dict[str, Any]:
        provider = get_provider(fastapi_app)
        try:
            movie_show = await provider.fetch_by_id(movie_id, _resolve_token(x_api_key))
        except KinopoiskError as exc:
            raise _error_to_http(exc) from exc
        return movie_show.to_template_fields()

    @fastapi_app.get("/token/validate")
    async def validate_token(
        x_api_key: str | None = Header(default=None),
    ) -> dict[str, bool]:
        provider = get_provider(fastapi_app)
        return {"valid": await provider.validate_token(_resolve_token(x_api_key))}


app = create_app()
