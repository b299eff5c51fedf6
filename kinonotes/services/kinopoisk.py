"""Client for the kinopoisk.dev REST API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..config import Settings
from ..errors import (
    EmptyResultError,
    InvalidInputError,
    KinopoiskError,
    translate_error,
)
from ..messages import translate
from ..validation import is_valid_movie_id, is_valid_search_query, is_valid_token

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 50

SEARCH_ENDPOINT = "/movie/search"
MOVIE_ENDPOINT = "/movie/{movie_id}"
PROBE_ENDPOINT = "/movie"


def build_query_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop ``None`` and empty-string values and stringify the rest."""

    cleaned: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        cleaned[key] = str(value)
    return cleaned


class KinopoiskClient:
    """Thin wrapper around the kinopoisk.dev v1.4 HTTP API.

    Input is validated before any request is made, and every transport or
    HTTP failure is translated into a :class:`~kinonotes.errors.KinopoiskError`.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client
        self._base_url = str(settings.kinopoisk_api_url).rstrip("/")

    def build_url(self, endpoint: str) -> str:
        return f"{self._base_url}{endpoint}"

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Accept": "*/*",
            "X-API-KEY": token.strip(),
        }

    def _translate(self, key: str, **params: Any) -> str:
        return translate(key, self._settings.language, **params)

    def _reject(
        self, error_cls: type[KinopoiskError], user_message: str, detail: str
    ) -> KinopoiskError:
        """Build an error raised outside the HTTP exchange and log it."""

        error = error_cls(user_message, detail=detail)
        logger.warning(
            "Kinopoisk request rejected (%s): %s", error.category.value, detail
        )
        return error

    async def _get(
        self,
        endpoint: str,
        token: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        if not is_valid_token(token):
            raise self._reject(
                InvalidInputError,
                self._translate("provider.token_required"),
                f"missing API token for {endpoint}",
            )

        url = self.build_url(endpoint)
        try:
            response = await self._client.get(
                url,
                params=build_query_params(params),
                headers=self._headers(token),
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise translate_error(exc, language=self._settings.language) from exc

    async def search(self, query: str, token: str) -> list[dict[str, Any]]:
        """Search movies and series by title.

        Results are returned exactly as the API sends them.
        """

        if not is_valid_search_query(query):
            raise self._reject(
                InvalidInputError,
                self._translate("provider.enter_movie_title"),
                f"blank search query {query!r}",
            )

        payload = await self._get(
            SEARCH_ENDPOINT,
            token,
            {"query": query.strip(), "limit": MAX_SEARCH_RESULTS},
        )
        docs = payload.get("docs") if isinstance(payload, dict) else None
        if not isinstance(docs, list) or not docs:
            raise self._reject(
                EmptyResultError,
                f"{self._translate('provider.nothing_found', query=query)} "
                f"{self._translate('provider.try_change_query')}",
                f"search returned no documents for {query!r}",
            )
        return docs

    async def fetch_by_id(self, movie_id: int, token: str) -> dict[str, Any]:
        """Return the raw full record for ``movie_id``."""

        if not is_valid_movie_id(movie_id):
            raise self._reject(
                InvalidInputError,
                self._translate("provider.invalid_movie_id"),
                f"invalid movie id {movie_id!r}",
            )
        if not is_valid_token(token):
            raise self._reject(
                InvalidInputError,
                self._translate("provider.token_required_for_movie"),
                f"missing API token for movie {movie_id}",
            )

        payload = await self._get(MOVIE_ENDPOINT.format(movie_id=movie_id), token)
        if not payload:
            raise self._reject(
                EmptyResultError,
                self._translate("provider.movie_info_error"),
                f"empty record for movie {movie_id}",
            )
        return payload

    async def validate_token(self, token: str) -> bool:
        """Probe the API with ``token``; any failure counts as invalid."""

        if not is_valid_token(token):
            return False
        try:
            await self._get(PROBE_ENDPOINT, token, {"page": 1, "limit": 1})
        except KinopoiskError:
            # Already logged where the error was raised.
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning("Kinopoisk token validation failed: %s", exc)
            return False
        return True
