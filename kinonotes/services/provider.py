"""High-level entry points used by the note-creation front end."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..config import FolderPaths
from ..models import MovieShow
from ..transformer import RecordTransformer
from .kinopoisk import KinopoiskClient

logger = logging.getLogger(__name__)


class KinopoiskProvider:
    """Combine the API client with the record transformer."""

    def __init__(
        self,
        client: KinopoiskClient,
        folder_paths: FolderPaths | None = None,
    ) -> None:
        self._client = client
        self._transformer = RecordTransformer(folder_paths)

    async def search(self, query: str, token: str) -> list[dict[str, Any]]:
        return await self._client.search(query, token)

    async def fetch_by_id(self, movie_id: int, token: str) -> MovieShow:
        """Fetch a movie or series and flatten it for templates."""

        payload = await self._client.fetch_by_id(movie_id, token)
        movie = self._transformer.transform(payload)
        logger.info("Loaded Kinopoisk record %s", movie.id)
        return movie

    async def validate_token(self, token: str) -> bool:
        return await self._client.validate_token(token)

    @staticmethod
    def filter_results(
        items: Iterable[dict[str, Any]], query: str | None
    ) -> list[dict[str, Any]]:
        """Narrow search results to those whose names contain ``query``."""

        needle = (query or "").strip().casefold()
        results = list(items)
        if not needle:
            return results

        def matches(item: dict[str, Any]) -> bool:
            for key in ("name", "alternativeName"):
                value = item.get(key)
                if isinstance(value, str) and needle in value.casefold():
                    return True
            return False

        return [item for item in results if matches(item)]
