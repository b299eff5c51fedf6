"""Guards applied to user input before any request is issued."""

from __future__ import annotations

from typing import Any


def is_valid_token(token: Any) -> bool:
    """Return ``True`` when the API token is a non-blank string."""

    return isinstance(token, str) and token.strip() != ""


def is_valid_search_query(query: Any) -> bool:
    """Return ``True`` when the search query is a non-blank string."""

    return isinstance(query, str) and query.strip() != ""


def is_valid_movie_id(movie_id: Any) -> bool:
    """Return ``True`` for positive integer identifiers."""

    if isinstance(movie_id, bool) or not isinstance(movie_id, int):
        return False
    return movie_id > 0
