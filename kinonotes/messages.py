"""Short user-facing messages in the supported interface languages."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .config import settings

DEFAULT_LANGUAGE = "en"

_ENGLISH: dict[str, str] = {
    "provider.token_required": "Kinopoisk API token is required. Add it in the settings.",
    "provider.token_required_for_movie": "An API token is required to load movie details.",
    "provider.enter_movie_title": "Enter a movie or series title to search.",
    "provider.invalid_movie_id": "Invalid movie ID.",
    "provider.nothing_found": 'Nothing found for "{query}".',
    "provider.try_change_query": "Try changing the search query.",
    "provider.movie_info_error": "Could not load movie information.",
    "errors.unauthorized": "Invalid or missing API token. Check the settings.",
    "errors.rate_limited": "Request limit exceeded. Try again later.",
    "errors.not_found": "The movie was not found.",
    "errors.server_error": "Kinopoisk server error. Try again later.",
    "errors.network_error": "Network error. Check your internet connection.",
    "errors.unknown": "Unexpected error while contacting Kinopoisk.",
}

_RUSSIAN: dict[str, str] = {
    "provider.token_required": "Требуется API токен Кинопоиска. Добавьте его в настройках.",
    "provider.token_required_for_movie": "Для загрузки информации о фильме нужен API токен.",
    "provider.enter_movie_title": "Введите название фильма или сериала для поиска.",
    "provider.invalid_movie_id": "Некорректный ID фильма.",
    "provider.nothing_found": "По запросу «{query}» ничего не найдено.",
    "provider.try_change_query": "Попробуйте изменить запрос.",
    "provider.movie_info_error": "Не удалось получить информацию о фильме.",
    "errors.unauthorized": "Неверный или отсутствующий API токен. Проверьте настройки.",
    "errors.rate_limited": "Превышен лимит запросов. Попробуйте позже.",
    "errors.not_found": "Фильм не найден.",
    "errors.server_error": "Ошибка сервера Кинопоиска. Попробуйте позже.",
    "errors.network_error": "Ошибка сети. Проверьте подключение к интернету.",
    "errors.unknown": "Неизвестная ошибка при обращении к Кинопоиску.",
}

MESSAGES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "en": MappingProxyType(_ENGLISH),
        "ru": MappingProxyType(_RUSSIAN),
    }
)


def translate(key: str, language: str | None = None, **params: object) -> str:
    """Return the message for ``key`` with ``params`` substituted.

    Unknown languages fall back to English and unknown keys are returned as-is.
    """

    code = (language or settings.language or DEFAULT_LANGUAGE).strip().lower()
    table = MESSAGES.get(code) or MESSAGES[DEFAULT_LANGUAGE]
    template = table.get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key)
    if template is None:
        return key
    if not params:
        return template
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template
