"""Text helpers shared by the formatter and the record transformer."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Mapping

MIN_DATE_YEAR = 1800
MAX_DATE_YEAR = 2100

# Display names for the kinopoisk.dev content type codes.
TYPE_TRANSLATIONS: Mapping[str, str] = MappingProxyType(
    {
        "animated-series": "Анимационный сериал",
        "anime": "Аниме",
        "cartoon": "Мультфильм",
        "movie": "Фильм",
        "tv-series": "Сериал",
    }
)

HTML_ENTITIES: Mapping[str, str] = MappingProxyType(
    {
        "&laquo;": "«",
        "&raquo;": "»",
        "&ldquo;": '"',
        "&rdquo;": '"',
        "&lsquo;": "'",
        "&rsquo;": "'",
        "&quot;": '"',
        "&amp;": "&",
        "&lt;": "<",
        "&gt;": ">",
        "&nbsp;": " ",
        "&ndash;": "–",
        "&mdash;": "—",
        "&hellip;": "…",
    }
)

HTML_TAG_RE = re.compile(r"<[^>]*>")
HTML_ENTITY_RE = re.compile(r"&#?\w+;")
WHITESPACE_RE = re.compile(r"\s+")
METADATA_BREAKING_RE = re.compile(r":")


def clean_text_for_metadata(text: Any) -> str:
    """Remove characters that would break YAML front matter values."""

    if not isinstance(text, str) or not text:
        return ""
    return METADATA_BREAKING_RE.sub("", text).strip()


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


def capitalize_first_letter(text: Any) -> str:
    if not isinstance(text, str) or not text:
        return ""
    return text[0].upper() + text[1:]


def strip_html_tags(text: str) -> str:
    """Drop HTML markup, decode common entities and remove any leftovers."""

    clean_text = HTML_TAG_RE.sub("", text)
    for entity, char in HTML_ENTITIES.items():
        clean_text = clean_text.replace(entity, char)
    clean_text = HTML_ENTITY_RE.sub("", clean_text)
    return clean_text.strip()


def translate_type(type_code: Any) -> str:
    if not isinstance(type_code, str):
        return ""
    return TYPE_TRANSLATIONS.get(type_code, type_code)


def _parse_datetime(value: str) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def format_date(value: Any) -> str:
    """Render a date string as ``YYYY-MM-DD`` in UTC.

    Unparseable values and years outside 1800..2100 yield an empty string.
    """

    if not isinstance(value, str) or not value:
        return ""
    parsed = _parse_datetime(value)
    if parsed is None:
        return ""
    if not MIN_DATE_YEAR <= parsed.year <= MAX_DATE_YEAR:
        return ""
    return parsed.date().isoformat()


def round_half_up(value: Any) -> int:
    """Round a rating to the nearest integer with ties going away from zero."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    try:
        rounded = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return 0
    return int(rounded)


def create_image_link(image_path: Any) -> list[str]:
    """Return an embed for a poster/backdrop/logo reference.

    Local vault paths use ``![[path]]`` while remote URLs use ``![](url)``.
    """

    if not isinstance(image_path, str) or not image_path.strip():
        return []
    if not image_path.startswith("http"):
        return [f"![[{image_path}]]"]
    return [f"![]({image_path})"]
