"""Rendering of text and entity collections into template-safe strings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from .utils import clean_text_for_metadata, collapse_whitespace

MAX_ARRAY_ITEMS = 50
MAX_FACTS_COUNT = 5


class FormatMode(str, Enum):
    """How a collection is rendered for a template placeholder."""

    SHORT_VALUE = "short"  # genres, names: bare cleaned strings
    LONG_TEXT = "long"  # descriptions: quoted, single line
    URL = "url"
    LINK = "link"  # "[[Name]]"
    LINK_WITH_PATH = "link_with_path"  # "[[path/Name]]"
    LINK_ID_WITH_PATH = "link_id_with_path"  # "[[path/Id|Name]]"


@dataclass(frozen=True, slots=True)
class Scalar:
    """A bare text value."""

    value: str


@dataclass(frozen=True, slots=True)
class Entity:
    """A named item that may carry a numeric identifier."""

    name: str
    id: int | None = None


FormatInput = Union[Scalar, Entity, str]


def _as_text(item: object) -> str:
    if isinstance(item, Entity):
        return item.name if isinstance(item.name, str) else ""
    if isinstance(item, Scalar):
        return item.value if isinstance(item.value, str) else ""
    if isinstance(item, str):
        return item
    return ""


def _as_entity(item: object) -> Entity | None:
    if isinstance(item, Entity):
        return item if isinstance(item.name, str) else None
    text = _as_text(item)
    return Entity(name=text) if text else None


def _has_path(folder_path: str | None) -> bool:
    return isinstance(folder_path, str) and folder_path.strip() != ""


def _render_id_link(entity: Entity, folder_path: str | None) -> str:
    clean_name = clean_text_for_metadata(entity.name)
    if entity.id and _has_path(folder_path):
        return f'"[[{folder_path}/{entity.id}|{clean_name}]]"'
    if entity.id:
        return f'"[[{entity.id}|{clean_name}]]"'
    return f'"[[{clean_name}]]"'


def _render(text: str, mode: FormatMode, folder_path: str | None) -> str:
    if mode is FormatMode.SHORT_VALUE:
        return clean_text_for_metadata(text)
    if mode is FormatMode.LONG_TEXT:
        return f'"{collapse_whitespace(text)}"'
    if mode is FormatMode.URL:
        return text.strip()
    clean_name = clean_text_for_metadata(text)
    if mode is FormatMode.LINK_WITH_PATH and _has_path(folder_path):
        return f'"[[{folder_path}/{clean_name}]]"'
    return f'"[[{clean_name}]]"'


def format_items(
    items: Iterable[FormatInput] | None,
    mode: FormatMode,
    folder_path: str | None = None,
    max_items: int = MAX_ARRAY_ITEMS,
) -> list[str]:
    """Render ``items`` for a template field according to ``mode``.

    Blank entries are dropped and the result holds at most ``max_items``
    strings. Only :attr:`FormatMode.LINK_ID_WITH_PATH` uses entity ids; every
    other mode works on the entity name or scalar text.
    """

    if not items:
        return []

    if mode is FormatMode.LINK_ID_WITH_PATH:
        entities = [
            entity
            for entity in (_as_entity(item) for item in items)
            if entity is not None and entity.name.strip()
        ]
        return [_render_id_link(entity, folder_path) for entity in entities[:max_items]]

    texts = [text for text in (_as_text(item) for item in items) if text.strip()]
    return [_render(text, mode, folder_path) for text in texts[:max_items]]
