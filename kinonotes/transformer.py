"""Conversion of a full kinopoisk.dev record into a flat template record."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .config import FolderPaths
from .formatting import (
    MAX_FACTS_COUNT,
    Entity,
    FormatMode,
    format_items,
)
from .models import Fact, FullRecord, MovieShow, Person, RoleKey, SeasonInfo
from .utils import (
    capitalize_first_letter,
    create_image_link,
    format_date,
    round_half_up,
    strip_html_tags,
    translate_type,
)

logger = logging.getLogger(__name__)

KINOPOISK_FILM_URL = "https://www.kinopoisk.ru/film/{id}/"
ROLE_KEYS: tuple[RoleKey, ...] = ("director", "actor", "writer", "producer")


@dataclass(slots=True)
class SeasonsSummary:
    count: int = 0
    average_episodes_per_season: int = 0


@dataclass(slots=True)
class PersonLinks:
    """One role's people rendered four ways, index-aligned."""

    plain: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    links_with_path: list[str] = field(default_factory=list)
    ids_with_path: list[str] = field(default_factory=list)


def calculate_seasons(seasons: Iterable[SeasonInfo] | None) -> SeasonsSummary:
    """Return the season count and the rounded-up episodes per season."""

    seasons = list(seasons or [])
    if not seasons:
        return SeasonsSummary()
    total_episodes = 0
    for season in seasons:
        episodes = season.episodes_count
        if isinstance(episodes, (int, float)) and math.isfinite(episodes):
            total_episodes += episodes
    return SeasonsSummary(
        count=len(seasons),
        average_episodes_per_season=math.ceil(total_episodes / len(seasons)),
    )


def group_people(persons: Iterable[Person] | None) -> dict[RoleKey, list[Entity]]:
    """Bucket people by their English profession key.

    Entries lacking a name or a profession, and professions outside the four
    supported roles, are skipped.
    """

    groups: dict[RoleKey, list[Entity]] = {role: [] for role in ROLE_KEYS}
    for person in persons or []:
        if not person.name or not person.en_profession:
            continue
        bucket = groups.get(person.en_profession)  # type: ignore[call-overload]
        if bucket is None:
            continue
        bucket.append(Entity(name=person.name, id=person.id))
    return groups


def render_people(people: list[Entity], folder_path: str | None) -> PersonLinks:
    """Render a role's people in every representation from one ordered list."""

    # All four representations index the same filtered list.
    people = [person for person in people if person.name.strip()]
    return PersonLinks(
        plain=format_items(people, FormatMode.SHORT_VALUE),
        links=format_items(people, FormatMode.LINK),
        links_with_path=format_items(people, FormatMode.LINK_WITH_PATH, folder_path),
        ids_with_path=format_items(people, FormatMode.LINK_ID_WITH_PATH, folder_path),
    )


def process_facts(facts: Iterable[Fact] | None) -> list[str]:
    """Keep non-spoiler facts with text, stripped of HTML markup."""

    kept = [
        fact.value
        for fact in facts or []
        if not fact.spoiler and fact.value and fact.value.strip()
    ]
    return [strip_html_tags(value) for value in kept[:MAX_FACTS_COUNT]]


def _names(items: Iterable[Any] | None) -> list[str]:
    return [
        item.name
        for item in items or []
        if isinstance(item.name, str) and item.name.strip()
    ]


def _number(value: Any) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return value or 0


def _int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


class RecordTransformer:
    """Turns :class:`FullRecord` payloads into :class:`MovieShow` records."""

    def __init__(self, folder_paths: FolderPaths | None = None) -> None:
        self._paths = folder_paths or FolderPaths()

    @property
    def folder_paths(self) -> FolderPaths:
        return self._paths

    def transform(self, payload: FullRecord | Mapping[str, Any]) -> MovieShow:
        """Build the flat record; missing or malformed data yields empty values."""

        record = FullRecord.from_payload(payload)
        if record.id is None:
            logger.debug("Transforming a record without an id")

        seasons = calculate_seasons(record.seasons_info)
        groups = group_people(record.persons)
        directors = render_people(groups["director"], self._paths.directors)
        actors = render_people(groups["actor"], self._paths.actors)
        writers = render_people(groups["writer"], self._paths.writers)
        producers = render_people(groups["producer"], self._paths.producers)

        genres = [capitalize_first_letter(name) for name in _names(record.genres)]
        countries = _names(record.countries)
        networks = _names(record.networks.items if record.networks else [])
        companies = _names(record.production_companies)
        related = _names(record.sequels_and_prequels)

        poster = (record.poster.url if record.poster else None) or ""
        backdrop = (record.backdrop.url if record.backdrop else None) or ""
        logo = (record.logo.url if record.logo else None) or ""

        rating = record.rating
        votes = record.votes
        external = record.external_id
        budget = record.budget
        fees = record.fees
        premiere = record.premiere
        distributors = record.distributors
        first_release = record.release_years[0] if record.release_years else None
        distributor_release = distributors.distributor_release if distributors else None

        def short(value: str | None) -> list[str]:
            return format_items([value or ""], FormatMode.SHORT_VALUE)

        def long(value: str | None) -> list[str]:
            return format_items([value or ""], FormatMode.LONG_TEXT)

        def money(value: Any) -> tuple[int | float, list[str]]:
            if value is None:
                return 0, []
            return _number(value.value), short(value.currency)

        budget_value, budget_currency = money(budget)
        world_value, world_currency = money(fees.world if fees else None)
        russia_value, russia_currency = money(fees.russia if fees else None)
        usa_value, usa_currency = money(fees.usa if fees else None)

        kinopoisk_url = (
            [KINOPOISK_FILM_URL.format(id=record.id)] if record.id is not None else []
        )

        return MovieShow(
            id=_int(record.id),
            name=short(record.name),
            alternative_name=short(record.alternative_name),
            en_name=short(record.en_name),
            year=_int(record.year),
            description=long(record.description),
            short_description=long(record.short_description),
            slogan=long(record.slogan),
            poster_url=format_items([poster], FormatMode.URL),
            cover_url=format_items([backdrop], FormatMode.URL),
            logo_url=format_items([logo], FormatMode.URL),
            poster_markdown=create_image_link(poster),
            cover_markdown=create_image_link(backdrop),
            logo_markdown=create_image_link(logo),
            poster_path=[],
            cover_path=[],
            logo_path=[],
            genres=format_items(genres, FormatMode.SHORT_VALUE),
            genres_links=format_items(genres, FormatMode.LINK),
            countries=format_items(countries, FormatMode.SHORT_VALUE),
            countries_links=format_items(countries, FormatMode.LINK),
            type=short(translate_type(record.type or "")),
            sub_type=short(record.sub_type),
            director=directors.plain,
            directors_links=directors.links,
            directors_links_with_path=directors.links_with_path,
            directors_ids_with_path=directors.ids_with_path,
            actors=actors.plain,
            actors_links=actors.links,
            actors_links_with_path=actors.links_with_path,
            actors_ids_with_path=actors.ids_with_path,
            writers=writers.plain,
            writers_links=writers.links,
            writers_links_with_path=writers.links_with_path,
            writers_ids_with_path=writers.ids_with_path,
            producers=producers.plain,
            producers_links=producers.links,
            producers_links_with_path=producers.links_with_path,
            producers_ids_with_path=producers.ids_with_path,
            movie_length=_number(record.movie_length),
            is_series=bool(record.is_series),
            series_length=_number(record.series_length),
            total_series_length=_number(record.total_series_length),
            is_complete=(record.status or "") == "completed",
            seasons_count=seasons.count,
            series_in_season_count=seasons.average_episodes_per_season,
            rating_kp=round_half_up(rating.kp) if rating else 0,
            rating_imdb=round_half_up(rating.imdb) if rating else 0,
            rating_film_critics=_number(rating.film_critics) if rating else 0,
            rating_russian_film_critics=(
                _number(rating.russian_film_critics) if rating else 0
            ),
            votes_kp=_number(votes.kp) if votes else 0,
            votes_imdb=_number(votes.imdb) if votes else 0,
            votes_film_critics=_number(votes.film_critics) if votes else 0,
            votes_russian_film_critics=(
                _number(votes.russian_film_critics) if votes else 0
            ),
            kinopoisk_url=format_items(kinopoisk_url, FormatMode.URL),
            imdb_id=short(external.imdb if external else None),
            tmdb_id=_int(external.tmdb) if external else 0,
            kp_hd_id=short(external.kp_hd if external else None),
            age_rating=_number(record.age_rating),
            rating_mpaa=short(record.rating_mpaa),
            budget_value=budget_value,
            budget_currency=budget_currency,
            fees_world_value=world_value,
            fees_world_currency=world_currency,
            fees_russia_value=russia_value,
            fees_russia_currency=russia_currency,
            fees_usa_value=usa_value,
            fees_usa_currency=usa_currency,
            premiere_world=short(format_date(premiere.world if premiere else None)),
            premiere_russia=short(format_date(premiere.russia if premiere else None)),
            premiere_digital=short(format_date(premiere.digital if premiere else None)),
            premiere_cinema=short(format_date(premiere.cinema if premiere else None)),
            release_years_start=_int(first_release.start) if first_release else 0,
            release_years_end=_int(first_release.end) if first_release else 0,
            top10=_int(record.top10),
            top250=_int(record.top250),
            facts=format_items(
                process_facts(record.facts), FormatMode.LONG_TEXT, max_items=MAX_FACTS_COUNT
            ),
            all_names_string=format_items(_names(record.names), FormatMode.SHORT_VALUE),
            networks=format_items(networks, FormatMode.SHORT_VALUE),
            networks_links=format_items(networks, FormatMode.LINK),
            production_companies=format_items(companies, FormatMode.SHORT_VALUE),
            production_companies_links=format_items(companies, FormatMode.LINK),
            distributor=short(distributors.distributor if distributors else None),
            distributor_release=short(
                format_date(distributor_release) or distributor_release
            ),
            sequels_and_prequels=format_items(related, FormatMode.SHORT_VALUE),
            sequels_and_prequels_links=format_items(related, FormatMode.LINK),
        )
