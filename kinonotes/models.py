"""Pydantic models for kinopoisk.dev payloads and the flat template record."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)
from pydantic.alias_generators import to_camel

RoleKey = Literal["director", "actor", "writer", "producer"]


def _none_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


def _mapping_items(value: Any) -> list[Any]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


Lenient = WrapValidator(_none_on_error)
OptionalStr = Annotated[str | None, Lenient]
OptionalInt = Annotated[int | None, Lenient]
OptionalNumber = Annotated[int | float | None, Lenient]
OptionalBool = Annotated[bool | None, Lenient]
ModelList = BeforeValidator(_mapping_items)


class ApiModel(BaseModel):
    """Base for upstream payload fragments; unknown keys are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class ImageUrl(ApiModel):
    url: OptionalStr = None
    preview_url: OptionalStr = None


class NamedItem(ApiModel):
    """Genre, country, network or similar ``{"name": ...}`` entry."""

    name: OptionalStr = None


class Person(ApiModel):
    id: OptionalInt = None
    name: OptionalStr = None
    en_name: OptionalStr = None
    description: OptionalStr = None
    profession: OptionalStr = None
    en_profession: OptionalStr = None
    photo: OptionalStr = None


class SeasonInfo(ApiModel):
    number: OptionalInt = None
    episodes_count: OptionalNumber = None


class Ratings(ApiModel):
    kp: OptionalNumber = None
    imdb: OptionalNumber = None
    film_critics: OptionalNumber = None
    russian_film_critics: OptionalNumber = None
    await_: OptionalNumber = Field(default=None, alias="await")


class Votes(Ratings):
    pass


class ExternalIds(ApiModel):
    imdb: OptionalStr = None
    tmdb: OptionalInt = None
    kp_hd: OptionalStr = Field(default=None, alias="kpHD")


class Money(ApiModel):
    value: OptionalNumber = None
    currency: OptionalStr = None


class Fees(ApiModel):
    world: Annotated[Money | None, Lenient] = None
    russia: Annotated[Money | None, Lenient] = None
    usa: Annotated[Money | None, Lenient] = None


class Premiere(ApiModel):
    world: OptionalStr = None
    russia: OptionalStr = None
    digital: OptionalStr = None
    cinema: OptionalStr = None


class Fact(ApiModel):
    value: OptionalStr = None
    type: OptionalStr = None
    spoiler: OptionalBool = None


class ReleaseYears(ApiModel):
    start: OptionalInt = None
    end: OptionalInt = None


class AlternativeName(ApiModel):
    name: OptionalStr = None
    language: OptionalStr = None
    type: OptionalStr = None


class Networks(ApiModel):
    items: Annotated[list[NamedItem], ModelList] = Field(default_factory=list)


class RelatedMovie(ApiModel):
    id: OptionalInt = None
    name: OptionalStr = None
    alternative_name: OptionalStr = None
    en_name: OptionalStr = None
    type: OptionalStr = None
    year: OptionalInt = None


class ProductionCompany(ApiModel):
    name: OptionalStr = None
    url: OptionalStr = None
    preview_url: OptionalStr = None


class Distributors(ApiModel):
    distributor: OptionalStr = None
    distributor_release: OptionalStr = None


class FullRecord(ApiModel):
    """Complete movie/series information as returned by ``/movie/{id}``.

    Every field tolerates a malformed value by falling back to its default,
    so building a record from an arbitrary mapping never fails.
    """

    id: OptionalInt = None
    name: OptionalStr = None
    alternative_name: OptionalStr = None
    en_name: OptionalStr = None
    type: OptionalStr = None
    sub_type: OptionalStr = None
    type_number: OptionalInt = None
    year: OptionalInt = None
    description: OptionalStr = None
    short_description: OptionalStr = None
    slogan: OptionalStr = None
    status: OptionalStr = None

    poster: Annotated[ImageUrl | None, Lenient] = None
    backdrop: Annotated[ImageUrl | None, Lenient] = None
    logo: Annotated[ImageUrl | None, Lenient] = None

    genres: Annotated[list[NamedItem], ModelList] = Field(default_factory=list)
    countries: Annotated[list[NamedItem], ModelList] = Field(default_factory=list)
    persons: Annotated[list[Person], ModelList] = Field(default_factory=list)
    seasons_info: Annotated[list[SeasonInfo], ModelList] = Field(default_factory=list)
    facts: Annotated[list[Fact], ModelList] = Field(default_factory=list)
    names: Annotated[list[AlternativeName], ModelList] = Field(default_factory=list)
    release_years: Annotated[list[ReleaseYears], ModelList] = Field(
        default_factory=list
    )
    sequels_and_prequels: Annotated[list[RelatedMovie], ModelList] = Field(
        default_factory=list
    )
    production_companies: Annotated[list[ProductionCompany], ModelList] = Field(
        default_factory=list
    )

    networks: Annotated[Networks | None, Lenient] = None
    rating: Annotated[Ratings | None, Lenient] = None
    votes: Annotated[Votes | None, Lenient] = None
    external_id: Annotated[ExternalIds | None, Lenient] = None
    budget: Annotated[Money | None, Lenient] = None
    fees: Annotated[Fees | None, Lenient] = None
    premiere: Annotated[Premiere | None, Lenient] = None
    distributors: Annotated[Distributors | None, Lenient] = None

    movie_length: OptionalNumber = None
    is_series: OptionalBool = None
    series_length: OptionalNumber = None
    total_series_length: OptionalNumber = None
    age_rating: OptionalNumber = None
    rating_mpaa: OptionalStr = None
    top10: OptionalInt = None
    top250: OptionalInt = None

    @classmethod
    def from_payload(cls, payload: Any) -> "FullRecord":
        """Build a record from a decoded JSON body; non-objects give an empty record."""

        if isinstance(payload, FullRecord):
            return payload
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(dict(payload))


TextList = list[str]


class MovieShow(BaseModel):
    """Flat, template-ready view of a movie or series.

    Text fields are lists so that template substitution can join single and
    multi-valued data the same way. Serialise with :meth:`to_template_fields`
    to obtain the camelCase placeholder names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = 0
    name: TextList = Field(default_factory=list)
    alternative_name: TextList = Field(default_factory=list)
    en_name: TextList = Field(default_factory=list)
    year: int = 0
    description: TextList = Field(default_factory=list)
    short_description: TextList = Field(default_factory=list)
    slogan: TextList = Field(default_factory=list)

    poster_url: TextList = Field(default_factory=list)
    cover_url: TextList = Field(default_factory=list)
    logo_url: TextList = Field(default_factory=list)
    poster_markdown: TextList = Field(default_factory=list)
    cover_markdown: TextList = Field(default_factory=list)
    logo_markdown: TextList = Field(default_factory=list)
    # Filled in by the image downloader once local copies exist.
    poster_path: TextList = Field(default_factory=list)
    cover_path: TextList = Field(default_factory=list)
    logo_path: TextList = Field(default_factory=list)

    genres: TextList = Field(default_factory=list)
    genres_links: TextList = Field(default_factory=list)
    countries: TextList = Field(default_factory=list)
    countries_links: TextList = Field(default_factory=list)
    type: TextList = Field(default_factory=list)
    sub_type: TextList = Field(default_factory=list)

    director: TextList = Field(default_factory=list)
    directors_links: TextList = Field(default_factory=list)
    directors_links_with_path: TextList = Field(default_factory=list)
    directors_ids_with_path: TextList = Field(default_factory=list)
    actors: TextList = Field(default_factory=list)
    actors_links: TextList = Field(default_factory=list)
    actors_links_with_path: TextList = Field(default_factory=list)
    actors_ids_with_path: TextList = Field(default_factory=list)
    writers: TextList = Field(default_factory=list)
    writers_links: TextList = Field(default_factory=list)
    writers_links_with_path: TextList = Field(default_factory=list)
    writers_ids_with_path: TextList = Field(default_factory=list)
    producers: TextList = Field(default_factory=list)
    producers_links: TextList = Field(default_factory=list)
    producers_links_with_path: TextList = Field(default_factory=list)
    producers_ids_with_path: TextList = Field(default_factory=list)

    movie_length: int | float = 0
    is_series: bool = False
    series_length: int | float = 0
    total_series_length: int | float = 0
    is_complete: bool = False
    seasons_count: int = 0
    series_in_season_count: int = 0

    rating_kp: int = 0
    rating_imdb: int = 0
    rating_film_critics: int | float = 0
    rating_russian_film_critics: int | float = 0
    votes_kp: int | float = 0
    votes_imdb: int | float = 0
    votes_film_critics: int | float = 0
    votes_russian_film_critics: int | float = 0

    kinopoisk_url: TextList = Field(default_factory=list)
    imdb_id: TextList = Field(default_factory=list)
    tmdb_id: int = 0
    kp_hd_id: TextList = Field(default_factory=list, alias="kpHDId")

    age_rating: int | float = 0
    rating_mpaa: TextList = Field(default_factory=list)

    budget_value: int | float = 0
    budget_currency: TextList = Field(default_factory=list)
    fees_world_value: int | float = 0
    fees_world_currency: TextList = Field(default_factory=list)
    fees_russia_value: int | float = 0
    fees_russia_currency: TextList = Field(default_factory=list)
    fees_usa_value: int | float = 0
    fees_usa_currency: TextList = Field(default_factory=list)

    premiere_world: TextList = Field(default_factory=list)
    premiere_russia: TextList = Field(default_factory=list)
    premiere_digital: TextList = Field(default_factory=list)
    premiere_cinema: TextList = Field(default_factory=list)

    release_years_start: int = 0
    release_years_end: int = 0
    top10: int = 0
    top250: int = 0

    facts: TextList = Field(default_factory=list)
    all_names_string: TextList = Field(default_factory=list)

    networks: TextList = Field(default_factory=list)
    networks_links: TextList = Field(default_factory=list)
    production_companies: TextList = Field(default_factory=list)
    production_companies_links: TextList = Field(default_factory=list)
    distributor: TextList = Field(default_factory=list)
    distributor_release: TextList = Field(default_factory=list)
    sequels_and_prequels: TextList = Field(default_factory=list)
    sequels_and_prequels_links: TextList = Field(default_factory=list)

    def to_template_fields(self) -> dict[str, Any]:
        """Return the record keyed by template placeholder name."""

        return self.model_dump(by_alias=True)
