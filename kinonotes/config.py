"""Application configuration models."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "ru")


@dataclass(frozen=True, slots=True)
class FolderPaths:
    """Vault folders used when rendering person links with a path prefix."""

    actors: str = ""
    directors: str = ""
    writers: str = ""
    producers: str = ""


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Kinonotes", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    kinopoisk_api_url: HttpUrl = Field(
        default="https://api.kinopoisk.dev/v1.4", alias="KINOPOISK_API_URL"
    )
    kinopoisk_api_token: str | None = Field(
        default=None, alias="KINOPOISK_API_TOKEN"
    )
    request_timeout_seconds: float = Field(
        default=20.0, alias="REQUEST_TIMEOUT", gt=0, le=300
    )

    actors_path: str = Field(default="", alias="ACTORS_PATH")
    directors_path: str = Field(default="", alias="DIRECTORS_PATH")
    writers_path: str = Field(default="", alias="WRITERS_PATH")
    producers_path: str = Field(default="", alias="PRODUCERS_PATH")

    language: str = Field(default="en", alias="UI_LANGUAGE")

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator(
        "actors_path", "directors_path", "writers_path", "producers_path", mode="before"
    )
    @classmethod
    def _normalise_folder_path(cls, value: object) -> str:
        """Trim folder paths and drop trailing separators."""

        if value is None:
            return ""
        return str(value).strip().rstrip("/")

    @field_validator("kinopoisk_api_token", mode="before")
    @classmethod
    def _normalise_token(cls, value: object) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None

    @field_validator("language", mode="before")
    @classmethod
    def _parse_language(cls, value: object) -> str:
        """Accept language codes case-insensitively, defaulting to English."""

        if value is None:
            return "en"
        code = str(value).strip().lower()
        if not code:
            return "en"
        if code not in SUPPORTED_LANGUAGES:
            raise ValueError("Unsupported language configured")
        return code

    @property
    def folder_paths(self) -> FolderPaths:
        """Return the per-role folder paths used for person links."""

        return FolderPaths(
            actors=self.actors_path,
            directors=self.directors_path,
            writers=self.writers_path,
            producers=self.producers_path,
        )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
