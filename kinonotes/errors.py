"""Error taxonomy and translation of transport failures into user messages."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import httpx

from .messages import translate

logger = logging.getLogger(__name__)

BODY_SNIPPET_LENGTH = 300


class ErrorCategory(str, Enum):
    """Stable categories for failures surfaced to callers."""

    INVALID_INPUT = "invalid_input"
    EMPTY_RESULT = "empty_result"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class KinopoiskError(Exception):
    """Base error carrying a short user message and a technical detail."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        user_message: str,
        *,
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.detail = detail
        self.status_code = status_code


class InvalidInputError(KinopoiskError):
    category = ErrorCategory.INVALID_INPUT


class EmptyResultError(KinopoiskError):
    category = ErrorCategory.EMPTY_RESULT


class UnauthorizedError(KinopoiskError):
    category = ErrorCategory.UNAUTHORIZED


class RateLimitedError(KinopoiskError):
    category = ErrorCategory.RATE_LIMITED


class NotFoundError(KinopoiskError):
    category = ErrorCategory.NOT_FOUND


class ServerError(KinopoiskError):
    category = ErrorCategory.SERVER_ERROR


class NetworkError(KinopoiskError):
    category = ErrorCategory.NETWORK_ERROR


class UnknownApiError(KinopoiskError):
    category = ErrorCategory.UNKNOWN


_ERRORS_BY_CATEGORY: dict[ErrorCategory, tuple[type[KinopoiskError], str]] = {
    ErrorCategory.UNAUTHORIZED: (UnauthorizedError, "errors.unauthorized"),
    ErrorCategory.RATE_LIMITED: (RateLimitedError, "errors.rate_limited"),
    ErrorCategory.NOT_FOUND: (NotFoundError, "errors.not_found"),
    ErrorCategory.SERVER_ERROR: (ServerError, "errors.server_error"),
    ErrorCategory.NETWORK_ERROR: (NetworkError, "errors.network_error"),
    ErrorCategory.UNKNOWN: (UnknownApiError, "errors.unknown"),
}


def category_for_status(status_code: int | None) -> ErrorCategory:
    """Map an HTTP status code onto an error category."""

    if status_code is None:
        return ErrorCategory.UNKNOWN
    if status_code in (401, 403):
        return ErrorCategory.UNAUTHORIZED
    if status_code == 429:
        return ErrorCategory.RATE_LIMITED
    if status_code == 404:
        return ErrorCategory.NOT_FOUND
    if 500 <= status_code < 600:
        return ErrorCategory.SERVER_ERROR
    return ErrorCategory.UNKNOWN


def _describe_response(response: httpx.Response) -> str:
    message: Any = None
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
    if isinstance(message, list):
        message = "; ".join(str(part) for part in message)
    if message:
        return f"HTTP {response.status_code}: {message}"
    body = response.text[:BODY_SNIPPET_LENGTH]
    return f"HTTP {response.status_code}: {body}" if body else f"HTTP {response.status_code}"


def _request_url(exc: BaseException) -> str:
    if isinstance(exc, httpx.HTTPError):
        try:
            return str(exc.request.url)
        except RuntimeError:
            pass
    return "<unknown url>"


def translate_error(
    exc: BaseException, *, language: str | None = None
) -> KinopoiskError:
    """Convert a low-level failure into a categorised :class:`KinopoiskError`.

    The technical detail is logged for operators; only the short localized
    message is meant for the end user.
    """

    if isinstance(exc, KinopoiskError):
        return exc

    status_code: int | None = None
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        category = category_for_status(status_code)
        detail = _describe_response(exc.response)
    elif isinstance(exc, httpx.TransportError):
        # No response was received: timeouts, refused connections, DNS failures.
        category = ErrorCategory.NETWORK_ERROR
        detail = f"{exc.__class__.__name__}: {exc}"
    else:
        category = ErrorCategory.UNKNOWN
        detail = f"{exc.__class__.__name__}: {exc}"

    url = _request_url(exc)
    logger.warning(
        "Kinopoisk request failed (%s) for %s: %s", category.value, url, detail
    )

    error_cls, message_key = _ERRORS_BY_CATEGORY[category]
    error = error_cls(
        translate(message_key, language), detail=detail, status_code=status_code
    )
    error.__cause__ = exc
    return error
