"""Uniform JSON response envelope and the application's error types."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

_FALLBACK_REASON = "Internal Server Error"


def _reason(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return _FALLBACK_REASON


@dataclass
class JsonResponse:
    """Response body: status code, reason phrase, and data or error detail."""

    code: int
    message: str
    data: Any = None
    detail: Any = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        if self.detail is not None:
            body["detail"] = self.detail
        return body


def success(data: Any) -> JsonResponse:
    """A 200 response carrying ``data``."""
    return JsonResponse(code=200, message="OK", data=data)


def error(code: int, detail: Any = None) -> JsonResponse:
    """An error response whose message is the reason phrase of ``code``."""
    return JsonResponse(code=code, message=_reason(code), detail=detail)


class AppError(Exception):
    """Base error; unspecific failures hide their message from clients."""

    status_code: int = 500
    public_detail: str | None = _FALLBACK_REASON

    def to_response(self) -> JsonResponse:
        detail = self.public_detail if self.public_detail is not None else str(self)
        return error(self.status_code, detail)


class NotFound(AppError):
    status_code = 404
    public_detail = "Not Found"


class InternalError(AppError):
    status_code = 500
    public_detail = "InternalError"


class ValidationError(AppError):
    status_code = 400
    public_detail = "ValidationError"


class QueryError(AppError):
    """The query string could not be parsed."""

    status_code = 400
    public_detail = None


class PathError(AppError):
    """A path parameter could not be parsed."""

    status_code = 422
    public_detail = None


class UpstreamError(AppError):
    """An HTTP, database or cache call failed."""

    status_code = 500
    public_detail = None