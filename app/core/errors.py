"""Application exceptions and exception handler registration.

Every failure leaving the API is classified into an :class:`ErrorKind` here and
rendered as the shared error envelope.
"""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import responses
from app.core.error_kinds import ErrorKind
from app.core.error_kinds import kind_for_status
from app.core.request_context import request_id_or_generate
from app.core.request_context import request_path
from app.schemas.error import FieldError

logger = logging.getLogger(__name__)

VALIDATION_FAILED_CODE = "VALIDATION.FAILED"
INTERNAL_ERROR_CODE = "SERVER.INTERNAL_ERROR"


class APIError(Exception):
    """Base application exception for explicit API error responses."""

    def __init__(
        self,
        *,
        kind: ErrorKind,
        code: str,
        detail: str,
        field_errors: Sequence[FieldError] | None = None,
        retry_after: int | None = None,
        allowed_methods: Sequence[str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.kind = kind
        self.code = code
        self.detail = detail
        self.field_errors = list(field_errors) if field_errors else None
        self.retry_after = retry_after
        self.allowed_methods = list(allowed_methods) if allowed_methods else None


class NotFoundError(APIError):
    """Convenience exception for missing resources."""

    def __init__(self, *, detail: str = "Resource not found", code: str = "RESOURCE.NOT_FOUND") -> None:
        super().__init__(kind=ErrorKind.RESOURCE_NOT_FOUND, code=code, detail=detail)


class ValidationFailedError(APIError):
    def __init__(
        self,
        *,
        detail: str = "Request validation failed",
        code: str = VALIDATION_FAILED_CODE,
        field_errors: Sequence[FieldError] | None = None,
    ) -> None:
        super().__init__(kind=ErrorKind.VALIDATION_ERROR, code=code, detail=detail, field_errors=field_errors)


class ConflictError(APIError):
    def __init__(self, *, detail: str = "Resource already exists", code: str = "RESOURCE.CONFLICT") -> None:
        super().__init__(kind=ErrorKind.RESOURCE_CONFLICT, code=code, detail=detail)


class AuthenticationError(APIError):
    def __init__(self, *, detail: str = "Authentication required", code: str = "AUTH.UNAUTHENTICATED") -> None:
        super().__init__(kind=ErrorKind.AUTHENTICATION_ERROR, code=code, detail=detail)


class AccessDeniedError(APIError):
    def __init__(self, *, detail: str = "Access denied", code: str = "AUTH.ACCESS_DENIED") -> None:
        super().__init__(kind=ErrorKind.AUTHORIZATION_ERROR, code=code, detail=detail)


class BusinessRuleError(APIError):
    def __init__(self, *, detail: str, code: str = "BUSINESS.RULE_VIOLATION") -> None:
        super().__init__(kind=ErrorKind.BUSINESS_LOGIC_ERROR, code=code, detail=detail)


class RateLimitExceededError(APIError):
    def __init__(
        self,
        *,
        retry_after: int,
        detail: str = "Too many requests",
        code: str = "RATE_LIMIT.EXCEEDED",
    ) -> None:
        super().__init__(kind=ErrorKind.RATE_LIMIT_ERROR, code=code, detail=detail, retry_after=retry_after)


class ServiceUnavailableError(APIError):
    def __init__(
        self,
        *,
        detail: str = "Service temporarily unavailable",
        code: str = "SERVER.UNAVAILABLE",
        retry_after: int | None = None,
    ) -> None:
        super().__init__(kind=ErrorKind.SERVICE_UNAVAILABLE, code=code, detail=detail, retry_after=retry_after)


def _build_error_response(
    request: Request,
    *,
    kind: ErrorKind,
    code: str,
    detail: str,
    field_errors: Sequence[FieldError] | None = None,
    trace_id: str | None = None,
    retry_after: int | None = None,
    allowed_methods: Sequence[str] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    if trace_id is None and kind.status_code >= 500:
        trace_id = request_id_or_generate(request)

    envelope = responses.error(
        kind,
        code,
        detail,
        request_path(request),
        field_errors=field_errors,
        trace_id=trace_id,
        retry_after_seconds=retry_after,
        allowed_methods=allowed_methods,
    )

    derived: dict[str, str] = {}
    if retry_after is not None:
        derived["Retry-After"] = str(retry_after)
    if allowed_methods:
        derived["Allow"] = ", ".join(allowed_methods)
    overridden = {name.lower() for name in derived}
    response_headers = {name: value for name, value in (headers or {}).items() if name.lower() not in overridden}
    response_headers.update(derived)
    return responses.to_json_response(envelope, headers=response_headers)


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


def _validation_field_errors(exc: RequestValidationError) -> list[FieldError]:
    field_errors: list[FieldError] = []
    for issue in exc.errors():
        issue_type = issue.get("type")
        rejected = None if issue_type == "missing" else issue.get("input")
        if not isinstance(rejected, (str, int, float, bool)):
            rejected = None
        field_errors.append(
            FieldError(
                field=_format_location(issue.get("loc", ())),
                message=str(issue.get("msg", "Invalid value")),
                rejected_value=rejected,
                code=str(issue_type) if issue_type else None,
            )
        )
    return field_errors


def _parse_retry_after(value: str | None) -> int | None:
    if value is None or not value.strip().isdigit():
        return None
    return int(value.strip())


def _parse_allowed_methods(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [method.strip().upper() for method in value.split(",") if method.strip()]


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to the error envelope."""

    return _build_error_response(
        request,
        kind=ErrorKind.VALIDATION_ERROR,
        code=VALIDATION_FAILED_CODE,
        detail="Request validation failed",
        field_errors=_validation_field_errors(exc),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Classify framework HTTP exceptions into the error taxonomy."""

    kind = kind_for_status(exc.status_code)
    headers = exc.headers or {}
    detail = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else kind.title
    return _build_error_response(
        request,
        kind=kind,
        code=f"HTTP.{exc.status_code}",
        detail=detail,
        retry_after=_parse_retry_after(headers.get("Retry-After")) if kind is ErrorKind.RATE_LIMIT_ERROR else None,
        allowed_methods=(
            _parse_allowed_methods(headers.get("Allow")) if kind is ErrorKind.METHOD_NOT_ALLOWED else None
        ),
        headers=headers,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Return explicit domain errors in the shared envelope."""

    return _build_error_response(
        request,
        kind=exc.kind,
        code=exc.code,
        detail=exc.detail,
        field_errors=exc.field_errors,
        retry_after=exc.retry_after,
        allowed_methods=exc.allowed_methods,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    trace_id = request_id_or_generate(request)
    logger.error(
        "Unhandled error on %s %s trace_id=%s error=%r",
        request.method,
        request_path(request),
        trace_id,
        exc,
    )
    return _build_error_response(
        request,
        kind=ErrorKind.INTERNAL_SERVER_ERROR,
        code=INTERNAL_ERROR_CODE,
        detail="An unexpected error occurred",
        trace_id=trace_id,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
