"""Closed error taxonomy shared by every error response."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Error categories; each fixes the HTTP status and title of a response."""

    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    BUSINESS_LOGIC_ERROR = "BUSINESS_LOGIC_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"

    @property
    def title(self) -> str:
        return _KIND_TABLE[self][0]

    @property
    def status_code(self) -> int:
        return _KIND_TABLE[self][1]


_KIND_TABLE: dict[ErrorKind, tuple[str, int]] = {
    ErrorKind.BAD_REQUEST: ("Bad Request", 400),
    ErrorKind.VALIDATION_ERROR: ("Validation Failed", 400),
    ErrorKind.AUTHENTICATION_ERROR: ("Authentication Failed", 401),
    ErrorKind.AUTHORIZATION_ERROR: ("Access Denied", 403),
    ErrorKind.RESOURCE_NOT_FOUND: ("Resource Not Found", 404),
    ErrorKind.METHOD_NOT_ALLOWED: ("Method Not Allowed", 405),
    ErrorKind.RESOURCE_CONFLICT: ("Resource Already Exists", 409),
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: ("Unsupported Media Type", 415),
    ErrorKind.BUSINESS_LOGIC_ERROR: ("Business Rule Violation", 422),
    ErrorKind.RATE_LIMIT_ERROR: ("Rate Limit Exceeded", 429),
    ErrorKind.INTERNAL_SERVER_ERROR: ("Internal Server Error", 500),
    ErrorKind.SERVICE_UNAVAILABLE: ("Service Unavailable", 503),
    ErrorKind.GATEWAY_TIMEOUT: ("Gateway Timeout", 504),
}

_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.AUTHENTICATION_ERROR,
    403: ErrorKind.AUTHORIZATION_ERROR,
    404: ErrorKind.RESOURCE_NOT_FOUND,
    405: ErrorKind.METHOD_NOT_ALLOWED,
    409: ErrorKind.RESOURCE_CONFLICT,
    415: ErrorKind.UNSUPPORTED_MEDIA_TYPE,
    422: ErrorKind.BUSINESS_LOGIC_ERROR,
    429: ErrorKind.RATE_LIMIT_ERROR,
    500: ErrorKind.INTERNAL_SERVER_ERROR,
    503: ErrorKind.SERVICE_UNAVAILABLE,
    504: ErrorKind.GATEWAY_TIMEOUT,
}


def lookup(kind: ErrorKind) -> tuple[str, int]:
    """Return the ``(title, status)`` pair for an error kind."""
    return _KIND_TABLE[kind]


def kind_for_status(status_code: int) -> ErrorKind:
    """Classify a raw HTTP status raised by the framework into the taxonomy."""
    kind = _STATUS_KINDS.get(status_code)
    if kind is not None:
        return kind
    if status_code >= 500:
        return ErrorKind.INTERNAL_SERVER_ERROR
    return ErrorKind.BAD_REQUEST
