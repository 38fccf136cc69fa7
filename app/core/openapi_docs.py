"""Enrich generated operation documentation with endpoint contracts.

The enricher only talks to the :class:`OperationDocument` protocol. A
dictionary-backed implementation for OpenAPI operation objects is provided by
:class:`OpenAPIOperation`.
"""

from __future__ import annotations

from typing import Any
from typing import Protocol

from app.core.contracts import ConfigurationRequirement
from app.core.contracts import EndpointContract
from app.core.contracts import PermissionRequirement
from app.core.contracts import RateLimitDescriptor

DEFAULT_SUCCESS_DESCRIPTION = "Successful operation"

RATE_LIMIT_HEADERS: tuple[tuple[str, str], ...] = (
    ("x-ratelimit-limit", "The number of allowed requests in the current period"),
    ("x-ratelimit-remaining", "The number of remaining requests in the current period"),
    ("x-ratelimit-reset", "The timestamp of the start of the next period"),
)

PUBLIC_EXTENSION = "x-public"


class ResponseDocument(Protocol):
    def add_header(self, name: str, schema_type: str, description: str) -> None: ...


class OperationDocument(Protocol):
    """Mutable documentation of a single API operation."""

    description: str | None
    security: list[dict[str, list[str]]] | None

    def response(self, status_code: str, default_description: str) -> ResponseDocument: ...

    def add_extension(self, name: str, value: Any) -> None: ...


class OpenAPIResponse:
    def __init__(self, raw: dict[str, Any]) -> None:
        self.raw = raw

    def add_header(self, name: str, schema_type: str, description: str) -> None:
        headers = self.raw.setdefault("headers", {})
        headers[name] = {"description": description, "schema": {"type": schema_type}}


class OpenAPIOperation:
    """:class:`OperationDocument` over a plain OpenAPI operation mapping."""

    def __init__(self, raw: dict[str, Any]) -> None:
        self.raw = raw

    @property
    def description(self) -> str | None:
        return self.raw.get("description")

    @description.setter
    def description(self, value: str | None) -> None:
        if value is None:
            self.raw.pop("description", None)
        else:
            self.raw["description"] = value

    @property
    def security(self) -> list[dict[str, list[str]]] | None:
        return self.raw.get("security")

    @security.setter
    def security(self, value: list[dict[str, list[str]]] | None) -> None:
        if value is None:
            self.raw.pop("security", None)
        else:
            self.raw["security"] = value

    def response(self, status_code: str, default_description: str) -> OpenAPIResponse:
        responses = self.raw.setdefault("responses", {})
        if status_code not in responses:
            responses[status_code] = {"description": default_description}
        return OpenAPIResponse(responses[status_code])

    def add_extension(self, name: str, value: Any) -> None:
        self.raw[name] = value


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}" + ("" if value == 1 else "s")


def human_duration(seconds: int) -> str:
    """Render a window length, e.g. ``5400`` -> ``"1 hour 30 minutes"``."""
    if seconds < 60:
        return _plural(seconds, "second")
    if seconds < 3600:
        return _plural(seconds // 60, "minute")
    hours, remainder = divmod(seconds, 3600)
    text = _plural(hours, "hour")
    minutes = remainder // 60
    if minutes > 0:
        text += " " + _plural(minutes, "minute")
    return text


def normalize_description(description: str | None) -> str | None:
    """Terminate a description with exactly one period; blank descriptions become ``None``."""
    if description is None:
        return None
    text = description.rstrip()
    if not text:
        return None
    if not text.endswith("."):
        return text + "."
    return text


def _append_paragraph(description: str | None, paragraph: str) -> str:
    base = (description or "").rstrip()
    if not base:
        return paragraph
    return f"{base}\n\n{paragraph}"


def rate_limit_sentence(rate_limit: RateLimitDescriptor) -> str:
    sentence = (
        f"This operation can be called up to {rate_limit.max_requests} times every "
        f"{human_duration(rate_limit.window_seconds)} for regular users"
    )
    if rate_limit.has_api_key_limit:
        sentence += (
            f" and up to {rate_limit.api_key_max_requests} times every "
            f"{human_duration(rate_limit.api_key_window_seconds)} with API Keys"
        )
    return sentence + "."


def _add_rate_limit(operation: OperationDocument, rate_limit: RateLimitDescriptor) -> None:
    ok_response = operation.response("200", DEFAULT_SUCCESS_DESCRIPTION)
    for name, description in RATE_LIMIT_HEADERS:
        ok_response.add_header(name, "integer", description)
    operation.description = _append_paragraph(operation.description, rate_limit_sentence(rate_limit))


def _add_permissions(operation: OperationDocument, requirement: PermissionRequirement) -> None:
    if not requirement.permissions:
        return
    operation.description = _append_paragraph(
        operation.description,
        "Required permissions: " + ", ".join(requirement.permissions),
    )


def _add_configuration(operation: OperationDocument, requirement: ConfigurationRequirement) -> None:
    operation.description = _append_paragraph(
        operation.description,
        "Required configuration: This operation can only be called if the "
        f"configuration for `{requirement.path}` is `true`.",
    )


def enrich(operation: OperationDocument, contract: EndpointContract) -> OperationDocument:
    """Apply an endpoint contract to its operation documentation.

    Not idempotent: each call appends the contract paragraphs again, so run it
    once per operation per documentation build.
    """
    if contract.rate_limit is not None:
        _add_rate_limit(operation, contract.rate_limit)

    if contract.public is not None:
        operation.add_extension(PUBLIC_EXTENSION, "yes")
        operation.security = []
    else:
        operation.add_extension(PUBLIC_EXTENSION, "no")

    if contract.permissions is not None:
        _add_permissions(operation, contract.permissions)

    if contract.configuration is not None:
        _add_configuration(operation, contract.configuration)

    operation.description = normalize_description(operation.description)
    return operation
