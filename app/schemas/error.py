"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import SerializerFunctionWrapHandler
from pydantic import model_serializer
from pydantic.alias_generators import to_camel

from app.core.error_kinds import ErrorKind


def _drop_absent(payload: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    for key in keys:
        if payload.get(key) is None:
            payload.pop(key, None)
    return payload


class FieldError(BaseModel):
    """Single field-level validation failure."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    field: str
    message: str
    rejected_value: Any = None
    code: str | None = None

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler):
        return _drop_absent(handler(self), ("rejectedValue", "rejected_value", "code"))


class ErrorDetail(BaseModel):
    """Problem-details style error body.

    ``title`` and ``status`` are never passed in: they are read from ``type``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: ErrorKind
    code: str
    detail: str
    timestamp: datetime
    path: str
    errors: list[FieldError] | None = None
    trace_id: str | None = Field(default=None, alias="traceId")
    retry_after: int | None = Field(default=None, alias="retryAfter")
    allowed_methods: list[str] | None = Field(default=None, alias="allowedMethods")

    @property
    def title(self) -> str:
        return self.type.title

    @property
    def status(self) -> int:
        return self.type.status_code

    @model_serializer(mode="wrap")
    def _with_derived_fields(self, handler: SerializerFunctionWrapHandler):
        dumped = handler(self)
        payload: dict[str, Any] = {
            "type": dumped.pop("type"),
            "code": dumped.pop("code"),
            "title": self.title,
            "status": self.status,
        }
        payload.update(dumped)
        return _drop_absent(
            payload,
            (
                "errors",
                "traceId",
                "trace_id",
                "retryAfter",
                "retry_after",
                "allowedMethods",
                "allowed_methods",
            ),
        )


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ErrorDetail

    @property
    def status(self) -> int:
        return self.error.status
