"""Success envelope schemas and the payload shapes wrapped by them."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from typing import Generic
from typing import Literal
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import SerializerFunctionWrapHandler
from pydantic import model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class SuccessEnvelope(BaseModel, Generic[T]):
    """Wrapper for every successful API response.

    ``data`` is left out of the serialized body when there is no payload,
    e.g. for delete operations.
    """

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    status: int
    message: str
    data: T | None = None
    timestamp: datetime

    @model_serializer(mode="wrap")
    def _omit_absent_data(self, handler: SerializerFunctionWrapHandler):
        payload = handler(self)
        if self.data is None:
            payload.pop("data", None)
        return payload


class PageInfo(BaseModel):
    """Pagination metadata projected from an external page result."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    number: int = Field(ge=0)
    size: int
    total_elements: int
    total_pages: int


class PaginatedData(BaseModel):
    """Payload of a paginated listing."""

    model_config = ConfigDict(frozen=True)

    content: list[Any]
    page: PageInfo
    filters: dict[str, Any] | None = None

    @model_serializer(mode="wrap")
    def _omit_absent_filters(self, handler: SerializerFunctionWrapHandler):
        payload = handler(self)
        if self.filters is None:
            payload.pop("filters", None)
        return payload


class BatchSummary(BaseModel):
    """Counters of a batch operation."""

    model_config = ConfigDict(frozen=True)

    total: int
    successful: int
    failed: int


class BatchData(BaseModel):
    """Payload of a batch operation with per-item outcomes."""

    model_config = ConfigDict(frozen=True)

    summary: BatchSummary
    successful: list[Any]
    failed: list[dict[str, Any]]


class AsyncJob(BaseModel):
    """Payload returned when work continues after the response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    job_id: str
    status: str
    estimated_time: int | None = None
    status_url: str | None = None

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler):
        payload = handler(self)
        for key in ("estimatedTime", "estimated_time", "statusUrl", "status_url"):
            if payload.get(key, "") is None:
                payload.pop(key)
        return payload
