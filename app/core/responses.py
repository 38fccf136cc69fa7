"""Helpers that build standardized success and error envelopes.

Routers return the envelopes from these helpers instead of assembling response
bodies by hand, so every response shares one wire format.
"""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Protocol
from typing import TypeVar

from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.responses import Response

from app.core.error_kinds import ErrorKind
from app.schemas.error import ErrorDetail
from app.schemas.error import ErrorResponse
from app.schemas.error import FieldError
from app.schemas.response import AsyncJob
from app.schemas.response import BatchData
from app.schemas.response import BatchSummary
from app.schemas.response import PageInfo
from app.schemas.response import PaginatedData
from app.schemas.response import SuccessEnvelope

T = TypeVar("T")


class PageLike(Protocol):
    """Read-only view of a pagination result produced by a data source."""

    @property
    def number(self) -> int: ...

    @property
    def size(self) -> int: ...

    @property
    def total_elements(self) -> int: ...

    @property
    def total_pages(self) -> int: ...

    @property
    def content(self) -> Sequence[Any]: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def of(status_code: int, message: str, data: T | None = None) -> SuccessEnvelope[T]:
    """Success envelope with a custom status."""
    return SuccessEnvelope(status=status_code, message=message, data=data, timestamp=_now())


def success(message: str, data: T) -> SuccessEnvelope[T]:
    return of(status.HTTP_200_OK, message, data)


def created(message: str, data: T) -> SuccessEnvelope[T]:
    return of(status.HTTP_201_CREATED, message, data)


def accepted(message: str, data: T) -> SuccessEnvelope[T]:
    return of(status.HTTP_202_ACCEPTED, message, data)


def success_no_data(message: str) -> SuccessEnvelope[Any]:
    """200 envelope without a payload (e.g. after a delete)."""
    return of(status.HTTP_200_OK, message)


def page_info_from(page: PageLike) -> PageInfo:
    return PageInfo(
        number=page.number,
        size=page.size,
        total_elements=page.total_elements,
        total_pages=page.total_pages,
    )


def paginated(
    message: str,
    page: PageLike,
    filters: Mapping[str, Any] | None = None,
) -> SuccessEnvelope[PaginatedData]:
    """Wrap one page of results, optionally echoing the applied filters."""
    data = PaginatedData(
        content=list(page.content),
        page=page_info_from(page),
        filters=dict(filters) if filters is not None else None,
    )
    return success(message, data)


def empty_collection(message: str, page_size: int) -> SuccessEnvelope[PaginatedData]:
    """List response for a query that legitimately matched nothing."""
    data = PaginatedData(
        content=[],
        page=PageInfo(number=0, size=page_size, total_elements=0, total_pages=0),
    )
    return success(message, data)


def batch(
    message: str,
    total: int,
    successful: Sequence[Any],
    failed: Sequence[Mapping[str, Any]],
) -> SuccessEnvelope[BatchData]:
    """Summarize a batch operation; counts always follow the item lists."""
    data = BatchData(
        summary=BatchSummary(total=total, successful=len(successful), failed=len(failed)),
        successful=list(successful),
        failed=[dict(item) for item in failed],
    )
    return success(message, data)


def async_accepted(
    message: str,
    job_id: str,
    job_status: str,
    estimated_seconds: int | None = None,
    status_url: str | None = None,
) -> SuccessEnvelope[AsyncJob]:
    """202 envelope for work that continues after the response is sent."""
    data = AsyncJob(
        job_id=job_id,
        status=job_status,
        estimated_time=estimated_seconds,
        status_url=status_url,
    )
    return accepted(message, data)


def error(
    kind: ErrorKind,
    code: str,
    detail: str,
    path: str,
    *,
    field_errors: Sequence[FieldError] | None = None,
    trace_id: str | None = None,
    retry_after_seconds: int | None = None,
    allowed_methods: Sequence[str] | None = None,
) -> ErrorResponse:
    """Error envelope whose title and status are fixed by ``kind``."""
    return ErrorResponse(
        error=ErrorDetail(
            type=kind,
            code=code,
            detail=detail,
            timestamp=_now(),
            path=path,
            errors=list(field_errors) if field_errors is not None else None,
            trace_id=trace_id,
            retry_after=retry_after_seconds,
            allowed_methods=list(allowed_methods) if allowed_methods is not None else None,
        )
    )


def to_json_response(
    envelope: SuccessEnvelope[Any] | ErrorResponse,
    *,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Render an envelope with the HTTP status it carries."""
    return JSONResponse(
        status_code=envelope.status,
        content=envelope.model_dump(mode="json", by_alias=True),
        headers=dict(headers) if headers else None,
    )


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
