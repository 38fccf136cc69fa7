"""Unit tests for success and error envelope builders."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Any

from app.core import responses
from app.core.error_kinds import ErrorKind
from app.schemas.error import FieldError


@dataclass
class FakePage:
    number: int
    size: int
    total_elements: int
    total_pages: int
    content: list[Any] = field(default_factory=list)


def _dump(envelope: Any) -> dict[str, Any]:
    return envelope.model_dump(mode="json", by_alias=True)


def _assert_utc_timestamp(value: str) -> None:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    assert parsed.tzinfo is not None
    assert parsed.utcoffset() == timezone.utc.utcoffset(parsed)


def test_success_envelope_wire_shape() -> None:
    payload = _dump(responses.success("User fetched", {"id": 7}))

    assert list(payload) == ["success", "status", "message", "data", "timestamp"]
    assert payload["success"] is True
    assert payload["status"] == 200
    assert payload["message"] == "User fetched"
    assert payload["data"] == {"id": 7}
    _assert_utc_timestamp(payload["timestamp"])


def test_created_and_accepted_statuses() -> None:
    assert responses.created("Created", {"id": 1}).status == 201
    assert responses.accepted("Queued", {"id": 1}).status == 202
    assert responses.of(206, "Partial", [1]).status == 206


def test_success_without_data_omits_data_key() -> None:
    payload = _dump(responses.success_no_data("User deleted"))

    assert payload["status"] == 200
    assert "data" not in payload
    assert None not in payload.values()


def test_falsy_data_is_still_serialized() -> None:
    assert _dump(responses.success("Empty list", []))["data"] == []
    assert _dump(responses.success("Zero", 0))["data"] == 0


def test_paginated_wraps_page_content_and_metadata() -> None:
    page = FakePage(number=1, size=2, total_elements=5, total_pages=3, content=["c", "d"])

    payload = _dump(responses.paginated("Users listed", page))

    assert payload["data"] == {
        "content": ["c", "d"],
        "page": {"number": 1, "size": 2, "totalElements": 5, "totalPages": 3},
    }


def test_paginated_echoes_filters_when_given() -> None:
    page = FakePage(number=0, size=10, total_elements=1, total_pages=1, content=[{"id": 1}])

    payload = _dump(responses.paginated("Users listed", page, {"active": True}))

    assert payload["data"]["filters"] == {"active": True}


def test_empty_collection_has_zeroed_page() -> None:
    payload = _dump(responses.empty_collection("No users", 20))

    assert payload["status"] == 200
    assert payload["data"] == {
        "content": [],
        "page": {"number": 0, "size": 20, "totalElements": 0, "totalPages": 0},
    }


def test_batch_counts_follow_item_lists_not_total() -> None:
    failed = [{"id": "x", "reason": "duplicate"}, {"id": "y", "reason": "invalid"}]

    payload = _dump(responses.batch("Import finished", 5, ["a", "b", "c"], failed))

    assert payload["data"]["summary"] == {"total": 5, "successful": 3, "failed": 2}
    assert payload["data"]["successful"] == ["a", "b", "c"]
    assert payload["data"]["failed"] == failed


def test_async_accepted_describes_job() -> None:
    payload = _dump(
        responses.async_accepted("Export started", "job-1", "PENDING", estimated_seconds=30, status_url="/jobs/job-1")
    )

    assert payload["status"] == 202
    assert payload["data"] == {
        "jobId": "job-1",
        "status": "PENDING",
        "estimatedTime": 30,
        "statusUrl": "/jobs/job-1",
    }


def test_async_accepted_omits_unknown_estimate_and_url() -> None:
    payload = _dump(responses.async_accepted("Export started", "job-2", "PENDING"))

    assert payload["data"] == {"jobId": "job-2", "status": "PENDING"}


def test_error_envelope_derives_title_and_status_from_kind() -> None:
    envelope = responses.error(ErrorKind.RESOURCE_NOT_FOUND, "USER.NOT_FOUND", "User 7 not found", "/api/v1/users/7")

    payload = _dump(envelope)

    assert envelope.status == 404
    assert payload["success"] is False
    error = payload["error"]
    assert list(error) == ["type", "code", "title", "status", "detail", "timestamp", "path"]
    assert error["type"] == "RESOURCE_NOT_FOUND"
    assert error["code"] == "USER.NOT_FOUND"
    assert error["title"] == "Resource Not Found"
    assert error["status"] == 404
    assert error["detail"] == "User 7 not found"
    assert error["path"] == "/api/v1/users/7"
    _assert_utc_timestamp(error["timestamp"])


def test_error_envelope_serializes_optional_context() -> None:
    envelope = responses.error(
        ErrorKind.VALIDATION_ERROR,
        "VALIDATION.FAILED",
        "Request validation failed",
        "/api/v1/users",
        field_errors=[
            FieldError(field="email", message="must be a valid email", rejected_value="nope", code="email"),
            FieldError(field="name", message="must not be blank"),
        ],
        trace_id="trace-1",
        retry_after_seconds=30,
        allowed_methods=["GET", "POST"],
    )

    error = _dump(envelope)["error"]

    assert error["errors"] == [
        {"field": "email", "message": "must be a valid email", "rejectedValue": "nope", "code": "email"},
        {"field": "name", "message": "must not be blank"},
    ]
    assert list(error["errors"][0]) == ["field", "message", "rejectedValue", "code"]
    assert error["traceId"] == "trace-1"
    assert error["retryAfter"] == 30
    assert error["allowedMethods"] == ["GET", "POST"]
    assert list(error)[-4:] == ["errors", "traceId", "retryAfter", "allowedMethods"]


def test_to_json_response_uses_envelope_status_and_headers() -> None:
    envelope = responses.error(ErrorKind.RATE_LIMIT_ERROR, "RATE_LIMIT.EXCEEDED", "Slow down", "/x", retry_after_seconds=9)

    response = responses.to_json_response(envelope, headers={"Retry-After": "9"})

    assert response.status_code == 429
    assert response.headers["retry-after"] == "9"


def test_no_content_response() -> None:
    response = responses.no_content()

    assert response.status_code == 204
    assert response.body == b""
