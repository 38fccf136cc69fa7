"""Request metadata used when rendering error responses."""

from __future__ import annotations

import uuid

from fastapi import Request

REQUEST_ID_HEADER = "X-Request-ID"


def generate_trace_id() -> str:
    return str(uuid.uuid4())


def request_path(request: Request) -> str:
    return request.url.path


def request_id_or_generate(request: Request) -> str:
    """Reuse the caller's ``X-Request-ID`` or mint a new trace id."""
    request_id = request.headers.get(REQUEST_ID_HEADER, "").strip()
    return request_id or generate_trace_id()
