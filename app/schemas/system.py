"""Pydantic schemas for system and server-information payloads."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class HealthStatus(BaseModel):
    """Service readiness payload."""

    status: str


class ServerInfo(BaseModel):
    """Public description of the running API server."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    name: str
    version: str
    build_number: str
    profile: str
