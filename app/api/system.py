"""Public system routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends

from app.core import responses
from app.core.config import ApplicationSettings
from app.core.config import get_settings
from app.core.contracts import public_endpoint
from app.core.contracts import rate_limited
from app.schemas.response import SuccessEnvelope
from app.schemas.system import HealthStatus
from app.schemas.system import ServerInfo

router = APIRouter()


@router.get("/health", response_model=SuccessEnvelope[HealthStatus], tags=["public"])
@public_endpoint
def health() -> SuccessEnvelope[HealthStatus]:
    """Health check endpoint for service readiness."""
    return responses.success("Service is healthy", HealthStatus(status="ok"))


@router.get(
    "/api/v1/configuration/info",
    response_model=SuccessEnvelope[ServerInfo],
    tags=["configuration"],
)
@public_endpoint
@rate_limited()
def server_info(
    settings: ApplicationSettings = Depends(get_settings),
) -> SuccessEnvelope[ServerInfo]:
    """Describe the running API server."""
    info = ServerInfo(
        name=settings.name,
        version=settings.version,
        build_number=settings.build_number,
        profile=settings.profile,
    )
    return responses.success("Server information retrieved", info)
