"""FastAPI application entrypoint for WalletIQ."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.system import router as system_router
from app.core.config import ApplicationSettings
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.openapi import install_openapi

logger = logging.getLogger(__name__)


def _add_cors(app: FastAPI, settings: ApplicationSettings) -> None:
    if not settings.cors_enabled:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_methods=list(settings.cors_allowed_methods),
        allow_headers=list(settings.cors_allowed_headers),
        expose_headers=list(settings.cors_exposed_headers),
        allow_credentials=settings.cors_allow_credentials,
        max_age=settings.cors_max_age,
    )


def create_app(settings: ApplicationSettings | None = None) -> FastAPI:
    """Assemble the API: middleware, error handlers, routers and the OpenAPI document."""
    settings = settings or get_settings()
    application = FastAPI(title=settings.name, version=settings.version)
    _add_cors(application, settings)
    register_error_handlers(application)
    application.include_router(system_router)
    install_openapi(application, settings=settings)
    return application


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger.info("Starting %s with settings=%s", settings.name, settings.safe_for_logging())

app = create_app(settings)
