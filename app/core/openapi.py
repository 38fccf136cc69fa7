"""OpenAPI document assembly for the WalletIQ API."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Sequence
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import routing
from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute

from app.core.config import ApplicationSettings
from app.core.config import get_settings
from app.core.contracts import ContractRegistry
from app.core.contracts import default_registry
from app.core.openapi_docs import PUBLIC_EXTENSION
from app.core.openapi_docs import OpenAPIOperation
from app.core.openapi_docs import enrich

logger = logging.getLogger(__name__)

BEARER_AUTH = "BearerAuth"
API_KEY_AUTH = "ApiKeyAuth"

HTTP_METHODS = {"get", "put", "post", "delete", "options", "head", "patch", "trace"}

AUTH_NOTE = """**Authentication:**
Authentication is performed using the Authorization HTTP header in the format:

`Authorization: Bearer YOUR_JWT_TOKEN`

For API key authentication:

`Authorization: ApiKey YOUR_API_KEY`

**Rate Limiting:**
There is a rate limit of `30 requests per minute` across all endpoints, with some
endpoints having stricter limits.
Rate limit information is provided in response headers:
- `x-ratelimit-limit`: Maximum requests allowed in the current period
- `x-ratelimit-remaining`: Remaining requests in the current period
- `x-ratelimit-reset`: Timestamp when the limit resets
"""

SECURITY_SCHEMES: dict[str, dict[str, Any]] = {
    BEARER_AUTH: {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "JWT Bearer token authentication. Use for user-specific operations.",
    },
    API_KEY_AUTH: {
        "type": "http",
        "scheme": "ApiKey",
        "description": (
            "API Key authentication. Provides access to certain API endpoints with different rate limits."
        ),
    },
}

DEFAULT_SECURITY: list[dict[str, list[str]]] = [{BEARER_AUTH: []}, {API_KEY_AUTH: []}]


def _tag(name: str, display_name: str, description: str, is_public: bool) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "x-displayName": display_name,
        PUBLIC_EXTENSION: "yes" if is_public else "no",
    }


def api_tags(settings: ApplicationSettings) -> list[dict[str, Any]]:
    """Documented tag groups; the development group is hidden in production."""
    tags = [
        _tag("test", "Test", "Test endpoints.", True),
        _tag("users", "User Management", "User account data and profile management.", True),
        _tag("authentication", "Authentication", "User authentication and authorization endpoints.", True),
        _tag("admin", "Administration", "Administrative endpoints. Require admin permissions.", False),
        _tag("configuration", "Server Configuration", "Server configuration and settings.", True),
        _tag("public", "Public", "Public endpoints that don't require authentication.", True),
    ]
    if not settings.is_production:
        tags.append(
            _tag("Development", "Development", "Development-only endpoints. Not available in production.", False)
        )
    return tags


def api_servers(settings: ApplicationSettings) -> list[dict[str, str]]:
    description = "Production Environment" if settings.is_production else "Development Environment"
    return [{"url": url, "description": description} for url in settings.servers]


def api_description(settings: ApplicationSettings) -> str:
    return (
        f"Documentation for the endpoints provided by the {settings.name} API server.\n\n"
        "An RAG Based Wallet Management Platform\n\n" + AUTH_NOTE
    )


def _documented_routes(routes: Sequence[Any]) -> Iterator[Any]:
    """Yield every API route the document describes, including routes of included routers.

    Newer FastAPI releases keep included routers as wrapper routes and expose
    their effective (prefixed) routes through ``iter_route_contexts``; older
    releases copy the routes flat onto the application.
    """
    iter_route_contexts = getattr(routing, "iter_route_contexts", None)
    if iter_route_contexts is None:
        yield from (route for route in routes if isinstance(route, APIRoute))
        return
    for route_context in iter_route_contexts(routes):
        if isinstance(route_context.original_route, APIRoute):
            yield route_context


def enrich_operations(schema: dict[str, Any], routes: Sequence[Any], registry: ContractRegistry) -> int:
    """Apply declared endpoint contracts to every documented operation.

    Returns the number of operations enriched.
    """
    paths: dict[str, Any] = schema.get("paths", {})
    enriched = 0
    for route in _documented_routes(routes):
        if not route.include_in_schema:
            continue
        path_item = paths.get(route.path_format)
        if not path_item:
            continue
        endpoint = getattr(route, "original_route", route).endpoint
        contract = registry.contract_for(endpoint)
        for method in sorted(route.methods or ()):
            operation = path_item.get(method.lower())
            if operation is None or method.lower() not in HTTP_METHODS:
                continue
            operation.setdefault("security", [dict(item) for item in DEFAULT_SECURITY])
            enrich(OpenAPIOperation(operation), contract)
            enriched += 1
    return enriched


def build_openapi_schema(
    app: FastAPI,
    settings: ApplicationSettings,
    registry: ContractRegistry,
) -> dict[str, Any]:
    schema = get_openapi(
        title=settings.name,
        version=settings.version,
        description=api_description(settings),
        routes=app.routes,
        tags=api_tags(settings),
        servers=api_servers(settings),
        contact={"name": settings.name, "email": settings.support_email},
        license_info={"name": settings.license_name, "url": settings.license_url},
    )
    schema["info"]["x-logo"] = {"url": settings.logo_url}
    components = schema.setdefault("components", {})
    components.setdefault("securitySchemes", {}).update(SECURITY_SCHEMES)

    enriched = enrich_operations(schema, app.routes, registry)
    logger.debug("Built OpenAPI document with %s enriched operations", enriched)
    return schema


def install_openapi(
    app: FastAPI,
    *,
    settings: ApplicationSettings | None = None,
    registry: ContractRegistry | None = None,
) -> Callable[[], dict[str, Any]]:
    """Replace ``app.openapi`` with a builder that enriches operations once and caches the result."""
    contract_registry = registry if registry is not None else default_registry

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        app.openapi_schema = build_openapi_schema(app, settings or get_settings(), contract_registry)
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]
    return custom_openapi
