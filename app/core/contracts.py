"""Declarative endpoint contracts.

An endpoint's non-functional contract (public access, rate limit, required
permissions, required configuration flag) is declared with the decorators in
this module and kept in a :class:`ContractRegistry` keyed by the endpoint callable.
The declarations document the contract only: authentication, authorization,
rate limiting and feature-flag checks are enforced elsewhere.

Example::

    @router.get("/users/{user_id}")
    @rate_limited(max_requests=10, window_seconds=60)
    @require_permission("USER_READ")
    def get_user(user_id: int) -> ...:
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import replace
import inspect
import logging
from typing import Any
from typing import TypeVar
import weakref

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class PublicMarker:
    """Endpoint is reachable without credentials."""


@dataclass(frozen=True)
class RateLimitDescriptor:
    """How often an endpoint may be called.

    ``api_key_max_requests == 0`` means API-key callers share the regular limit.
    """

    max_requests: int = 30
    window_seconds: int = 60
    api_key_max_requests: int = 0
    api_key_window_seconds: int = 60

    @property
    def has_api_key_limit(self) -> bool:
        return self.api_key_max_requests > 0


@dataclass(frozen=True)
class PermissionRequirement:
    permissions: tuple[str, ...]


@dataclass(frozen=True)
class ConfigurationRequirement:
    """Dotted configuration path that must be ``true`` for the endpoint to be reachable."""

    path: str


@dataclass(frozen=True)
class EndpointContract:
    """All facets declared for one endpoint; absent facets are ``None``."""

    public: PublicMarker | None = None
    rate_limit: RateLimitDescriptor | None = None
    permissions: PermissionRequirement | None = None
    configuration: ConfigurationRequirement | None = None

    @property
    def is_public(self) -> bool:
        return self.public is not None


Facet = PublicMarker | RateLimitDescriptor | PermissionRequirement | ConfigurationRequirement

_FACET_FIELDS: dict[type, str] = {
    PublicMarker: "public",
    RateLimitDescriptor: "rate_limit",
    PermissionRequirement: "permissions",
    ConfigurationRequirement: "configuration",
}

EMPTY_CONTRACT = EndpointContract()


def endpoint_id(endpoint: Callable[..., Any]) -> str:
    """Readable name of an endpoint callable for log messages: ``module:qualname``."""
    return f"{endpoint.__module__}:{endpoint.__qualname__}"


def _endpoint_key(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    return inspect.unwrap(getattr(endpoint, "__func__", endpoint))


class ContractRegistry:
    """Side table from endpoint callable to its declared contract.

    Entries are keyed by the function object itself, so handlers that share a
    qualified name (e.g. closures created by a router factory) keep separate
    contracts. Populated while routers are built; read when API documentation
    is generated.
    """

    def __init__(self) -> None:
        self._contracts: weakref.WeakKeyDictionary[Callable[..., Any], EndpointContract] = (
            weakref.WeakKeyDictionary()
        )

    def declare(self, endpoint: Callable[..., Any], facet: Facet) -> None:
        if isinstance(facet, PermissionRequirement) and not facet.permissions:
            logger.warning("Endpoint %s declares an empty permission set", endpoint_id(endpoint))
        key = _endpoint_key(endpoint)
        current = self._contracts.get(key, EMPTY_CONTRACT)
        self._contracts[key] = replace(current, **{_FACET_FIELDS[type(facet)]: facet})

    def contract_for(self, endpoint: Callable[..., Any]) -> EndpointContract:
        return self._contracts.get(_endpoint_key(endpoint), EMPTY_CONTRACT)

    def __contains__(self, endpoint: object) -> bool:
        return callable(endpoint) and _endpoint_key(endpoint) in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)


default_registry = ContractRegistry()


def _declaring(facet: Facet, registry: ContractRegistry | None) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        target = registry if registry is not None else default_registry
        target.declare(func, facet)
        return func

    return decorator


def public_endpoint(func: F | None = None, *, registry: ContractRegistry | None = None) -> Any:
    """Mark an endpoint as callable without authentication.

    Usable bare (``@public_endpoint``) or with arguments
    (``@public_endpoint(registry=...)``).
    """
    decorator = _declaring(PublicMarker(), registry)
    if func is not None:
        return decorator(func)
    return decorator


def rate_limited(
    max_requests: int = 30,
    window_seconds: int = 60,
    *,
    api_key_max_requests: int = 0,
    api_key_window_seconds: int = 60,
    registry: ContractRegistry | None = None,
) -> Callable[[F], F]:
    descriptor = RateLimitDescriptor(
        max_requests=max_requests,
        window_seconds=window_seconds,
        api_key_max_requests=api_key_max_requests,
        api_key_window_seconds=api_key_window_seconds,
    )
    return _declaring(descriptor, registry)


def require_permission(*permissions: str, registry: ContractRegistry | None = None) -> Callable[[F], F]:
    return _declaring(PermissionRequirement(permissions=tuple(dict.fromkeys(permissions))), registry)


def require_configuration(path: str, *, registry: ContractRegistry | None = None) -> Callable[[F], F]:
    return _declaring(ConfigurationRequirement(path=path), registry)
