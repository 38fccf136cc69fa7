"""Unit tests for declarative endpoint contracts."""

from __future__ import annotations

from collections.abc import Callable
import functools
import logging

import pytest

from app.core.contracts import ConfigurationRequirement
from app.core.contracts import ContractRegistry
from app.core.contracts import EMPTY_CONTRACT
from app.core.contracts import PermissionRequirement
from app.core.contracts import PublicMarker
from app.core.contracts import RateLimitDescriptor
from app.core.contracts import endpoint_id
from app.core.contracts import public_endpoint
from app.core.contracts import rate_limited
from app.core.contracts import require_configuration
from app.core.contracts import require_permission


def test_decorators_collect_all_facets_for_one_endpoint() -> None:
    registry = ContractRegistry()

    @public_endpoint(registry=registry)
    @rate_limited(10, 60, api_key_max_requests=100, registry=registry)
    @require_permission("USER_READ", "USER_WRITE", registry=registry)
    @require_configuration("feature.new-user-flow", registry=registry)
    def get_user() -> None:
        return None

    contract = registry.contract_for(get_user)

    assert contract.public == PublicMarker()
    assert contract.is_public
    assert contract.rate_limit == RateLimitDescriptor(10, 60, 100, 60)
    assert contract.permissions == PermissionRequirement(("USER_READ", "USER_WRITE"))
    assert contract.configuration == ConfigurationRequirement("feature.new-user-flow")
    assert get_user in registry
    assert len(registry) == 1


def test_decorators_return_the_original_callable() -> None:
    registry = ContractRegistry()

    def handler() -> str:
        return "ok"

    assert rate_limited(registry=registry)(handler) is handler
    assert public_endpoint(handler, registry=registry) is handler
    assert handler() == "ok"


def test_undeclared_endpoint_has_empty_contract() -> None:
    registry = ContractRegistry()

    def handler() -> None:
        return None

    assert registry.contract_for(handler) is EMPTY_CONTRACT
    assert not registry.contract_for(handler).is_public
    assert handler not in registry


def test_rate_limit_defaults_share_regular_limit_with_api_keys() -> None:
    descriptor = RateLimitDescriptor()

    assert (descriptor.max_requests, descriptor.window_seconds) == (30, 60)
    assert descriptor.api_key_max_requests == 0
    assert not descriptor.has_api_key_limit


def test_facets_are_immutable() -> None:
    descriptor = RateLimitDescriptor()

    with pytest.raises(AttributeError):
        descriptor.max_requests = 1  # type: ignore[misc]


def test_duplicate_permissions_are_collapsed_in_declaration_order() -> None:
    registry = ContractRegistry()

    @require_permission("B", "A", "B", registry=registry)
    def handler() -> None:
        return None

    assert registry.contract_for(handler).permissions == PermissionRequirement(("B", "A"))


def test_empty_permission_set_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    registry = ContractRegistry()

    def handler() -> None:
        return None

    with caplog.at_level(logging.WARNING, logger="app.core.contracts"):
        registry.declare(handler, PermissionRequirement(()))

    assert "empty permission set" in caplog.text
    assert endpoint_id(handler) in caplog.text
    assert registry.contract_for(handler).permissions == PermissionRequirement(())


def test_endpoint_id_uses_module_and_qualname() -> None:
    def handler() -> None:
        return None

    assert endpoint_id(handler) == f"{__name__}:test_endpoint_id_uses_module_and_qualname.<locals>.handler"


def test_handlers_sharing_a_qualified_name_keep_separate_contracts() -> None:
    registry = ContractRegistry()

    def make_handler(limit: int) -> Callable[[], None]:
        @rate_limited(limit, 60, registry=registry)
        def handler() -> None:
            return None

        return handler

    first = make_handler(10)
    second = make_handler(99)

    assert endpoint_id(first) == endpoint_id(second)
    assert registry.contract_for(first).rate_limit == RateLimitDescriptor(10, 60)
    assert registry.contract_for(second).rate_limit == RateLimitDescriptor(99, 60)
    assert len(registry) == 2


def test_wrapped_handler_resolves_to_the_declared_contract() -> None:
    registry = ContractRegistry()

    @require_permission("USER_READ", registry=registry)
    def handler() -> None:
        return None

    @functools.wraps(handler)
    def wrapper() -> None:
        return handler()

    assert registry.contract_for(wrapper).permissions == PermissionRequirement(("USER_READ",))
    assert wrapper in registry
