"""Deployment Keys: tests for key-derivation strategies and bootstrap."""

import hashlib

import pytest

from custody.core.deployment_keys import (
    AdminAddressStrategy, ResourceAccountStrategy, bootstrap, build_key_strategy,
)
from custody.core.domain_types import KeyStrategy, normalize_address
from custody.core.errors import NotAdminError

ADMIN = normalize_address("0xad")
OTHER = normalize_address("0xbeef")


def test_admin_address_strategy_uses_admin():
    assert AdminAddressStrategy().derive(ADMIN) == ADMIN


def test_resource_account_is_sha3_of_admin_seed_scheme():
    derived = ResourceAccountStrategy("vault").derive(ADMIN)
    expected = hashlib.sha3_256(
        bytes.fromhex(ADMIN[2:]) + b"vault" + b"\xff",
    ).hexdigest()
    assert derived == "0x" + expected
    assert len(derived) == 66


def test_resource_account_is_deterministic_and_seed_sensitive():
    a = ResourceAccountStrategy("vault").derive(ADMIN)
    b = ResourceAccountStrategy("vault").derive(ADMIN)
    c = ResourceAccountStrategy("other").derive(ADMIN)
    assert a == b
    assert a != c
    assert a != ADMIN


def test_build_key_strategy_maps_kinds():
    assert isinstance(build_key_strategy(KeyStrategy.ADMIN_ADDRESS), AdminAddressStrategy)
    strategy = build_key_strategy(KeyStrategy.RESOURCE_ACCOUNT, "s")
    assert isinstance(strategy, ResourceAccountStrategy)
    assert strategy.kind is KeyStrategy.RESOURCE_ACCOUNT


def test_bootstrap_returns_empty_state():
    state = bootstrap(ADMIN, ADMIN, ResourceAccountStrategy("vault"))
    assert state.admin == ADMIN
    assert state.whitelist == []
    assert state.key_strategy is KeyStrategy.RESOURCE_ACCOUNT
    assert state.deployment_id == ResourceAccountStrategy("vault").derive(ADMIN)


def test_bootstrap_by_non_admin_rejected():
    with pytest.raises(NotAdminError):
        bootstrap(OTHER, ADMIN, AdminAddressStrategy())
