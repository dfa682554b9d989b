"""Custody State & Audit Events: snapshot and payload serialization.

Tests cover:
    - Snapshot round trip preserves whitelist order and strategy
    - Missing keys fall back to defaults
    - Event payloads are JSON-safe and reversible
"""

import json

from custody.core.audit_events import (
    DepositRecorded, WhitelistChange, event_from_payload,
)
from custody.core.custody_state import (
    CustodyState, custody_state_from_snapshot, custody_state_to_snapshot,
)
from custody.core.domain_types import (
    DeploymentId, KeyStrategy, WhitelistAction, normalize_address,
)

ADMIN = normalize_address("0xad")
U1 = normalize_address("0x1")
U2 = normalize_address("0x2")


def test_snapshot_roundtrip():
    state = CustodyState(
        deployment_id=DeploymentId(normalize_address("0xdead")),
        admin=ADMIN,
        key_strategy=KeyStrategy.RESOURCE_ACCOUNT,
        whitelist=[U2, U1],
    )
    snapshot = custody_state_to_snapshot(state)
    json.dumps(snapshot)
    restored = custody_state_from_snapshot(snapshot)
    assert restored == state


def test_snapshot_missing_keys_use_defaults():
    restored = custody_state_from_snapshot(
        {"deployment_id": ADMIN, "admin": ADMIN},
    )
    assert restored.whitelist == []
    assert restored.key_strategy is KeyStrategy.ADMIN_ADDRESS


def test_vault_account_is_namespaced_under_deployment():
    state = CustodyState(deployment_id=DeploymentId(ADMIN), admin=ADMIN)
    assert state.vault_account == ADMIN + "::vault"
    assert state.vault_account != state.admin


def test_whitelist_change_payload_roundtrip():
    event = WhitelistChange(WhitelistAction.REMOVED, (U2, U1))
    payload = event.to_payload()
    assert payload == {"action": "removed", "addresses": [U2, U1]}
    assert event_from_payload(event.event_type.value, payload) == event


def test_deposit_payload_roundtrip():
    event = DepositRecorded(depositor=U1, amount=12)
    restored = event_from_payload("deposit_recorded", json.loads(json.dumps(event.to_payload())))
    assert restored == event
