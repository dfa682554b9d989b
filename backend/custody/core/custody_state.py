"""Custody State: the per-deployment record threaded through every operation.

Invariants:
    - whitelist has no duplicates and keeps insertion order
    - admin and deployment_id never change after bootstrap
    - to_snapshot produces a JSON-safe dict; from_snapshot reverses it
    - Missing snapshot keys fall back to defaults (forward-compatible)
"""

from dataclasses import dataclass, field

from custody.core.domain_types import Address, DeploymentId, KeyStrategy

VAULT_ACCOUNT_SUFFIX = "::vault"


@dataclass
class CustodyState:
    """Per-deployment state: pure dataclass, no IO."""

    deployment_id: DeploymentId
    admin: Address
    key_strategy: KeyStrategy = KeyStrategy.ADMIN_ADDRESS
    whitelist: list[Address] = field(default_factory=list)

    @property
    def vault_account(self) -> Address:
        """Ledger account that holds the pooled funds, separate from the admin's own."""
        return Address(self.deployment_id + VAULT_ACCOUNT_SUFFIX)

    @property
    def whitelist_size(self) -> int:
        return len(self.whitelist)


def custody_state_to_snapshot(state: CustodyState) -> dict:
    """Serialize CustodyState to JSON-safe dict. Pure, no IO."""
    return {
        "deployment_id": state.deployment_id,
        "admin": state.admin,
        "key_strategy": state.key_strategy.value,
        "whitelist": list(state.whitelist),
    }


def custody_state_from_snapshot(snapshot: dict) -> CustodyState:
    """Reconstruct CustodyState from a snapshot dict."""
    return CustodyState(
        deployment_id=DeploymentId(snapshot["deployment_id"]),
        admin=Address(snapshot["admin"]),
        key_strategy=KeyStrategy(
            snapshot.get("key_strategy", KeyStrategy.ADMIN_ADDRESS.value),
        ),
        whitelist=[Address(a) for a in snapshot.get("whitelist", [])],
    )
