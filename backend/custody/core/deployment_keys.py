"""Deployment Keys: where a custody deployment lives, derived from its admin.

Invariants:
    - derive() is deterministic: same admin (and seed) -> same deployment address
    - Both strategies feed the same core logic; only the address differs
    - bootstrap() requires deployer == admin and returns an empty state

Design Decisions:
    - admin_address: the deployment is keyed by the admin's own address
    - resource_account: sha3_256(admin || seed || 0xFF), resource-account style,
      so pooled funds sit at an address nobody holds a key for
"""

import hashlib
from typing import Protocol

from custody.core.authorization import require_admin
from custody.core.custody_state import CustodyState
from custody.core.domain_types import (
    Address, DeploymentId, KeyStrategy, address_bytes,
)

RESOURCE_ACCOUNT_SCHEME = b"\xff"


class DeploymentKeyStrategy(Protocol):
    kind: KeyStrategy

    def derive(self, admin: Address) -> DeploymentId: ...


class AdminAddressStrategy:
    kind = KeyStrategy.ADMIN_ADDRESS

    def derive(self, admin: Address) -> DeploymentId:
        return DeploymentId(admin)


class ResourceAccountStrategy:
    kind = KeyStrategy.RESOURCE_ACCOUNT

    def __init__(self, seed: str):
        self.seed = seed.encode("utf-8")

    def derive(self, admin: Address) -> DeploymentId:
        digest = hashlib.sha3_256(
            address_bytes(admin) + self.seed + RESOURCE_ACCOUNT_SCHEME,
        ).hexdigest()
        return DeploymentId("0x" + digest)


def build_key_strategy(kind: KeyStrategy, seed: str = "") -> DeploymentKeyStrategy:
    """Explicit mapping from configured kind to strategy instance."""
    if kind is KeyStrategy.RESOURCE_ACCOUNT:
        return ResourceAccountStrategy(seed)
    return AdminAddressStrategy()


def bootstrap(
    deployer: Address, admin: Address, strategy: DeploymentKeyStrategy,
) -> CustodyState:
    """Initialize an empty registry + vault for `admin`. Pure, no IO.

    Whether a deployment already exists at the derived address is a
    persistence question; the shell raises AlreadyInitializedError.
    """
    require_admin(deployer, admin)
    return CustodyState(
        deployment_id=strategy.derive(admin),
        admin=admin,
        key_strategy=strategy.kind,
    )
