"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - Address is always normalized: lowercase, 0x-prefixed, 64 hex digits
    - Amount is a non-negative int (validated at the vault boundary)
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

import re
from enum import Enum
from typing import NewType

from custody.core.errors import InvalidAddressError


# ─── Identity Types ──────────────────────────────────────────────

Address = NewType("Address", str)
DeploymentId = NewType("DeploymentId", str)   # an Address that keys persisted state


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)

ADDRESS_HEX_LENGTH = 64
_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


def normalize_address(raw: str) -> Address:
    """Canonical form of an account address. Raises InvalidAddressError."""
    if not isinstance(raw, str) or not _ADDRESS_PATTERN.match(raw.strip()):
        raise InvalidAddressError(str(raw))
    digits = raw.strip()[2:].lower()
    return Address("0x" + digits.rjust(ADDRESS_HEX_LENGTH, "0"))


def address_bytes(address: Address) -> bytes:
    """32-byte big-endian encoding of a normalized address."""
    return bytes.fromhex(address[2:])


# ─── Enums ───────────────────────────────────────────────────────

class WhitelistAction(str, Enum):
    """Direction of a whitelist mutation."""
    ADDED = "added"
    REMOVED = "removed"


class AuditEventType(str, Enum):
    """Audit record variants. Values are the persisted event_type column."""
    WHITELIST_CHANGE = "whitelist_change"
    DEPOSIT_RECORDED = "deposit_recorded"


class KeyStrategy(str, Enum):
    """How the deployment address is derived from the admin."""
    ADMIN_ADDRESS = "admin_address"
    RESOURCE_ACCOUNT = "resource_account"
