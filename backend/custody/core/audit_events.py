"""Audit Events: immutable records of whitelist and deposit mutations.

Invariants:
    - Events are frozen dataclasses, never mutated after construction
    - Exactly one event per successful mutating call (a batch of N addresses -> one event)
    - to_payload() is JSON-safe; event_from_payload() reverses it

Design Decisions:
    - Tuple for addresses: keeps the event hashable and immutable
    - BufferedAuditLog collects events for the current call; the shell persists
      them in the same transaction as the state change
    - RecordedEvent is what the sink hands back: the event plus the sequence
      number and timestamp the sink assigned
"""

from dataclasses import dataclass, field
from datetime import datetime

from custody.core.domain_types import (
    Address, Amount, AuditEventType, WhitelistAction,
)


@dataclass(frozen=True)
class WhitelistChange:
    """Whitelist batch applied by the admin."""
    action: WhitelistAction
    addresses: tuple[Address, ...]

    @property
    def event_type(self) -> AuditEventType:
        return AuditEventType.WHITELIST_CHANGE

    def to_payload(self) -> dict:
        return {"action": self.action.value, "addresses": list(self.addresses)}


@dataclass(frozen=True)
class DepositRecorded:
    """Funds moved from a whitelisted depositor into custody."""
    depositor: Address
    amount: Amount

    @property
    def event_type(self) -> AuditEventType:
        return AuditEventType.DEPOSIT_RECORDED

    def to_payload(self) -> dict:
        return {"depositor": self.depositor, "amount": self.amount}


AuditEvent = WhitelistChange | DepositRecorded


def event_from_payload(event_type: str, payload: dict) -> AuditEvent:
    """Rebuild an event from its persisted form."""
    kind = AuditEventType(event_type)
    if kind is AuditEventType.WHITELIST_CHANGE:
        return WhitelistChange(
            action=WhitelistAction(payload["action"]),
            addresses=tuple(Address(a) for a in payload["addresses"]),
        )
    return DepositRecorded(
        depositor=Address(payload["depositor"]),
        amount=Amount(int(payload["amount"])),
    )


@dataclass(frozen=True)
class RecordedEvent:
    """A persisted audit event in emission order."""
    sequence: int
    event: AuditEvent
    recorded_at: datetime


@dataclass
class BufferedAuditLog:
    """In-memory append-only sink for one call's events."""
    events: list[AuditEvent] = field(default_factory=list)

    def append(self, event: AuditEvent) -> None:
        self.events.append(event)
