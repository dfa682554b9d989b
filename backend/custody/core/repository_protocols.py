"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Capabilities used inside a call (FundsLedger, AuditLog) are synchronous
    - Persistence (CustodyRepository) is async and only used by the shell
    - for_update=True locks the rows read until the caller's transaction ends

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - The core never inspects the audit sink's internals (no counters, no reads)
"""

from typing import Protocol

from custody.core.audit_events import AuditEvent, RecordedEvent
from custody.core.custody_state import CustodyState
from custody.core.domain_types import Address, DeploymentId
from custody.core.funds import Funds


class FundsLedger(Protocol):
    """Fungible-asset ledger capability: atomic debit/credit of accounts."""
    def balance_of(self, account: Address) -> int: ...
    def withdraw(self, payer: Address, amount: int) -> Funds: ...
    def deposit(self, payee: Address, funds: Funds) -> None: ...


class AuditLog(Protocol):
    """Append-only audit sink."""
    def append(self, event: AuditEvent) -> None: ...


class CustodyRepository(Protocol):
    """Contract for custody persistence, implemented by shell."""
    async def get_state(
        self, deployment_id: DeploymentId, for_update: bool = False,
    ) -> CustodyState | None: ...
    async def create_state(self, state: CustodyState) -> None: ...
    async def save_state(self, state: CustodyState) -> None: ...
    async def load_balances(
        self, accounts: list[Address], for_update: bool = False,
    ) -> dict[Address, int]: ...
    async def save_balances(self, balances: dict[Address, int]) -> None: ...
    async def append_events(
        self, deployment_id: DeploymentId, events: list[AuditEvent],
    ) -> None: ...
    async def list_events(
        self, deployment_id: DeploymentId, event_type: str | None,
        limit: int, offset: int,
    ) -> list[RecordedEvent]: ...
