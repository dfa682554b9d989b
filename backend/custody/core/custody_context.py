"""Custody Context: one call's state plus its capabilities.

Invariants:
    - registry and vault share the same state, ledger and audit sink
    - The context is built per call by the shell and discarded afterwards
"""

from dataclasses import dataclass, field

from custody.core.access_registry import AccessRegistry
from custody.core.audit_events import BufferedAuditLog
from custody.core.custody_state import CustodyState
from custody.core.custody_vault import CustodyVault
from custody.core.funds import BalanceBook


@dataclass
class CustodyContext:
    state: CustodyState
    ledger: BalanceBook = field(default_factory=BalanceBook)
    audit_log: BufferedAuditLog = field(default_factory=BufferedAuditLog)

    @property
    def registry(self) -> AccessRegistry:
        return AccessRegistry(self.state, self.audit_log)

    @property
    def vault(self) -> CustodyVault:
        return CustodyVault(
            self.state, self.registry, self.ledger, self.audit_log,
        )
