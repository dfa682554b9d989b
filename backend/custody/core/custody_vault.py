"""Custody Vault: pooled funds held at the deployment's ledger account.

Invariants:
    - The vault balance IS the ledger balance of state.vault_account (no shadow counter)
    - Deposits require a whitelisted caller; transfers out require the admin
    - Every guard runs before the ledger is touched, so a failed call moves nothing
    - No credit may push the vault or a payee past MAX_BALANCE
    - deposit emits one DepositRecorded; transfer_out emits nothing

Design Decisions:
    - Funds travel through the FundsLedger capability only (withdraw -> deposit),
      so the balance can never grow by more than what a payer actually lost
"""

from custody.core.access_registry import AccessRegistry
from custody.core.audit_events import DepositRecorded
from custody.core.authorization import require_admin
from custody.core.custody_state import CustodyState
from custody.core.domain_types import Address, Amount
from custody.core.errors import InsufficientFundsError, NotWhitelistedError
from custody.core.funds import ensure_capacity, validate_amount
from custody.core.repository_protocols import AuditLog, FundsLedger


class CustodyVault:
    """Gates money movement in and out of custody."""

    def __init__(
        self,
        state: CustodyState,
        registry: AccessRegistry,
        ledger: FundsLedger,
        audit_log: AuditLog,
    ):
        self._state = state
        self._registry = registry
        self._ledger = ledger
        self._audit_log = audit_log

    def deposit(self, caller: Address, amount: int) -> DepositRecorded:
        if not self._registry.is_whitelisted(caller):
            raise NotWhitelistedError(caller)
        amount = validate_amount(amount)
        ensure_capacity(self._state.vault_account, self.get_balance(), amount)

        funds = self._ledger.withdraw(caller, amount)
        self._ledger.deposit(self._state.vault_account, funds)

        event = DepositRecorded(depositor=caller, amount=Amount(funds.value))
        self._audit_log.append(event)
        return event

    def transfer_out(self, caller: Address, to: Address, amount: int) -> Amount:
        """Move funds from custody to `to`. Returns the new vault balance."""
        require_admin(caller, self._state.admin)
        amount = validate_amount(amount)
        balance = self.get_balance()
        if amount > balance:
            raise InsufficientFundsError(self._state.vault_account, amount, balance)
        ensure_capacity(to, self._ledger.balance_of(to), amount)

        funds = self._ledger.withdraw(self._state.vault_account, amount)
        self._ledger.deposit(to, funds)
        # No audit event for transfers out; deposits and whitelist changes only.
        return self.get_balance()

    def get_balance(self) -> Amount:
        return Amount(self._ledger.balance_of(self._state.vault_account))
