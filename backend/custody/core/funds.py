"""Funds & Balance Book: the value-transfer capability the vault moves money through.

Invariants:
    - Funds are only created by BalanceBook.withdraw and only consumed by BalanceBook.deposit
    - No balance ever goes negative; overdraw raises InsufficientFundsError before any change
    - Sum of all balances is unchanged by withdraw + deposit of the same Funds
    - No balance ever exceeds MAX_BALANCE (signed 64-bit ledger column)

Design Decisions:
    - BalanceBook is the in-memory working copy of ledger accounts for one call;
      the shell loads the touched accounts before the call and writes dirty ones back
    - Unknown accounts read as zero balance
"""

from dataclasses import dataclass, field

from custody.core.domain_types import Address, Amount
from custody.core.errors import (
    BalanceOverflowError, InsufficientFundsError, InvalidAmountError,
)

MAX_BALANCE = 2**63 - 1


def validate_amount(amount: object) -> Amount:
    """Reject negatives and non-integers (bool included)."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmountError(amount)
    return Amount(amount)


def ensure_capacity(account: Address, balance: int, amount: int) -> None:
    """Raise BalanceOverflowError if crediting `amount` would exceed MAX_BALANCE."""
    if balance + amount > MAX_BALANCE:
        raise BalanceOverflowError(account, amount, balance)


@dataclass(frozen=True)
class Funds:
    """A quantity of the asset in transit between ledger accounts."""
    value: int


@dataclass
class BalanceBook:
    """Ledger accounts held in memory. Implements the FundsLedger protocol."""
    balances: dict[Address, int] = field(default_factory=dict)
    dirty: set[Address] = field(default_factory=set)

    def balance_of(self, account: Address) -> int:
        return self.balances.get(account, 0)

    def withdraw(self, payer: Address, amount: int) -> Funds:
        amount = validate_amount(amount)
        available = self.balance_of(payer)
        if amount > available:
            raise InsufficientFundsError(payer, amount, available)
        self.balances[payer] = available - amount
        self.dirty.add(payer)
        return Funds(amount)

    def deposit(self, payee: Address, funds: Funds) -> None:
        balance = self.balance_of(payee)
        ensure_capacity(payee, balance, funds.value)
        self.balances[payee] = balance + funds.value
        self.dirty.add(payee)

    def mint(self, account: Address, amount: int) -> None:
        """Credit new units to an account (faucet / test setup only)."""
        self.deposit(account, Funds(validate_amount(amount)))

    def dirty_balances(self) -> dict[Address, int]:
        return {account: self.balances[account] for account in sorted(self.dirty)}
