"""LedgerAccount ORM: balance record per account, including the vault's own.

Invariants:
    - balance >= 0 (check constraint)
    - The vault balance is the row keyed "<deployment id>::vault"
"""

from sqlalchemy import BigInteger, CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from custody.db.base import Base


class LedgerAccount(Base):
    __tablename__ = "ledger_accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_ledger_accounts_balance_non_negative"),
    )

    address: Mapped[str] = mapped_column(String(80), primary_key=True)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
