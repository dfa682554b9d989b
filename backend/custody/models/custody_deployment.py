"""CustodyDeployment ORM: one row per bootstrapped registry + vault.

Invariants:
    - id is the derived deployment address (primary key)
    - admin_address and key_strategy never change after insert
    - whitelist stores the ordered member list as a JSON array
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from custody.db.base import Base


class CustodyDeployment(Base):
    """Deployment aggregate root: admin identity plus whitelist."""
    __tablename__ = "custody_deployments"

    id: Mapped[str] = mapped_column(String(66), primary_key=True)
    admin_address: Mapped[str] = mapped_column(String(66), nullable=False)
    key_strategy: Mapped[str] = mapped_column(
        String(32), nullable=False, default="admin_address",
    )
    whitelist: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
