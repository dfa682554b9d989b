"""AuditEventRecord ORM: append-only audit trail.

Invariants:
    - Rows are inserted, never updated or deleted
    - id is a monotonically increasing sequence (emission order)
    - event_type is indexed so consumers can filter by variant
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from custody.db.base import Base


class AuditEventRecord(Base):
    """One whitelist change or deposit."""
    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deployment_id: Mapped[str] = mapped_column(
        String(66), ForeignKey("custody_deployments.id"), nullable=False, index=True,
    )
    event_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
