"""SQL Custody Repository: SQLAlchemy implementation of CustodyRepository.

Invariants:
    - Never commits; the caller owns the transaction
    - Mutating calls read the deployment row FOR UPDATE, so calls on one
      deployment are serialized across processes, not just within one
    - Balances are upserted only for accounts the call actually touched
    - Events are inserted in emission order (sequence id follows list order)
"""

from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from custody.core.audit_events import AuditEvent, RecordedEvent, event_from_payload
from custody.core.custody_state import (
    CustodyState, custody_state_from_snapshot, custody_state_to_snapshot,
)
from custody.core.domain_types import Address, DeploymentId
from custody.models.audit_event import AuditEventRecord
from custody.models.custody_deployment import CustodyDeployment
from custody.models.ledger_account import LedgerAccount


def deployment_query(
    deployment_id: DeploymentId, for_update: bool = False,
) -> Select:
    query = select(CustodyDeployment).where(CustodyDeployment.id == deployment_id)
    if for_update:
        # Re-read under the lock; never trust attributes loaded before it.
        query = query.with_for_update().execution_options(populate_existing=True)
    return query


def balances_query(accounts: list[Address], for_update: bool = False) -> Select:
    query = select(LedgerAccount).where(LedgerAccount.address.in_(accounts))
    if for_update:
        # Stable lock order across calls touching overlapping accounts.
        query = (
            query.order_by(LedgerAccount.address)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
    return query


class SqlCustodyRepository:
    """Persists CustodyState, ledger balances and audit events."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_state(
        self, deployment_id: DeploymentId, for_update: bool = False,
    ) -> CustodyState | None:
        result = await self._db.execute(deployment_query(deployment_id, for_update))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return custody_state_from_snapshot({
            "deployment_id": row.id,
            "admin": row.admin_address,
            "key_strategy": row.key_strategy,
            "whitelist": row.whitelist,
        })

    async def create_state(self, state: CustodyState) -> None:
        snapshot = custody_state_to_snapshot(state)
        self._db.add(CustodyDeployment(
            id=snapshot["deployment_id"],
            admin_address=snapshot["admin"],
            key_strategy=snapshot["key_strategy"],
            whitelist=snapshot["whitelist"],
        ))

    async def save_state(self, state: CustodyState) -> None:
        row = await self._db.get(CustodyDeployment, state.deployment_id)
        # New list object so the JSON column is flagged as modified.
        row.whitelist = list(custody_state_to_snapshot(state)["whitelist"])
        row.updated_at = datetime.now(timezone.utc)

    async def load_balances(
        self, accounts: list[Address], for_update: bool = False,
    ) -> dict[Address, int]:
        if not accounts:
            return {}
        result = await self._db.execute(balances_query(accounts, for_update))
        return {Address(a.address): a.balance for a in result.scalars().all()}

    async def save_balances(self, balances: dict[Address, int]) -> None:
        for address, balance in balances.items():
            row = await self._db.get(LedgerAccount, address)
            if row is None:
                self._db.add(LedgerAccount(address=address, balance=balance))
            else:
                row.balance = balance

    async def append_events(
        self, deployment_id: DeploymentId, events: list[AuditEvent],
    ) -> None:
        for event in events:
            self._db.add(AuditEventRecord(
                deployment_id=deployment_id,
                event_type=event.event_type.value,
                payload=event.to_payload(),
            ))
        await self._db.flush()

    async def list_events(
        self, deployment_id: DeploymentId, event_type: str | None,
        limit: int, offset: int,
    ) -> list[RecordedEvent]:
        query = (
            select(AuditEventRecord)
            .where(AuditEventRecord.deployment_id == deployment_id)
            .order_by(AuditEventRecord.id.asc())
        )
        if event_type:
            query = query.where(AuditEventRecord.event_type == event_type)
        result = await self._db.execute(query.limit(limit).offset(offset))
        return [
            RecordedEvent(
                sequence=r.id,
                event=event_from_payload(r.event_type, r.payload),
                recorded_at=r.created_at,
            )
            for r in result.scalars().all()
        ]
