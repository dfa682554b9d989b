"""Custody Service: runs each public operation as one atomic call.

Invariants:
    - One asyncio.Lock per service (= per deployment) held for the whole call
    - Mutating calls lock the deployment row (SELECT ... FOR UPDATE) before
      reading anything, so workers in other processes wait for this commit
    - Each call: load state + touched balances, run one core operation,
      persist state/balances/events, commit; any exception -> nothing committed
    - Reads also take the lock, so they only observe committed state
    - Every CustodyError gets deployment_id/operation/caller attached before it propagates

Design Decisions:
    - asyncio.Lock orders calls inside the process; the row lock orders them
      across processes sharing one database
    - Mutations return what the caller needs about the post-call state
      (whitelist size, vault balance) from the same transaction
    - Only async DB IO inside the critical section; the core itself never blocks
    - Service instance created in the FastAPI lifespan and injected via Depends
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncContextManager, AsyncIterator, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from custody.config import Settings
from custody.core.audit_events import DepositRecorded, RecordedEvent, WhitelistChange
from custody.core.custody_context import CustodyContext
from custody.core.custody_state import CustodyState
from custody.core.deployment_keys import (
    DeploymentKeyStrategy, bootstrap, build_key_strategy,
)
from custody.core.domain_types import Address, Amount, DeploymentId
from custody.core.errors import (
    AlreadyInitializedError, CustodyError, FaucetDisabledError, NotInitializedError,
)
from custody.core.funds import BalanceBook
from custody.core.repository_protocols import CustodyRepository
from custody.services.custody_repository import SqlCustodyRepository

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]
T = TypeVar("T")


@dataclass(frozen=True)
class WhitelistUpdate:
    event: WhitelistChange
    whitelist_size: int


@dataclass(frozen=True)
class DepositReceipt:
    event: DepositRecorded
    balance: Amount


class CustodyService:
    """Shell around CustodyContext for a single deployment."""

    def __init__(
        self,
        session_scope: SessionScope,
        admin: Address,
        strategy: DeploymentKeyStrategy,
        faucet_enabled: bool = False,
    ):
        self._session_scope = session_scope
        self._strategy = strategy
        self._faucet_enabled = faucet_enabled
        self._lock = asyncio.Lock()
        self.admin = admin
        self.deployment_id: DeploymentId = strategy.derive(admin)

    @classmethod
    def from_settings(
        cls, settings: Settings, session_scope: SessionScope,
    ) -> "CustodyService":
        strategy = build_key_strategy(
            settings.custody_key_strategy, settings.custody_resource_seed,
        )
        return cls(
            session_scope,
            Address(settings.custody_admin_address),
            strategy,
            faucet_enabled=settings.ledger_faucet_enabled,
        )

    # --- Operations ----------------------------------------------------------

    async def bootstrap(self, deployer: Address) -> CustodyState:
        async with self._call("bootstrap", deployer) as db:
            state = bootstrap(deployer, self.admin, self._strategy)
            repo = SqlCustodyRepository(db)
            if await repo.get_state(self.deployment_id) is not None:
                raise AlreadyInitializedError(self.deployment_id)
            await repo.create_state(state)
            await db.commit()
        logger.info(
            "Custody deployment bootstrapped",
            extra={"deployment_id": self.deployment_id, "caller": deployer},
        )
        return state

    async def add_to_whitelist(
        self, caller: Address, addresses: list[Address],
    ) -> WhitelistUpdate:
        def apply(ctx: CustodyContext) -> WhitelistUpdate:
            event = ctx.registry.add_to_whitelist(caller, addresses)
            return WhitelistUpdate(event, ctx.state.whitelist_size)

        update = await self._mutate("add_to_whitelist", caller, [], apply)
        logger.info(
            "Whitelist updated",
            extra={
                "deployment_id": self.deployment_id, "operation": "add_to_whitelist",
                "address_count": len(addresses),
                "event_type": update.event.event_type.value,
            },
        )
        return update

    async def remove_from_whitelist(
        self, caller: Address, addresses: list[Address],
    ) -> WhitelistUpdate:
        def apply(ctx: CustodyContext) -> WhitelistUpdate:
            event = ctx.registry.remove_from_whitelist(caller, addresses)
            return WhitelistUpdate(event, ctx.state.whitelist_size)

        update = await self._mutate("remove_from_whitelist", caller, [], apply)
        logger.info(
            "Whitelist updated",
            extra={
                "deployment_id": self.deployment_id, "operation": "remove_from_whitelist",
                "address_count": len(addresses),
                "event_type": update.event.event_type.value,
            },
        )
        return update

    async def deposit(self, caller: Address, amount: int) -> DepositReceipt:
        def apply(ctx: CustodyContext) -> DepositReceipt:
            event = ctx.vault.deposit(caller, amount)
            return DepositReceipt(event, ctx.vault.get_balance())

        receipt = await self._mutate("deposit", caller, [caller], apply)
        logger.info(
            "Deposit recorded",
            extra={
                "deployment_id": self.deployment_id, "caller": caller,
                "amount": receipt.event.amount,
                "event_type": receipt.event.event_type.value,
            },
        )
        return receipt

    async def transfer_out(
        self, caller: Address, to: Address, amount: int,
    ) -> Amount:
        balance = await self._mutate(
            "transfer_out", caller, [to],
            lambda ctx: ctx.vault.transfer_out(caller, to, amount),
        )
        logger.info(
            "Transfer out applied",
            extra={
                "deployment_id": self.deployment_id, "caller": caller,
                "amount": amount, "operation": "transfer_out",
            },
        )
        return balance

    async def is_whitelisted(self, address: Address) -> bool:
        return await self._read(
            "is_whitelisted", [], lambda ctx: ctx.registry.is_whitelisted(address),
        )

    async def list_whitelisted(self) -> list[Address]:
        return await self._read(
            "list_whitelisted", [], lambda ctx: ctx.registry.list_whitelisted(),
        )

    async def get_balance(self) -> Amount:
        return await self._read(
            "get_balance", [], lambda ctx: ctx.vault.get_balance(),
        )

    async def get_state(self) -> CustodyState:
        return await self._read("get_state", [], lambda ctx: ctx.state)

    async def list_audit_events(
        self, event_type: str | None = None, limit: int = 50, offset: int = 0,
    ) -> list[RecordedEvent]:
        async with self._call("list_audit_events", None) as db:
            repo = SqlCustodyRepository(db)
            await self._load_state(repo)
            return await repo.list_events(
                self.deployment_id, event_type, limit, offset,
            )

    # --- Ledger access (external asset ledger stand-in) ---------------------

    async def account_balance(self, address: Address) -> int:
        async with self._call("account_balance", None) as db:
            balances = await SqlCustodyRepository(db).load_balances([address])
            return balances.get(address, 0)

    async def credit_account(self, address: Address, amount: int) -> int:
        """Faucet: mint units into a ledger account. Disabled unless configured."""
        if not self._faucet_enabled:
            raise FaucetDisabledError()
        async with self._call("credit_account", None) as db:
            repo = SqlCustodyRepository(db)
            ledger = BalanceBook(
                await repo.load_balances([address], for_update=True),
            )
            ledger.mint(address, amount)
            await repo.save_balances(ledger.dirty_balances())
            await db.commit()
        logger.info(
            "Ledger account credited",
            extra={"operation": "credit_account", "caller": address, "amount": amount},
        )
        return ledger.balance_of(address)

    # --- Call plumbing -------------------------------------------------------

    @asynccontextmanager
    async def _call(
        self, operation: str, caller: Address | None,
    ) -> AsyncIterator[AsyncSession]:
        """Serialize the call, open its transaction, annotate domain errors."""
        async with self._lock:
            try:
                async with self._session_scope() as db:
                    yield db
            except CustodyError as exc:
                exc.context.deployment_id = self.deployment_id
                exc.context.operation = operation
                exc.context.caller = caller
                logger.warning(
                    f"{operation} rejected: {exc.message}",
                    extra={
                        "deployment_id": self.deployment_id, "operation": operation,
                        "caller": caller, "error_code": exc.code,
                    },
                )
                raise

    async def _load_state(
        self, repo: CustodyRepository, for_update: bool = False,
    ) -> CustodyState:
        state = await repo.get_state(self.deployment_id, for_update)
        if state is None:
            raise NotInitializedError(self.deployment_id)
        return state

    async def _context(
        self, repo: CustodyRepository, accounts: list[Address],
        for_update: bool = False,
    ) -> CustodyContext:
        state = await self._load_state(repo, for_update)
        balances = await repo.load_balances(
            [state.vault_account, *accounts], for_update,
        )
        return CustodyContext(state=state, ledger=BalanceBook(balances))

    async def _mutate(
        self, operation: str, caller: Address, accounts: list[Address],
        apply: Callable[[CustodyContext], T],
    ) -> T:
        async with self._call(operation, caller) as db:
            repo = SqlCustodyRepository(db)
            ctx = await self._context(repo, accounts, for_update=True)
            result = apply(ctx)
            await repo.save_state(ctx.state)
            await repo.save_balances(ctx.ledger.dirty_balances())
            await repo.append_events(self.deployment_id, ctx.audit_log.events)
            await db.commit()
            return result

    async def _read(
        self, operation: str, accounts: list[Address],
        apply: Callable[[CustodyContext], T],
    ) -> T:
        async with self._call(operation, None) as db:
            ctx = await self._context(SqlCustodyRepository(db), accounts)
            return apply(ctx)
