"""Vault: deposits from whitelisted callers, transfers out by the admin."""

from fastapi import APIRouter, Depends

from custody.api.dependencies import get_caller, get_custody_service
from custody.core.domain_types import Address
from custody.schemas.custody import (
    BalanceResponse, DepositRequest, DepositResponse, TransferOutRequest,
)
from custody.services.custody_service import CustodyService

router = APIRouter(prefix="/api/v1/vault", tags=["vault"])


@router.post("/deposit", response_model=DepositResponse)
async def deposit(
    body: DepositRequest,
    caller: Address = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
):
    receipt = await service.deposit(caller, body.amount)
    return DepositResponse(
        depositor=receipt.event.depositor,
        amount=receipt.event.amount,
        balance=receipt.balance,
    )


@router.post("/transfer-out", response_model=BalanceResponse)
async def transfer_out(
    body: TransferOutRequest,
    caller: Address = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
):
    balance = await service.transfer_out(caller, Address(body.to), body.amount)
    return BalanceResponse(balance=balance)


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(service: CustodyService = Depends(get_custody_service)):
    return BalanceResponse(balance=await service.get_balance())
