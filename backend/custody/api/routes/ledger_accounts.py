"""Ledger Accounts: balance reads and the dev faucet for the asset ledger.

Invariants:
    - Faucet credits are refused unless ledger_faucet_enabled is set
"""

from fastapi import APIRouter, Depends

from custody.api.dependencies import get_custody_service
from custody.core.domain_types import normalize_address
from custody.schemas.custody import AccountResponse, CreditRequest
from custody.services.custody_service import CustodyService

router = APIRouter(prefix="/api/v1/ledger/accounts", tags=["ledger"])


@router.get("/{address}", response_model=AccountResponse)
async def get_account(
    address: str, service: CustodyService = Depends(get_custody_service),
):
    normalized = normalize_address(address)
    return AccountResponse(
        address=normalized, balance=await service.account_balance(normalized),
    )


@router.post("/{address}/credit", response_model=AccountResponse)
async def credit_account(
    address: str,
    body: CreditRequest,
    service: CustodyService = Depends(get_custody_service),
):
    normalized = normalize_address(address)
    balance = await service.credit_account(normalized, body.amount)
    return AccountResponse(address=normalized, balance=balance)
