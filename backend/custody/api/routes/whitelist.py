"""Whitelist: admin batch mutations and public membership reads.

Invariants:
    - Batches are forwarded in request order; the service applies them all-or-nothing
    - Path addresses are normalized before lookup
"""

from fastapi import APIRouter, Depends

from custody.api.dependencies import get_caller, get_custody_service
from custody.core.domain_types import Address, normalize_address
from custody.schemas.custody import (
    MembershipResponse, WhitelistBatch, WhitelistChangeResponse, WhitelistResponse,
)
from custody.services.custody_service import CustodyService

router = APIRouter(prefix="/api/v1/whitelist", tags=["whitelist"])


@router.post("/add", response_model=WhitelistChangeResponse)
async def add_to_whitelist(
    body: WhitelistBatch,
    caller: Address = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
):
    update = await service.add_to_whitelist(
        caller, [Address(a) for a in body.addresses],
    )
    return WhitelistChangeResponse(
        action=update.event.action.value,
        addresses=list(update.event.addresses),
        whitelist_size=update.whitelist_size,
    )


@router.post("/remove", response_model=WhitelistChangeResponse)
async def remove_from_whitelist(
    body: WhitelistBatch,
    caller: Address = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
):
    update = await service.remove_from_whitelist(
        caller, [Address(a) for a in body.addresses],
    )
    return WhitelistChangeResponse(
        action=update.event.action.value,
        addresses=list(update.event.addresses),
        whitelist_size=update.whitelist_size,
    )


@router.get("", response_model=WhitelistResponse)
async def list_whitelisted(service: CustodyService = Depends(get_custody_service)):
    return WhitelistResponse(addresses=await service.list_whitelisted())


@router.get("/{address}", response_model=MembershipResponse)
async def is_whitelisted(
    address: str, service: CustodyService = Depends(get_custody_service),
):
    normalized = normalize_address(address)
    return MembershipResponse(
        address=normalized,
        whitelisted=await service.is_whitelisted(normalized),
    )
