"""Deployment: bootstrap and status of the configured custody deployment."""

from fastapi import APIRouter, Depends, status

from custody.api.dependencies import get_caller, get_custody_service
from custody.core.domain_types import Address
from custody.schemas.custody import DeploymentResponse
from custody.services.custody_service import CustodyService

router = APIRouter(prefix="/api/v1/deployment", tags=["deployment"])


@router.post(
    "/bootstrap", response_model=DeploymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def bootstrap_deployment(
    caller: Address = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
):
    """Initialize an empty registry + vault. Deployer must be the configured admin."""
    state = await service.bootstrap(caller)
    return DeploymentResponse(
        deployment_id=state.deployment_id,
        admin=state.admin,
        key_strategy=state.key_strategy.value,
        whitelist_size=state.whitelist_size,
        balance=0,
    )


@router.get("", response_model=DeploymentResponse)
async def get_deployment(service: CustodyService = Depends(get_custody_service)):
    state = await service.get_state()
    balance = await service.get_balance()
    return DeploymentResponse(
        deployment_id=state.deployment_id,
        admin=state.admin,
        key_strategy=state.key_strategy.value,
        whitelist_size=state.whitelist_size,
        balance=balance,
    )
