"""Custody Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - Addresses are normalized by normalize_address before reaching services
    - Amounts are non-negative and fit a signed 64-bit ledger column
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from custody.core.audit_events import RecordedEvent
from custody.core.domain_types import normalize_address
from custody.core.errors import InvalidAddressError
from custody.core.funds import MAX_BALANCE

MAX_BATCH = 500


def _normalize(v: str) -> str:
    try:
        return normalize_address(v)
    except InvalidAddressError as e:
        raise ValueError(e.message)


class WhitelistBatch(BaseModel):
    """Ordered batch of addresses for add/remove."""
    addresses: list[str] = Field(max_length=MAX_BATCH)

    @field_validator("addresses")
    @classmethod
    def normalize_addresses(cls, v: list[str]) -> list[str]:
        return [_normalize(a) for a in v]


class WhitelistChangeResponse(BaseModel):
    action: str
    addresses: list[str]
    whitelist_size: int


class WhitelistResponse(BaseModel):
    addresses: list[str]


class MembershipResponse(BaseModel):
    address: str
    whitelisted: bool


class DepositRequest(BaseModel):
    amount: int = Field(ge=0, le=MAX_BALANCE)


class DepositResponse(BaseModel):
    depositor: str
    amount: int
    balance: int


class TransferOutRequest(BaseModel):
    to: str
    amount: int = Field(ge=0, le=MAX_BALANCE)

    @field_validator("to")
    @classmethod
    def normalize_to(cls, v: str) -> str:
        return _normalize(v)


class BalanceResponse(BaseModel):
    balance: int


class DeploymentResponse(BaseModel):
    deployment_id: str
    admin: str
    key_strategy: str
    whitelist_size: int
    balance: int


class CreditRequest(BaseModel):
    amount: int = Field(ge=0, le=MAX_BALANCE)


class AccountResponse(BaseModel):
    address: str
    balance: int


class AuditEventResponse(BaseModel):
    sequence: int
    event_type: str
    payload: dict
    created_at: datetime

    @classmethod
    def from_recorded(cls, recorded: RecordedEvent) -> "AuditEventResponse":
        return cls(
            sequence=recorded.sequence,
            event_type=recorded.event.event_type.value,
            payload=recorded.event.to_payload(),
            created_at=recorded.recorded_at,
        )


class AuditEventListResponse(BaseModel):
    events: list[AuditEventResponse]
    pagination: dict[str, int]
