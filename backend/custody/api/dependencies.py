"""Request Dependencies: caller identity and service injection.

Invariants:
    - The caller is whatever X-Caller-Address the hosting gateway asserted, normalized
    - A missing header is a 400 validation error, never an anonymous call
"""

from fastapi import Header, Request

from custody.core.domain_types import Address, normalize_address
from custody.services.custody_service import CustodyService

CALLER_HEADER = "X-Caller-Address"


def get_caller(
    x_caller_address: str = Header(..., alias=CALLER_HEADER),
) -> Address:
    return normalize_address(x_caller_address)


def get_custody_service(request: Request) -> CustodyService:
    """Service created by the lifespan; overridden in tests."""
    return request.app.state.custody_service
