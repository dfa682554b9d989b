"""Audit Events: read-only, paginated audit trail filterable by event type."""

from fastapi import APIRouter, Depends, Query

from custody.api.dependencies import get_custody_service
from custody.core.domain_types import AuditEventType
from custody.schemas.custody import AuditEventListResponse, AuditEventResponse
from custody.services.custody_service import CustodyService

router = APIRouter(prefix="/api/v1/audit-events", tags=["audit"])


@router.get("", response_model=AuditEventListResponse)
async def list_audit_events(
    event_type: AuditEventType | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: CustodyService = Depends(get_custody_service),
):
    """List events in emission order."""
    events = await service.list_audit_events(
        event_type.value if event_type else None, limit, offset,
    )
    return AuditEventListResponse(
        events=[AuditEventResponse.from_recorded(e) for e in events],
        pagination={"limit": limit, "offset": offset},
    )
