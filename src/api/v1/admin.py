"""
API v1 admin routes.

Read-only admin view of the waitlist, protected by HTTP BASIC AUTH
with the configured admin credential pair.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_admin_account, get_admin_read_service
from src.api.models import ErrorResponse, WaitlistEntryResponse, WaitlistResponse
from src.domain.admin import AdminReadService
from src.domain.exceptions import NotConfigured, ReadFailed
from src.domain.models import Account

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/waitlist",
    response_model=WaitlistResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid admin credentials"},
        500: {"model": ErrorResponse, "description": "Waitlist query failed"},
        503: {"model": ErrorResponse, "description": "Waitlist store not configured"},
    },
    summary="List waitlist signups",
    description="Return every waitlist entry, most recent first. Not paginated.",
)
async def list_waitlist(
    admin: Account = Depends(get_admin_account),
    service: AdminReadService = Depends(get_admin_read_service),
) -> WaitlistResponse:
    try:
        entries = service.list_waitlist()
    except NotConfigured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Waitlist storage is not configured",
        ) from None
    except ReadFailed:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch waitlist data",
        ) from None

    return WaitlistResponse(
        total=len(entries),
        entries=[WaitlistEntryResponse.from_entry(entry) for entry in entries],
    )
