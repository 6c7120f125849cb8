"""
Venue request endpoints for venue owners.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.db.session import get_db
from venue_booking.models.user import User, UserRole
from venue_booking.schemas.event import EventResponse, VenueRequestDecision, VenueRequestDecisionResponse
from venue_booking.services.venue_request_service import decide_venue_request, list_pending_requests
from venue_booking.core.security import require_roles

router = APIRouter(tags=["Venue Requests"])


@router.get("/event/venue-requests", response_model=list[EventResponse])
async def pending_venue_requests(
    owner: User = Depends(require_roles(UserRole.VENUE_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Pending venue requests for the caller's venues, newest first."""
    return await list_pending_requests(db, owner)


@router.patch("/vevent/{event_id}/venue-request", response_model=VenueRequestDecisionResponse)
async def decide_venue_request_endpoint(
    event_id: int,
    decision: VenueRequestDecision,
    owner: User = Depends(require_roles(UserRole.VENUE_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a pending venue request. Decisions are final."""
    event = await decide_venue_request(db, event_id, owner, decision.action, decision.response)
    return VenueRequestDecisionResponse(event=EventResponse.model_validate(event))
