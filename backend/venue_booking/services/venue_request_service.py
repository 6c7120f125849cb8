"""
Venue request workflow.

STATE MACHINE
=============

    pending --approve--> approved   (terminal)
    pending --reject---> rejected   (terminal)

Only the owner of the event's venue may decide. A decision sets the
request status, the owner's response text and ``responded_at``, and
mirrors the outcome onto ``Event.status``.

The write is a conditional UPDATE on ``(id, version, venue_request_status)``.
If another request decided the same event in between, zero rows match
and the caller gets a 409 instead of silently overwriting the first
decision. Nothing is retried.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.models.event import Event, VenueRequestStatus
from venue_booking.models.user import User, UserRole
from venue_booking.services.event_service import get_event
from venue_booking.core.errors import Conflict, Forbidden, InvalidTransition, NotFound
from venue_booking.core.logging import get_logger
from venue_booking.core.metrics import record_venue_request_transition

logger = get_logger(__name__)

VENUE_REQUEST_TRANSITIONS: dict[str, frozenset[str]] = {
    VenueRequestStatus.PENDING.value: frozenset(
        {VenueRequestStatus.APPROVED.value, VenueRequestStatus.REJECTED.value}
    ),
    VenueRequestStatus.APPROVED.value: frozenset(),
    VenueRequestStatus.REJECTED.value: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in VENUE_REQUEST_TRANSITIONS.get(current, frozenset())


def ensure_can_decide(actor: User, event: Event) -> None:
    if actor.role != UserRole.VENUE_OWNER.value or not actor.owns_venue(event.venue_id):
        raise Forbidden("Unauthorized")


async def decide_venue_request(
    db: AsyncSession,
    event_id: int,
    actor: User,
    action: str,
    response: Optional[str] = None,
) -> Event:
    """Approve or reject the venue request of an event."""
    event = await get_event(db, event_id)

    try:
        ensure_can_decide(actor, event)
    except Forbidden:
        record_venue_request_transition(action, "forbidden")
        logger.warning("venue_request_forbidden", event_id=event_id, user_id=actor.id)
        raise

    current = event.venue_request_status
    if not can_transition(current, action):
        record_venue_request_transition(action, "invalid")
        raise InvalidTransition(
            f"Venue request is already {current}",
            current=current,
            requested=action,
        )

    result = await db.execute(
        update(Event)
        .where(
            Event.id == event.id,
            Event.version == event.version,
            Event.venue_request_status == current,
        )
        .values(
            venue_request_status=action,
            venue_request_response=response,
            venue_request_responded_at=datetime.now(timezone.utc),
            status=action,
            version=Event.version + 1,
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        record_venue_request_transition(action, "conflict")
        logger.info("venue_request_conflict", event_id=event.id, version=event.version)
        raise Conflict("Venue request was decided concurrently")

    record_venue_request_transition(action, "applied")
    logger.info(
        "venue_request_decided",
        event_id=event.id,
        venue_id=event.venue_id,
        owner_id=actor.id,
        action=action,
    )
    return await get_event(db, event.id)


async def list_pending_requests(db: AsyncSession, owner: User) -> list[Event]:
    """Pending venue requests for the owner's venues, newest request first."""
    venue_ids = [venue.id for venue in owner.venues]
    if not venue_ids:
        raise NotFound("No venues found for this user")

    result = await db.execute(
        select(Event)
        .where(
            Event.venue_id.in_(venue_ids),
            Event.venue_request_status == VenueRequestStatus.PENDING.value,
        )
        .order_by(Event.venue_request_requested_at.desc(), Event.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
