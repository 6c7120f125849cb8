"""
Event service: creation through the booking validator, role-scoped
listings and direct status updates by the venue owner.
"""

from typing import Optional, Sequence

from fastapi import UploadFile
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.models.event import Event, EventStatus, VenueRequestStatus
from venue_booking.models.user import User, UserRole
from venue_booking.schemas.event import EventCreate
from venue_booking.services.booking_validator import validate_booking
from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.services.venue_service import parse_string_list
from venue_booking.core.errors import Forbidden, NotFound, ValidationError
from venue_booking.core.logging import get_logger

logger = get_logger(__name__)


def parse_event_form(form: dict[str, Optional[str]]) -> EventCreate:
    """Build ``EventCreate`` from form fields. Blank fields count as absent."""
    values = {key: value for key, value in form.items() if value is not None and value.strip()}
    if "requirements" in values:
        values["requirements"] = parse_string_list(values["requirements"], "requirements")

    try:
        return EventCreate.model_validate(values)
    except SchemaValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise ValidationError.for_fields(fields) from exc


async def create_event(
    db: AsyncSession,
    event_data: EventCreate,
    organizer: User,
    uploads: Sequence[UploadFile],
    storage: ImageStorage,
) -> Event:
    """
    Create an event in ``pending`` state with a pending venue request.
    Images are stored only once the booking rules have passed.
    """
    venue = await validate_booking(db, event_data)
    images = await storage.save_all(uploads)

    event = Event(
        organizer_id=organizer.id,
        venue=venue,
        title=event_data.title,
        description=event_data.description,
        event_date=event_data.event_date,
        event_time=event_data.event_time,
        expected_attendees=event_data.expected_attendees,
        budget=event_data.budget,
        price=event_data.price,
        category=event_data.category.value,
        requirements=event_data.requirements,
        images=images,
        status=EventStatus.PENDING.value,
        venue_request_status=VenueRequestStatus.PENDING.value,
        venue_request_message=event_data.message,
    )
    db.add(event)
    try:
        await db.flush()
    except Exception:
        await storage.discard(images)
        raise

    logger.info(
        "event_created",
        event_id=event.id,
        venue_id=venue.id,
        organizer_id=organizer.id,
        attendees=event.expected_attendees,
        images=len(images),
    )
    return await get_event(db, event.id)


async def get_event(db: AsyncSession, event_id: int) -> Event:
    """Get a single event by ID with its relationships freshly loaded."""
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id)
        .execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()

    if not event:
        raise NotFound(f"Event {event_id} not found")
    return event


async def _events_for_venues(db: AsyncSession, venue_ids: list[int]) -> list[Event]:
    if not venue_ids:
        return []
    result = await db.execute(
        select(Event)
        .where(Event.venue_id.in_(venue_ids))
        .order_by(Event.created_at.desc(), Event.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def list_events(db: AsyncSession, user: User) -> list[Event]:
    """
    Events visible to ``user``: organizers see their own, venue owners see
    those booked at their venues, everyone else sees all events.
    """
    if user.role == UserRole.ORGANIZER.value:
        query = select(Event).where(Event.organizer_id == user.id)
    elif user.role == UserRole.VENUE_OWNER.value:
        return await _events_for_venues(db, [venue.id for venue in user.venues])
    else:
        query = select(Event)

    result = await db.execute(
        query.order_by(Event.created_at.desc(), Event.id.desc()).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def list_my_events(db: AsyncSession, user: User) -> list[Event]:
    """Like ``list_events`` but plain users have no events of their own."""
    if user.role not in (UserRole.ORGANIZER.value, UserRole.VENUE_OWNER.value):
        raise Forbidden("Unauthorized role")
    return await list_events(db, user)


async def update_event_status(db: AsyncSession, event_id: int, status: EventStatus, owner: User) -> Event:
    """Set ``Event.status`` directly. Only the owner of the event's venue may do this."""
    event = await get_event(db, event_id)

    if not owner.owns_venue(event.venue_id):
        logger.warning("event_status_forbidden", event_id=event_id, user_id=owner.id)
        raise Forbidden("Not authorized")

    previous = event.status
    event.status = status.value
    event.version = event.version + 1
    await db.flush()

    logger.info("event_status_updated", event_id=event.id, previous=previous, status=event.status)
    return await get_event(db, event.id)
