"""
Event endpoints. Creation goes through the booking validator.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.db.session import get_db
from venue_booking.models.user import User, UserRole
from venue_booking.schemas.event import EventResponse, EventStatusUpdate
from venue_booking.schemas.review import ReviewCreate
from venue_booking.services.event_service import (
    create_event, get_event, list_events, list_my_events, parse_event_form, update_event_status,
)
from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.services.storage_factory import get_image_storage
from venue_booking.services.review_service import add_event_review
from venue_booking.core.security import get_current_user, require_roles

router = APIRouter(tags=["Events"])


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    venue_id: Optional[str] = Form(None),
    venue: Optional[str] = Form(None),
    event_date: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    event_time: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    expected_attendees: Optional[str] = Form(None),
    budget: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    requirements: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    organizer: User = Depends(require_roles(UserRole.ORGANIZER)),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    """
    Book a venue for a new event from a multipart form with up to five images.
    ``venue``, ``date`` and ``time`` are accepted as short names.

    Rejected when fields are missing, the venue is unknown or unavailable,
    attendees exceed capacity, or the budget does not cover the venue cost.
    """
    event_data = parse_event_form({
        "title": title,
        "description": description,
        "venue_id": venue_id if venue_id is not None else venue,
        "event_date": event_date if event_date is not None else date,
        "event_time": event_time if event_time is not None else time,
        "expected_attendees": expected_attendees,
        "budget": budget,
        "category": category,
        "price": price,
        "requirements": requirements,
        "message": message,
    })
    return await create_event(db, event_data, organizer, images or [], storage)


@router.get("/events", response_model=list[EventResponse])
async def list_events_endpoint(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Events scoped to the caller's role."""
    return await list_events(db, user)


@router.get("/my-events", response_model=list[EventResponse])
async def my_events(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Organizer's own events, or events at the venue owner's venues."""
    return await list_my_events(db, user)


@router.get("/events/{event_id}", response_model=EventResponse)
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    return await get_event(db, event_id)


@router.put("/events/{event_id}/status", response_model=EventResponse)
async def update_event_status_endpoint(
    event_id: int,
    payload: EventStatusUpdate,
    owner: User = Depends(require_roles(UserRole.VENUE_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Set the event status directly. Only the venue's owner may do this."""
    return await update_event_status(db, event_id, payload.status, owner)


@router.post("/events/{event_id}/reviews", response_model=EventResponse)
async def review_event(
    event_id: int,
    review_data: ReviewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await add_event_review(db, event_id, user, review_data)
