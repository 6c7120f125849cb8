"""
Pydantic schemas for event-related request/response validation.

``EventCreate`` is built from the multipart form of ``POST /events`` and
leaves every field optional: the booking validator reports all missing
required fields in one error instead of failing on the first one. Images
come in as uploads, never as client-supplied strings.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import AliasChoices, BaseModel, Field

from venue_booking.models.event import EventCategory, EventStatus, VenueRequestStatus
from venue_booking.schemas.review import ReviewResponse
from venue_booking.schemas.user import UserSummary
from venue_booking.schemas.venue import VenueSummary


class EventCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    venue_id: Optional[int] = Field(None, validation_alias=AliasChoices("venue_id", "venue"))
    event_date: Optional[datetime] = Field(None, validation_alias=AliasChoices("event_date", "date"))
    event_time: Optional[str] = Field(None, max_length=20, validation_alias=AliasChoices("event_time", "time"))
    expected_attendees: Optional[int] = Field(None, ge=1)
    budget: Optional[float] = Field(None, ge=0)
    category: Optional[EventCategory] = None
    price: Optional[float] = Field(None, ge=0)
    requirements: list[str] = Field(default_factory=list)
    message: Optional[str] = Field(None, max_length=2000)


class VenueRequestResponse(BaseModel):
    status: VenueRequestStatus
    message: Optional[str]
    response: Optional[str]
    requested_at: datetime
    responded_at: Optional[datetime]

    model_config = {"from_attributes": True}


class EventSummary(BaseModel):
    id: int
    title: str
    event_date: datetime
    event_time: str
    price: float
    status: EventStatus

    model_config = {"from_attributes": True}


class EventResponse(EventSummary):
    description: str
    organizer_id: int
    organizer: Optional[UserSummary]
    venue_id: int
    venue: Optional[VenueSummary]
    expected_attendees: int
    budget: float
    category: EventCategory
    requirements: list[str]
    images: list[str]
    venue_request: VenueRequestResponse
    reviews: list[ReviewResponse]
    created_at: datetime


class EventStatusUpdate(BaseModel):
    status: EventStatus


class VenueRequestDecision(BaseModel):
    action: Literal["approved", "rejected"]
    response: Optional[str] = Field(None, max_length=2000)


class VenueRequestDecisionResponse(BaseModel):
    success: bool = True
    event: EventResponse
