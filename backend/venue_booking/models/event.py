"""
Event model.

An event is created against a venue and carries its venue request inline:
the ``venue_request_*`` columns hold the request state the venue owner
decides on. ``status`` mirrors the decision once one is made.
``version`` enables optimistic locking for status transitions.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, Float, Text, DateTime, ForeignKey, JSON, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from venue_booking.db.base import Base, TimestampMixin


class EventStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VenueRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventCategory(str, Enum):
    CONFERENCE = "Conference"
    WORKSHOP = "Workshop"
    SEMINAR = "Seminar"
    PARTY = "Party"
    WEDDING = "Wedding"
    OTHER = "Other"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VenueRequest:
    """Read-only view over the venue request columns of an event."""

    def __init__(self, event: "Event"):
        self.status = event.venue_request_status
        self.message = event.venue_request_message
        self.response = event.venue_request_response
        self.requested_at = event.venue_request_requested_at
        self.responded_at = event.venue_request_responded_at


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(DateTime(timezone=True), nullable=False)
    event_time = Column(String(20), nullable=False)
    expected_attendees = Column(Integer, nullable=False)
    budget = Column(Float, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String(20), nullable=False)
    requirements = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=EventStatus.PENDING.value)

    # Venue request
    venue_request_status = Column(String(20), nullable=False, default=VenueRequestStatus.PENDING.value)
    venue_request_message = Column(Text, nullable=True)
    venue_request_response = Column(Text, nullable=True)
    venue_request_requested_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    venue_request_responded_at = Column(DateTime(timezone=True), nullable=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    organizer = relationship("User", lazy="selectin")
    venue = relationship("Venue", lazy="selectin")
    reviews = relationship(
        "Review",
        back_populates="event",
        lazy="selectin",
        order_by="Review.id",
    )

    __table_args__ = (
        CheckConstraint("expected_attendees >= 1", name="check_event_attendees_positive"),
        CheckConstraint("price >= 0", name="check_event_price_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed', 'cancelled')",
            name="check_event_status",
        ),
        CheckConstraint(
            "venue_request_status IN ('pending', 'approved', 'rejected')",
            name="check_venue_request_status",
        ),
        # Pending requests per venue, newest first
        Index("ix_events_venue_request", "venue_id", "venue_request_status", "venue_request_requested_at"),
    )

    @property
    def venue_request(self) -> VenueRequest:
        return VenueRequest(self)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, status={self.status})>"
