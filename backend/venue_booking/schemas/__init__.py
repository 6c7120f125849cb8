from venue_booking.schemas.user import UserCreate, UserLogin, UserResponse, UserSummary, AuthResponse
from venue_booking.schemas.review import ReviewCreate, ReviewResponse
from venue_booking.schemas.venue import VenueResponse, VenueSummary, AvailabilityUpdate
from venue_booking.schemas.event import (
    EventCreate, EventResponse, EventSummary, EventStatusUpdate,
    VenueRequestDecision, VenueRequestDecisionResponse, VenueRequestResponse,
)
from venue_booking.schemas.ticket import TicketCreate, TicketResponse, TicketWithEvent

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "UserSummary", "AuthResponse",
    "ReviewCreate", "ReviewResponse",
    "VenueResponse", "VenueSummary", "AvailabilityUpdate",
    "EventCreate", "EventResponse", "EventSummary", "EventStatusUpdate",
    "VenueRequestDecision", "VenueRequestDecisionResponse", "VenueRequestResponse",
    "TicketCreate", "TicketResponse", "TicketWithEvent",
]
