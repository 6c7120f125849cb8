from venue_booking.models.user import User, UserRole
from venue_booking.models.venue import Venue
from venue_booking.models.event import Event, EventCategory, EventStatus, VenueRequestStatus
from venue_booking.models.review import Review
from venue_booking.models.ticket import Ticket, TicketStatus

__all__ = [
    "User", "UserRole",
    "Venue",
    "Event", "EventCategory", "EventStatus", "VenueRequestStatus",
    "Review",
    "Ticket", "TicketStatus",
]
