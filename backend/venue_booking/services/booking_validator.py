"""
Booking validator: the rules that gate event creation.

RULES
=====

  1. Required fields: title, description, venue, date, time, expected
     attendees, budget, category and price must all be present.
  2. The target venue must exist.
  3. The venue must be marked available.
  4. Expected attendees must not exceed venue capacity.
  5. Budget must cover price_per_day * duration (duration is one day).

``check_booking_rules`` holds rules 3-5 as a pure function. It is the only
copy of those rules: ``validate_booking`` calls it before the event is
built, and the ``before_flush`` hook below calls it again for every new
Event the session is about to insert, so an Event written through any
other path is held to the same rules.
"""

from typing import Any, Mapping

from sqlalchemy import event as sa_event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from venue_booking.core.errors import (
    AppError,
    CapacityExceeded,
    InsufficientBudget,
    NotFound,
    ValidationError,
    VenueUnavailable,
)
from venue_booking.core.logging import get_logger
from venue_booking.core.metrics import record_booking_decision
from venue_booking.models.event import Event
from venue_booking.models.venue import Venue
from venue_booking.schemas.event import EventCreate

logger = get_logger(__name__)

EVENT_DURATION_DAYS = 1

REQUIRED_EVENT_FIELDS = (
    "title",
    "description",
    "venue_id",
    "event_date",
    "event_time",
    "expected_attendees",
    "budget",
    "category",
    "price",
)


def _fmt(value: float) -> str:
    """Render 400.0 as "400" and 12.5 as "12.5"."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


def missing_fields(data: Mapping[str, Any]) -> list[str]:
    return [
        field for field in REQUIRED_EVENT_FIELDS
        if data.get(field) is None or (isinstance(data.get(field), str) and not data[field].strip())
    ]


def check_booking_rules(
    expected_attendees: int,
    budget: float,
    venue: Venue,
    duration_days: int = EVENT_DURATION_DAYS,
) -> None:
    """Raise if the venue cannot host the event. Pure, no I/O."""
    if not venue.availability:
        raise VenueUnavailable(venue_id=venue.id)

    if expected_attendees > venue.capacity:
        raise CapacityExceeded(
            f"Expected attendees ({_fmt(expected_attendees)}) exceed venue capacity ({_fmt(venue.capacity)})",
            expected_attendees=expected_attendees,
            capacity=venue.capacity,
        )

    venue_cost = venue.price_per_day * duration_days
    if budget < venue_cost:
        raise InsufficientBudget(
            f"Budget ({_fmt(budget)}) is insufficient for venue cost ({_fmt(venue_cost)})",
            budget=budget,
            venue_cost=venue_cost,
        )


async def validate_booking(db: AsyncSession, event_data: EventCreate) -> Venue:
    """
    Run every booking rule against the request and return the target venue.
    Nothing is written.
    """
    try:
        missing = missing_fields(event_data.model_dump())
        if missing:
            raise ValidationError(
                f"Please fill in the following fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        venue = await db.get(Venue, event_data.venue_id)
        if venue is None:
            raise NotFound("Venue not found", venue_id=event_data.venue_id)

        check_booking_rules(event_data.expected_attendees, event_data.budget, venue)
    except AppError as exc:
        record_booking_decision(exc.code.value)
        logger.warning(
            "booking_rejected",
            reason=exc.code.value,
            venue_id=event_data.venue_id,
            detail=exc.message,
        )
        raise

    record_booking_decision("accepted")
    return venue


@sa_event.listens_for(Session, "before_flush")
def _check_new_events(session: Session, flush_context, instances) -> None:
    for obj in list(session.new):
        if not isinstance(obj, Event):
            continue
        venue = obj.venue
        if venue is None and obj.venue_id is not None:
            venue = session.get(Venue, obj.venue_id)
        if venue is None:
            raise NotFound("Venue not found", venue_id=obj.venue_id)
        check_booking_rules(obj.expected_attendees, obj.budget, venue)
