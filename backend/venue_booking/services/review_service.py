"""
Review aggregator.

Reviews are appended to a venue or an event. For venues the derived
``rating`` is recomputed from all reviews right after the append and
written with a conditional UPDATE guarded by ``version``: if a concurrent
review changed the venue in between, the update matches zero rows and
the request fails with 409, rolling back its own review as well. Events
keep their reviews without an aggregate.
"""

from typing import Iterable

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.models.event import Event
from venue_booking.models.review import Review
from venue_booking.models.user import User
from venue_booking.models.venue import Venue
from venue_booking.schemas.review import ReviewCreate
from venue_booking.services.event_service import get_event
from venue_booking.services.venue_service import get_venue
from venue_booking.core.errors import Conflict
from venue_booking.core.logging import get_logger
from venue_booking.core.metrics import record_review

logger = get_logger(__name__)


def average_rating(ratings: Iterable[int]) -> float:
    """Arithmetic mean of the ratings; 0.0 when there are none."""
    values = list(ratings)
    if not values:
        return 0.0
    return sum(values) / len(values)


async def add_venue_review(db: AsyncSession, venue_id: int, user: User, review_data: ReviewCreate) -> Venue:
    venue = await get_venue(db, venue_id)
    current_version = venue.version

    review = Review(venue=venue, user=user, rating=review_data.rating, comment=review_data.comment)
    db.add(review)
    await db.flush()

    rating = average_rating(r.rating for r in venue.reviews)

    result = await db.execute(
        update(Venue)
        .where(Venue.id == venue.id, Venue.version == current_version)
        .values(rating=rating, version=Venue.version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info("venue_review_conflict", venue_id=venue.id, version=current_version)
        raise Conflict("Venue was reviewed concurrently, please retry")

    record_review("venue")
    logger.info(
        "venue_review_added",
        venue_id=venue.id,
        user_id=user.id,
        rating=review.rating,
        venue_rating=rating,
        reviews=len(venue.reviews),
    )
    return await get_venue(db, venue.id)


async def add_event_review(db: AsyncSession, event_id: int, user: User, review_data: ReviewCreate) -> Event:
    event = await get_event(db, event_id)

    review = Review(event=event, user=user, rating=review_data.rating, comment=review_data.comment)
    db.add(review)
    await db.flush()

    record_review("event")
    logger.info("event_review_added", event_id=event.id, user_id=user.id, rating=review.rating)
    return await get_event(db, event.id)
