"""
Venue service: creation with image upload, listings, availability.
"""

import json
from typing import Any, Optional

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.models.user import User, UserRole
from venue_booking.models.venue import Venue
from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.core.errors import Forbidden, NotFound, ValidationError
from venue_booking.core.logging import get_logger

logger = get_logger(__name__)

REQUIRED_VENUE_FIELDS = ("name", "address", "capacity", "price_per_day")


def parse_availability(value: Any) -> bool:
    """Form fields arrive as strings; anything but "true" means unavailable."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def parse_string_list(value: Optional[str], field: str) -> list[str]:
    """Accept a JSON list (``["wifi", "parking"]``) or a comma separated string."""
    if value is None or not value.strip():
        return []
    text = value.strip()
    if text.startswith("["):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            raise ValidationError(f"Invalid {field} format")
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValidationError(f"Invalid {field} format")
        return parsed
    return [item.strip() for item in text.split(",") if item.strip()]


async def create_venue(
    db: AsyncSession,
    owner: User,
    venue_data: dict[str, Any],
    uploads: list[UploadFile],
    storage: ImageStorage,
) -> Venue:
    """
    Validate form data, store images and create the venue.
    The venue is linked into the owner's venue list.
    """
    missing = [field for field in REQUIRED_VENUE_FIELDS if venue_data.get(field) in (None, "")]
    if missing:
        raise ValidationError(
            "Missing required fields",
            missing_fields=missing,
        )

    if venue_data["capacity"] <= 0:
        raise ValidationError("Capacity must be greater than zero", capacity=venue_data["capacity"])
    if venue_data["price_per_day"] < 0:
        raise ValidationError("Price per day must not be negative", price_per_day=venue_data["price_per_day"])

    amenities = parse_string_list(venue_data.get("amenities"), "amenities")
    images = await storage.save_all(uploads)

    venue = Venue(
        owner=owner,
        name=venue_data["name"],
        address=venue_data["address"],
        capacity=venue_data["capacity"],
        price_per_day=venue_data["price_per_day"],
        description=venue_data.get("description"),
        amenities=amenities,
        availability=parse_availability(venue_data.get("availability")),
        images=images,
        rating=0.0,
    )
    db.add(venue)
    try:
        await db.flush()
    except Exception:
        await storage.discard(images)
        raise

    logger.info("venue_created", venue_id=venue.id, owner_id=owner.id, images=len(images))
    return await get_venue(db, venue.id)


async def get_venue(db: AsyncSession, venue_id: int) -> Venue:
    """Get a single venue by ID with owner and reviews freshly loaded."""
    result = await db.execute(
        select(Venue)
        .where(Venue.id == venue_id)
        .execution_options(populate_existing=True)
    )
    venue = result.scalar_one_or_none()

    if not venue:
        raise NotFound(f"Venue {venue_id} not found")
    return venue


async def list_venues(db: AsyncSession, user: Optional[User] = None) -> list[Venue]:
    """Venue owners see only their own venues; everyone else sees all."""
    query = select(Venue)
    if user is not None and user.role == UserRole.VENUE_OWNER.value:
        query = query.where(Venue.owner_id == user.id)

    result = await db.execute(
        query.order_by(Venue.created_at.desc(), Venue.id.desc()).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def set_availability(db: AsyncSession, venue_id: int, availability: bool, owner: User) -> Venue:
    venue = await get_venue(db, venue_id)

    if not owner.owns_venue(venue.id):
        logger.warning("venue_availability_forbidden", venue_id=venue_id, user_id=owner.id)
        raise Forbidden("Not authorized")

    venue.availability = availability
    venue.version = venue.version + 1
    await db.flush()

    logger.info("venue_availability_updated", venue_id=venue.id, availability=availability)
    return await get_venue(db, venue.id)
