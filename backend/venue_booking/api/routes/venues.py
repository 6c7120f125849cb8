"""
Venue endpoints: creation with image upload, listings, availability and
reviews. The public listing is cached in Redis.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.db.session import get_db
from venue_booking.models.user import User, UserRole
from venue_booking.schemas.review import ReviewCreate
from venue_booking.schemas.venue import AvailabilityUpdate, VenueResponse
from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.services.storage_factory import get_image_storage
from venue_booking.services.venue_service import create_venue, get_venue, list_venues, set_availability
from venue_booking.services.review_service import add_venue_review
from venue_booking.services.cache_service import get_cached_venues, set_cached_venues, invalidate_venue_cache
from venue_booking.core.security import get_current_user, get_optional_user, require_roles
from venue_booking.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Venues"])


async def _commit_and_invalidate(db: AsyncSession) -> None:
    # Cleared only once the writes are visible to other sessions
    await db.commit()
    await invalidate_venue_cache()


@router.post("/venues", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
async def create_venue_endpoint(
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    capacity: Optional[int] = Form(None),
    price_per_day: Optional[float] = Form(None),
    description: Optional[str] = Form(None),
    amenities: Optional[str] = Form(None),
    availability: Optional[str] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    owner: User = Depends(require_roles(UserRole.VENUE_OWNER)),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    """Create a venue from a multipart form with up to five images."""
    venue_data = {
        "name": name,
        "address": address,
        "capacity": capacity,
        "price_per_day": price_per_day,
        "description": description,
        "amenities": amenities,
        "availability": availability,
    }
    venue = await create_venue(db, owner, venue_data, images or [], storage)
    await _commit_and_invalidate(db)
    return venue


@router.get("/venues", response_model=list[VenueResponse])
async def list_venues_endpoint(
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List venues. Venue owners only see their own venues.
    The unscoped listing is cached in Redis for 5 minutes.
    """
    scoped = user is not None and user.role == UserRole.VENUE_OWNER.value

    if not scoped:
        cached = await get_cached_venues()
        if cached is not None:
            logger.info("venues_list_cache_hit", count=len(cached))
            return cached

    venues = await list_venues(db, user)
    if scoped:
        return venues

    response_data = [VenueResponse.model_validate(v).model_dump(mode="json") for v in venues]
    await set_cached_venues(response_data)
    return response_data


@router.get("/my-venues", response_model=list[VenueResponse])
async def my_venues(
    owner: User = Depends(require_roles(UserRole.VENUE_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Venues owned by the caller, newest first."""
    return await list_venues(db, owner)


@router.get("/venues/{venue_id}", response_model=VenueResponse)
async def get_venue_endpoint(venue_id: int, db: AsyncSession = Depends(get_db)):
    """Venue detail with owner and reviews."""
    return await get_venue(db, venue_id)


@router.put("/venues/{venue_id}/availability", response_model=VenueResponse)
async def update_availability(
    venue_id: int,
    payload: AvailabilityUpdate,
    owner: User = Depends(require_roles(UserRole.VENUE_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Toggle availability. Only the venue's owner may do this."""
    venue = await set_availability(db, venue_id, payload.availability, owner)
    await _commit_and_invalidate(db)
    return venue


@router.post("/venues/{venue_id}/reviews", response_model=VenueResponse)
async def review_venue(
    venue_id: int,
    review_data: ReviewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Append a review and recompute the venue rating."""
    venue = await add_venue_review(db, venue_id, user, review_data)
    await _commit_and_invalidate(db)
    return venue
