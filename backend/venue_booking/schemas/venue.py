"""
Pydantic schemas for venue responses.

Venue creation is a multipart form and is parsed in the route, not here.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from venue_booking.schemas.review import ReviewResponse
from venue_booking.schemas.user import UserSummary


class VenueSummary(BaseModel):
    id: int
    name: str
    address: str
    capacity: int
    price_per_day: float
    availability: bool

    model_config = {"from_attributes": True}


class VenueResponse(VenueSummary):
    owner_id: int
    owner: Optional[UserSummary]
    amenities: list[str]
    images: list[str]
    description: Optional[str]
    rating: float
    reviews: list[ReviewResponse]
    created_at: datetime


class AvailabilityUpdate(BaseModel):
    availability: bool
