"""
Pydantic schemas for venue and event reviews.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from venue_booking.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    user: Optional[UserSummary]
    rating: int
    comment: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}
