"""
Pydantic schemas for tickets and their purchase-time snapshots.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from venue_booking.models.ticket import TicketStatus
from venue_booking.schemas.event import EventSummary


class EventDetails(BaseModel):
    title: str = Field(..., min_length=1)
    date: datetime
    time: str = Field(..., min_length=1)
    venue: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)


class TicketDetails(BaseModel):
    price: float = Field(..., ge=0)
    purchase_date: datetime


class TicketCreate(BaseModel):
    user_id: Optional[int] = None
    event_id: int
    quantity: int = Field(..., gt=0)
    total_amount: float = Field(..., ge=0)
    event_details: EventDetails
    ticket_details: TicketDetails
    qr_code: str = Field(..., min_length=1)


class TicketResponse(BaseModel):
    id: int
    user_id: int
    event_id: int
    quantity: int
    total_amount: float
    event_details: EventDetails
    ticket_details: TicketDetails
    qr_code: str
    status: TicketStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class TicketWithEvent(TicketResponse):
    event: Optional[EventSummary]


class TicketCreatedResponse(BaseModel):
    success: bool = True
    ticket: TicketResponse
