"""
Ticket model.

``event_details`` and ``ticket_details`` are snapshots taken at purchase
time and are never updated afterwards, so later edits to the event do
not change what the ticket says.
"""

from enum import Enum

from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from venue_booking.db.base import Base, TimestampMixin


class TicketStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    USED = "used"


class Ticket(Base, TimestampMixin):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    event_details = Column(JSON, nullable=False)
    ticket_details = Column(JSON, nullable=False)
    qr_code = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=TicketStatus.ACTIVE.value)

    event = relationship("Event", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_ticket_quantity_positive"),
        CheckConstraint("total_amount >= 0", name="check_ticket_amount_non_negative"),
        CheckConstraint("status IN ('active', 'cancelled', 'used')", name="check_ticket_status"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"
