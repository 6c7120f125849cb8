"""
Venue model.

``rating`` is derived from ``reviews`` and is only ever written by the
review aggregator. ``version`` backs the conditional updates that keep
concurrent review appends from overwriting each other.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, Text, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from venue_booking.db.base import Base, TimestampMixin


class Venue(Base, TimestampMixin):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    capacity = Column(Integer, nullable=False)
    price_per_day = Column(Float, nullable=False)
    amenities = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    availability = Column(Boolean, nullable=False, default=True)
    rating = Column(Float, nullable=False, default=0.0)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    owner = relationship("User", back_populates="venues", lazy="selectin")
    reviews = relationship(
        "Review",
        back_populates="venue",
        lazy="selectin",
        order_by="Review.id",
    )

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_venue_capacity_positive"),
        CheckConstraint("price_per_day >= 0", name="check_venue_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name={self.name}, capacity={self.capacity})>"
