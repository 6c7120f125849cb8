"""
Review of either a venue or an event (exactly one of the two).
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship

from venue_booking.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=True, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", lazy="selectin")
    venue = relationship("Venue", back_populates="reviews")
    event = relationship("Event", back_populates="reviews")

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="check_review_rating_range"),
        CheckConstraint(
            "(venue_id IS NULL) <> (event_id IS NULL)",
            name="check_review_single_target",
        ),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, venue={self.venue_id}, event={self.event_id}, rating={self.rating})>"
