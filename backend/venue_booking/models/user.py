"""
User model. The role decides which routes a user may call; venue owners
own the venues whose ``owner_id`` points at them.
"""

from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from venue_booking.db.base import Base, TimestampMixin


class UserRole(str, Enum):
    USER = "user"
    ORGANIZER = "organizer"
    VENUE_OWNER = "venue_owner"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    is_active = Column(Boolean, default=True, nullable=False)

    # Organizer details
    organization_name = Column(String(255), nullable=True)
    contact_number = Column(String(50), nullable=True)

    # Relationships
    venues = relationship(
        "Venue",
        back_populates="owner",
        lazy="selectin",
        order_by="Venue.id",
    )

    __table_args__ = (
        CheckConstraint("role IN ('user', 'organizer', 'venue_owner')", name="check_user_role"),
    )

    def owns_venue(self, venue_id: int) -> bool:
        return venue_id in {venue.id for venue in self.venues}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
