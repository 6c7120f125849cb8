"""
Image storage factory.
Configures which storage backend venue and event uploads go to.
"""

from typing import Optional

from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.infrastructure.local_storage import LocalImageStorage
from venue_booking.core.config import get_settings


# Singleton instance
_storage: Optional[ImageStorage] = None


def get_image_storage() -> ImageStorage:
    """Get image storage singleton."""
    global _storage
    if _storage is None:
        settings = get_settings()
        _storage = LocalImageStorage(settings.UPLOAD_DIR, settings.MAX_IMAGE_BYTES, settings.MAX_UPLOAD_IMAGES)
    return _storage
