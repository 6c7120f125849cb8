"""
Image storage interface.
Venue and event images are handed to a storage backend; the database
keeps only the returned references.

A batch of uploads is all-or-nothing: every file is read and checked
before the first one is written, and references already written are
removed again if a later write fails.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from fastapi import UploadFile

from venue_booking.core.errors import ValidationError

ALLOWED_IMAGE_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)


class ImageStorage(ABC):
    """
    Interface for image storage backends.

    Implementations:
    - LocalImageStorage: files under a local upload directory
    """

    def __init__(self, max_bytes: int, max_count: int):
        self.max_bytes = max_bytes
        self.max_count = max_count

    def check(self, filename: str, size: int) -> None:
        """Reject anything that is not a jpg/jpeg/png/gif within the size limit."""
        if not filename or not ALLOWED_IMAGE_PATTERN.search(filename):
            raise ValidationError("Only image files are allowed!", filename=filename)
        if size > self.max_bytes:
            raise ValidationError(
                f"Image {filename} exceeds the {self.max_bytes} byte limit",
                filename=filename,
                size=size,
            )

    async def save_all(self, uploads: Sequence[UploadFile]) -> list[str]:
        """Validate every upload, then store them. Returns the stored references."""
        if len(uploads) > self.max_count:
            raise ValidationError(f"At most {self.max_count} images are allowed", images=len(uploads))

        contents = []
        for upload in uploads:
            content = await upload.read()
            self.check(upload.filename, len(content))
            contents.append((upload.filename, content))

        stored: list[str] = []
        try:
            for filename, content in contents:
                stored.append(await self.write(filename, content))
        except Exception:
            await self.discard(stored)
            raise
        return stored

    async def discard(self, refs: Iterable[str]) -> None:
        for ref in refs:
            await self.delete(ref)

    @abstractmethod
    async def write(self, filename: str, content: bytes) -> str:
        """
        Persist one already-checked image.

        Returns:
            Reference (path or URL) to store on the venue or event
        """
        pass

    @abstractmethod
    async def delete(self, ref: str) -> None:
        """Remove a stored image. Unknown references are ignored."""
        pass
