"""
Local-disk image storage.
Files are written under UPLOAD_DIR with a unique prefix so that two
uploads with the same original name never collide. Disk IO runs in the
threadpool.
"""

import os
import time
import uuid
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.core.logging import get_logger

logger = get_logger(__name__)


class LocalImageStorage(ImageStorage):

    def __init__(self, upload_dir: str, max_bytes: int, max_count: int):
        super().__init__(max_bytes, max_count)
        self.upload_dir = Path(upload_dir)

    def _write_file(self, target: Path, content: bytes) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    async def write(self, filename: str, content: bytes) -> str:
        safe_name = os.path.basename(filename)
        target = self.upload_dir / f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe_name}"
        await run_in_threadpool(self._write_file, target, content)

        logger.info("image_stored", path=str(target), size=len(content))
        return str(target)

    async def delete(self, ref: str) -> None:
        await run_in_threadpool(Path(ref).unlink, missing_ok=True)
        logger.info("image_removed", path=ref)
