"""Image upload validation and storage for post attachments."""

import logging
import os
import secrets
import time
from pathlib import Path

import aiofiles
from fastapi import UploadFile

from postfeed.config import get_settings
from postfeed.errors import UploadError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}
PUBLIC_PREFIX = "/uploads"


class ImageStorage:
    """Writes validated images into the uploads directory."""

    def __init__(self, upload_dir: str | Path, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    @staticmethod
    def generate_filename(original_filename: str) -> str:
        """Unique name: image-<epoch ms>-<random><ext>."""
        ext = os.path.splitext(original_filename)[1].lower()
        return f"image-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"

    @staticmethod
    def public_path(filename: str) -> str:
        """URL path under which a stored file is served."""
        return f"{PUBLIC_PREFIX}/{filename}"

    def validate_type(self, upload: UploadFile) -> None:
        """Accept only JPEG or PNG by both extension and content type."""
        ext = os.path.splitext(upload.filename or "")[1].lower()
        content_type = (upload.content_type or "").lower()
        if ext not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
            raise UploadError("Only JPEG, JPG, and PNG images are allowed")

    async def read_limited(self, upload: UploadFile) -> bytes:
        """Read the upload, failing once it exceeds the size limit."""
        if upload.size is not None and upload.size > self.max_bytes:
            raise UploadError(self._too_large_message())
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise UploadError(self._too_large_message())
        return content

    async def validate(self, upload: UploadFile) -> bytes:
        """Check type and size; return the file content."""
        self.validate_type(upload)
        return await self.read_limited(upload)

    async def save(self, upload: UploadFile, content: bytes) -> str:
        """Write content to disk and return its public relative path."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        filename = self.generate_filename(upload.filename or "image.jpg")
        async with aiofiles.open(self.upload_dir / filename, "wb") as f:
            await f.write(content)
        logger.info(f"Stored upload {upload.filename!r} as {filename} ({len(content)} bytes)")
        return self.public_path(filename)

    def _too_large_message(self) -> str:
        return f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB"


def get_image_storage() -> ImageStorage:
    """Get image storage configured from settings."""
    settings = get_settings()
    return ImageStorage(settings.upload_dir, settings.max_upload_bytes)
