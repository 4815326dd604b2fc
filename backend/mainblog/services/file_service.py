"""
Main Blog Backend — File Storage Service
==========================================

What:  Writes uploaded blog images into the uploads directory and removes
       them again when the surrounding database write fails.
How:   Generates a filename from the upload time plus a random suffix, keeps
       the original extension, and writes the bytes with aiofiles.
Who:   Called by BlogService on create and update.

Directory Structure:
    uploads/
    ├── 1718000000000-1a2b3c4d.png
    └── 1718000000417-9e8f7a6b.jpg

    Files are served back by the static mount at settings.upload_url_prefix,
    so the value stored on a blog is "/uploads/<filename>".

No content checks are applied: whatever the client uploads is stored under
its original extension.
"""

import logging
import os
import time
import uuid
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from mainblog.config import settings
from mainblog.exceptions import FileStorageError

logger = logging.getLogger(__name__)


class FileService:
    """
    Manages the uploads directory.

    Lifecycle of an uploaded image:
        1. Route reads the multipart file into memory
        2. BlogService validates the text fields
        3. store_upload() writes the bytes and returns the public URL path
        4. If the database flush fails, cleanup_file() removes the file
        5. Deleting a blog leaves its file in place
    """

    def __init__(self, upload_dir: Optional[str] = None, url_prefix: Optional[str] = None):
        """
        Args:
            upload_dir: Override the upload directory (used in tests).
            url_prefix: Override the public URL prefix (used in tests).
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.url_prefix = url_prefix or settings.upload_url_prefix
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_dir=%s", self.upload_dir)

    def generate_filename(self, original_filename: str) -> str:
        """
        Build the stored name: <epoch-ms>-<8 hex chars><original extension>.

        The millisecond timestamp keeps files sortable by upload time; the
        random suffix keeps two uploads in the same millisecond apart.
        """
        millis = int(time.time() * 1000)
        extension = Path(original_filename).suffix
        return f"{millis}-{uuid.uuid4().hex[:8]}{extension}"

    def url_for(self, filename: str) -> str:
        """Public URL path for a stored filename."""
        return f"{self.url_prefix}/{filename}"

    async def store_upload(self, original_filename: str, content: bytes) -> Tuple[str, str]:
        """
        Write an uploaded file to disk.

        Returns:
            Tuple of (absolute_path, url_path); url_path is what the blog stores.

        Raises:
            FileStorageError if the directory or the file cannot be written.
        """
        filename = self.generate_filename(original_filename)
        absolute_path = self.upload_dir / filename

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return str(absolute_path), self.url_for(filename)

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a file from the uploads directory, best-effort.

        Missing files are ignored; other failures are logged, not raised, so a
        cleanup problem never replaces the error that triggered it.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
