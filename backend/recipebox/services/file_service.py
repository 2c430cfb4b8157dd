"""
RecipeBox Backend: File Storage Service (Upload Sink)
=======================================================

What:  Stores uploaded recipe images and resolves them for serving.
How:   Files land flat in UPLOAD_DIR named <epoch-milliseconds><extension>,
       written with aiofiles. The public URL is
       <PUBLIC_BASE_URL>/uploads/<filename>.
Who:   POST /upload (store) and GET /uploads/{filename} (resolve).

Naming:
    1700000000123.jpg
    └─ upload time in ms ─┘└ original extension, lowercased

    The original filename never reaches the filesystem; only a short
    alphanumeric extension is kept. Two uploads in the same millisecond get
    consecutive timestamps (exclusive-create, bump on collision).
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional

import aiofiles

from recipebox.config import Settings
from recipebox.exceptions import FieldError, FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# ".jpg", ".png", ".webp" ... anything else is dropped
_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,16}$")

MAX_NAME_ATTEMPTS = 100


class FileService:
    """
    Manages the upload directory.

    Args:
        upload_dir:      directory uploaded files are written to (created if missing)
        public_base_url: scheme://host[:port] prefix for returned image URLs
        max_upload_size: largest accepted file in bytes
    """

    def __init__(self, upload_dir: str, public_base_url: str, max_upload_size: int):
        self.upload_dir = Path(upload_dir).resolve()
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_upload_size = max_upload_size
        logger.info("FileService initialized with upload_dir=%s", self.upload_dir)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileService":
        return cls(
            upload_dir=settings.upload_dir,
            public_base_url=settings.public_base_url,
            max_upload_size=settings.max_upload_size,
        )

    @staticmethod
    def extension_of(filename: Optional[str]) -> str:
        """Lowercased extension of filename, or "" when absent or unusual."""
        ext = Path(filename or "").suffix.lower()
        return ext if _EXTENSION_RE.match(ext) else ""

    @staticmethod
    def build_filename(original_filename: Optional[str], timestamp_ms: Optional[int] = None) -> str:
        """Storage name: upload timestamp in milliseconds plus original extension."""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"{timestamp_ms}{FileService.extension_of(original_filename)}"

    def validate_size(self, size: int) -> None:
        if size > self.max_upload_size:
            max_mb = self.max_upload_size / (1024 * 1024)
            raise ValidationError(
                [FieldError("image", f"File exceeds maximum size of {max_mb:.1f}MB")],
                context={"size": size, "max_size": self.max_upload_size},
            )

    def image_url(self, filename: str) -> str:
        return f"{self.public_base_url}/uploads/{filename}"

    async def store(self, original_filename: Optional[str], content: bytes) -> str:
        """
        Validate and write an upload, returning the stored filename.

        Raises:
            ValidationError:  content larger than max_upload_size
            FileStorageError: the file could not be written
        """
        self.validate_size(len(content))

        timestamp_ms = int(time.time() * 1000)

        for _ in range(MAX_NAME_ATTEMPTS):
            filename = self.build_filename(original_filename, timestamp_ms)
            path = self.upload_dir / filename
            try:
                # "xb": fail instead of overwriting a same-millisecond upload
                async with aiofiles.open(path, "xb") as f:
                    await f.write(content)
            except FileExistsError:
                timestamp_ms += 1
                continue
            except OSError as e:
                logger.error("Failed to store upload at %s: %s", path, str(e))
                await self.cleanup_file(path)
                raise FileStorageError(
                    message="Failed to save uploaded image",
                    context={"path": str(path), "os_error": str(e)},
                ) from e

            logger.info("Upload stored: %s (%d bytes)", filename, len(content))
            return filename

        raise FileStorageError(
            message="Failed to save uploaded image",
            context={"reason": "no free filename", "timestamp_ms": timestamp_ms},
        )

    def resolve(self, filename: str) -> Path:
        """
        Map a requested filename to a stored file.

        Raises:
            NotFoundError: file missing, or the name escapes the upload directory
        """
        try:
            path = (self.upload_dir / filename).resolve()
            found = path.is_relative_to(self.upload_dir) and path.is_file()
        except (ValueError, OSError) as e:
            # NUL bytes, over-long names and the like name no stored file
            raise NotFoundError("File not found", context={"filename": filename}) from e
        if not found:
            raise NotFoundError("File not found", context={"filename": filename})
        return path

    async def cleanup_file(self, path: Path) -> None:
        """Best-effort removal of a partially written file."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", path, str(e))
