"""
Infrastructure layer: Photo files stored on the local file system.
"""
from pathlib import Path
from typing import BinaryIO, Optional
import logging
import re
import uuid

from app.config import settings
from app.domain.exceptions import (
    InvalidFilenameError,
    PhotoNotFoundError,
    PhotoTooLargeError,
    UnsupportedMediaError,
)

logger = logging.getLogger(__name__)

SAFE_FILENAME = re.compile(r"^[a-zA-Z0-9_-]+\.(jpg|jpeg|png)$", re.IGNORECASE)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
}

PHOTO_URL_PREFIX = "/photos/"

CHUNK_SIZE = 64 * 1024


class PhotoStorage:
    """
    Stores uploaded photos under generated names.

    Generated names never derive from user input beyond the extension, so a
    stored filename always passes the safe-filename check.
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        max_size_bytes: Optional[int] = None,
    ):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_size_bytes = max_size_bytes or settings.max_photo_size_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        stream: BinaryIO,
        content_type: Optional[str],
        original_filename: Optional[str] = None,
    ) -> str:
        """
        Write an uploaded photo to disk.

        Args:
            stream: Readable binary stream with the photo bytes
            content_type: MIME type declared by the client
            original_filename: Client filename, used only for its extension

        Returns:
            The generated filename

        Raises:
            UnsupportedMediaError: If the file is not JPEG or PNG
            PhotoTooLargeError: If the file exceeds the size limit
        """
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedMediaError("Invalid file type. Only JPEG and PNG are allowed.")

        filename = f"{uuid.uuid4().hex}{self._extension(original_filename, media_type)}"
        path = self.upload_dir / filename

        written = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_size_bytes:
                        raise PhotoTooLargeError(
                            f"Photo exceeds the {self.max_size_bytes // (1024 * 1024)}MB size limit"
                        )
                    out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored photo {filename} ({written} bytes)")
        return filename

    def delete(self, filename: str) -> None:
        """
        Remove a stored photo.

        Used on cleanup paths, so failures are logged rather than raised.
        """
        try:
            (self.upload_dir / Path(filename).name).unlink(missing_ok=True)
            logger.info(f"Deleted photo {filename}")
        except OSError as e:
            logger.error(f"Error deleting photo {filename}: {e}")

    def resolve(self, filename: str) -> Path:
        """
        Locate a stored photo.

        Args:
            filename: Requested filename

        Returns:
            Path to the photo on disk

        Raises:
            InvalidFilenameError: If the filename fails the safe pattern
            PhotoNotFoundError: If no such photo is stored
        """
        if not SAFE_FILENAME.fullmatch(filename):
            raise InvalidFilenameError("Invalid filename format")

        path = self.upload_dir / filename
        if not path.is_file():
            raise PhotoNotFoundError("Photo not found")
        return path

    @staticmethod
    def media_type(filename: str) -> str:
        return "image/png" if filename.lower().endswith(".png") else "image/jpeg"

    @staticmethod
    def url_for(filename: str) -> str:
        return f"{PHOTO_URL_PREFIX}{filename}"

    @staticmethod
    def _extension(original_filename: Optional[str], media_type: str) -> str:
        suffix = Path(original_filename or "").suffix.lower()
        if suffix in (".jpg", ".jpeg", ".png"):
            return suffix
        return ALLOWED_CONTENT_TYPES[media_type]
