"""
Murmur Backend — Upload Service
=================================

What:  Turns an optional multipart upload into an in-memory file descriptor.
How:   Reads the whole part into memory, checks its size against the
       configured limit, and returns `UploadedFile(buffer, original_name,
       mime_type)`; returns None when the request carried no file.
Who:   Called by the POST /posts route before PostService runs.

Attachments are stored in the `posts` row itself (file_data/file_name/
file_type), so nothing is written to disk here.

Size checks:
    1. Content-Length reported for the part (rejects before trusting the body)
    2. Actual byte count after reading
    A zero-byte file is a valid attachment; it is stored and downloads as an
    empty body.

The filename is kept exactly as the client sent it. Making it safe for a
response header is done when the download response is built.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from app.config import settings
from app.exceptions import ValidationError

logger = logging.getLogger(__name__)

# MIME type recorded when the client does not send one
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadedFile:
    """In-memory file descriptor handed to PostService."""

    buffer: bytes
    original_name: str
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.buffer)


class UploadService:
    """
    Reads and validates post attachments.

    Args:
        max_file_size: Override the configured limit (used in tests).
                       If None, uses settings.max_file_size at call time.
    """

    def __init__(self, max_file_size: Optional[int] = None):
        self._max_file_size = max_file_size

    @property
    def max_file_size(self) -> int:
        return self._max_file_size or settings.max_file_size

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate file size against the configured maximum.

        Args:
            content_length: Size reported for the multipart part (may be None)
            actual_size: Actual byte count of the uploaded file

        Raises:
            ValidationError with a human-readable size limit message
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > self.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    async def read_upload(self, upload: Optional[UploadFile]) -> Optional[UploadedFile]:
        """
        Read an optional upload into an UploadedFile.

        Returns:
            None if no file part was sent (or the part has no filename, which
            is what browsers send for an empty file input).

        Raises:
            ValidationError: file too large
        """
        if upload is None or not upload.filename:
            return None

        try:
            content = await upload.read()
        finally:
            await upload.close()

        self.validate_size(upload.size, len(content))

        uploaded = UploadedFile(
            buffer=content,
            original_name=upload.filename,
            mime_type=upload.content_type or DEFAULT_MIME_TYPE,
        )
        logger.info(
            "Upload received: filename=%s, type=%s, size=%d bytes",
            uploaded.original_name,
            uploaded.mime_type,
            uploaded.size,
        )
        return uploaded


# ── Singleton Instance ────────────────────────────────────────────────────
upload_service = UploadService()
