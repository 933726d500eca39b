"""File validation for uploads and replacements.

Runs before any storage or network call. Size is checked before type, so an
oversized file is reported as too large whatever its MIME type.
"""

from __future__ import annotations

from collections.abc import Collection

from construction_docs.core.constants import (
    ALLOWED_FILE_KINDS,
    ALLOWED_MIME_TYPES,
    MAX_UPLOAD_SIZE,
)
from construction_docs.domain.exceptions import (
    EmptyFileException,
    FileTooLargeException,
    UnsupportedFileTypeException,
)


class FileValidator:
    """Size and MIME checks shared by upload and replace."""

    def __init__(
        self,
        max_size: int = MAX_UPLOAD_SIZE,
        allowed_mime_types: Collection[str] = ALLOWED_MIME_TYPES,
    ) -> None:
        self.max_size = max_size
        self.allowed_mime_types = frozenset(allowed_mime_types)

    def validate_size(self, size: int) -> None:
        """Raise EmptyFileException for 0 bytes, FileTooLargeException above max_size."""
        if size <= 0:
            raise EmptyFileException()
        if size > self.max_size:
            raise FileTooLargeException(size, self.max_size)

    def validate_mime_type(self, mime_type: str | None) -> None:
        normalized = normalize_mime_type(mime_type)
        if normalized not in self.allowed_mime_types:
            raise UnsupportedFileTypeException(mime_type, ALLOWED_FILE_KINDS)

    def validate(self, size: int, mime_type: str | None) -> None:
        """Validate declared size then declared MIME type (first failure wins)."""
        self.validate_size(size)
        self.validate_mime_type(mime_type)


def normalize_mime_type(mime_type: str | None) -> str:
    """Strip parameters (e.g. '; charset=utf-8') and lowercase."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()
