"""Infrastructure exceptions for storage operations.

Storage errors extend DocumentServiceException so the presentation layer maps
them to HTTP responses the same way as domain errors.
"""

from construction_docs.domain.exceptions import DocumentServiceException


class StorageException(DocumentServiceException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """Stored object not found."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageUploadError(StorageException):
    """Writing bytes failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to download file: {file_path}",
            "STORAGE_DOWNLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageChecksumMismatchError(StorageException):
    """Bytes written do not hash to the checksum computed before upload."""

    def __init__(self, file_path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Checksum mismatch for file: {file_path}",
            "STORAGE_CHECKSUM_ERROR",
            {"file_path": file_path, "expected": expected, "actual": actual},
        )


class StorageAlreadyExistsError(StorageException):
    """A different file already occupies the storage reference."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File already exists: {file_path}",
            "STORAGE_EXISTS_ERROR",
            {"file_path": file_path},
        )


class StorageInvalidPathError(StorageException):
    """Storage reference escapes the storage root."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"Invalid storage path: {file_path}",
            "STORAGE_INVALID_PATH",
            {"file_path": file_path},
        )
