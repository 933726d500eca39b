"""Domain exceptions for construction document versioning.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DocumentServiceException(Exception):
    """Base exception for all construction document errors.

    All custom exceptions inherit from this class to allow consistent error
    handling and logging. Presentation layer maps these to HTTP responses
    using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body: error, message, details."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DocumentServiceException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DocumentServiceException):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class PermissionDeniedException(DocumentServiceException):
    """Raised when the caller's role is not granted the capability."""

    def __init__(self, capability: str, role: str | None = None) -> None:
        """Initialize with the denied capability and the caller's role.

        Args:
            capability: Capability that was required (e.g. 'upload_document').
            role: Role the caller presented; None when no role was supplied.
        """
        super().__init__(
            f"Permission denied: {capability}",
            "PERMISSION_DENIED",
            {"capability": capability, "role": role},
        )


class EmptyFileException(DocumentServiceException):
    """Raised when an uploaded file has no content."""

    def __init__(self) -> None:
        super().__init__("File is empty", "EMPTY_FILE", {"size": 0})


class FileTooLargeException(DocumentServiceException):
    """Raised when an uploaded file exceeds the maximum size."""

    def __init__(self, size: int, max_size: int) -> None:
        """Initialize with the offending size and the configured maximum.

        Args:
            size: Size of the file in bytes.
            max_size: Largest accepted size in bytes.
        """
        super().__init__(
            f"File size {size} bytes exceeds the maximum of {max_size} bytes",
            "FILE_TOO_LARGE",
            {"size": size, "max_size": max_size},
        )


class UnsupportedFileTypeException(DocumentServiceException):
    """Raised when the declared MIME type is not in the allowed set."""

    def __init__(self, mime_type: str | None, allowed: str) -> None:
        super().__init__(
            f"Unsupported file type: {mime_type or 'unknown'}. Supported: {allowed}",
            "UNSUPPORTED_FILE_TYPE",
            {"mime_type": mime_type},
        )


class InvalidCategoryException(DocumentServiceException):
    """Raised when the category does not belong to the expected category set."""

    def __init__(self, category: str | None, allowed: list[str]) -> None:
        super().__init__(
            f"Invalid document category: {category!r}",
            "INVALID_CATEGORY",
            {"category": category, "allowed": allowed},
        )


class MissingReferenceException(DocumentServiceException):
    """Raised when a required foreign reference (construction, project) is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(
            f"Missing required reference: {field}",
            "MISSING_REFERENCE",
            {"field": field},
        )


class ResourceNotFoundException(DocumentServiceException):
    """Raised when a requested resource (document, construction) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'document', 'construction').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(DocumentServiceException):
    """Raised when a concurrent write collided with this one (e.g. version allocation)."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CONFLICT", details)


class SqlNotConfiguredException(DocumentServiceException):
    """Raised when an operation requires the SQL metadata store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
