"""Domain value objects for construction documents.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class VersionNumber:
    """Value object for a document version (positive integer, never reused).

    Legacy records without a version are read as version 1 via from_optional.
    """

    value: int

    def __post_init__(self) -> None:
        """Validate positive integer.

        Raises:
            ValueError: If value is not an int or is below 1.
        """
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Version must be an integer")
        if self.value < 1:
            raise ValueError("Version must be a positive integer")

    @classmethod
    def from_optional(cls, value: int | None) -> "VersionNumber":
        """Return the effective version: value itself, or 1 when absent."""
        return cls(1 if value is None else value)

    def next(self) -> "VersionNumber":
        """Return the version that supersedes this one."""
        return VersionNumber(self.value + 1)


@dataclass(frozen=True)
class StorageRef:
    """Value object for a storage-relative path (no traversal, no absolute paths)."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Storage ref must be a non-empty string")
        if self.value.startswith("/") or "\\" in self.value:
            raise ValueError("Storage ref must be a relative POSIX path")
        if any(part in ("", ".", "..") for part in self.value.split("/")):
            raise ValueError("Storage ref must not contain empty, '.' or '..' segments")

    @classmethod
    def for_construction_document(
        cls,
        construction_id: str,
        document_id: str,
        version: VersionNumber,
        filename: str,
    ) -> "StorageRef":
        return cls(
            f"constructions/{construction_id}/documents/{document_id}/v{version.value}/{filename}"
        )

    @classmethod
    def for_project_document(
        cls, project_id: str, document_id: str, filename: str
    ) -> "StorageRef":
        return cls(f"projects/{project_id}/documents/{document_id}/{filename}")
