"""Document domain entity.

Represents a stored construction or project document, independent of persistence.
"""

from dataclasses import dataclass

from construction_docs.domain.exceptions import ValidationException
from construction_docs.domain.value_objects.core import VersionNumber


@dataclass(frozen=True)
class DocumentEntity:
    """Domain entity for a stored document (business rules separate from persistence).

    A document is immutable once created: a replacement is a new document at
    the next version, never an edit of this one. Category and scope are checked
    on upload input, not here, so rows with legacy categories or no project
    still load.
    """

    id: str
    category: str
    project_id: str | None
    construction_id: str | None
    version: int | None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate identity and version.

        Raises:
            ValidationException: Missing id, or version present but not positive.
        """
        if not self.id:
            raise ValidationException("Document ID is required", field="id")
        if self.version is not None:
            try:
                VersionNumber(self.version)
            except ValueError as e:
                raise ValidationException(str(e), field="version") from e

    def is_construction_document(self) -> bool:
        """Return whether this document is attached to a construction."""
        return self.construction_id is not None

    @property
    def effective_version(self) -> VersionNumber:
        """Version used for grouping; legacy records without one count as 1."""
        return VersionNumber.from_optional(self.version)

    def superseding_version(self) -> VersionNumber:
        """Version a replacement of this document is created at (exactly one above)."""
        return self.effective_version.next()
