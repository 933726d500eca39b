"""Domain enumerations for construction documents.

Enums represent fixed sets of domain values: caller roles, capabilities
granted by the policy table, and document categories/contexts.
"""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for validation or error details)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]

    @classmethod
    def parse(cls, value: object):
        """Return the member for value, or None when value is not a member."""
        try:
            return cls(value)  # type: ignore[call-arg]
        except ValueError:
            return None


class Role(_ValuesMixin, str, Enum):
    """Caller role. Trial/Customer are not members; they fail closed in the policy."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class Capability(_ValuesMixin, str, Enum):
    """Named permission whose grant is determined solely by role."""

    UPLOAD_DOCUMENT = "upload_document"
    REPLACE_DOCUMENT = "replace_document"
    DELETE_DOCUMENT = "delete_document"
    DOWNLOAD_DOCUMENT = "download_document"
    VIEW_DOCUMENT_METADATA = "view_document_metadata"


class DocumentCategory(_ValuesMixin, str, Enum):
    """Functional classification of a construction document (orthogonal to version).

    Declaration order is the display order of categories inside a version group.
    """

    WORKING_DOCUMENTATION = "working_documentation"
    PROJECT_DOCUMENTATION = "project_documentation"


class ProjectDocumentCategory(_ValuesMixin, str, Enum):
    """Categories of project-scoped documents; never mixed with DocumentCategory."""

    TZ = "tz"
    CONTRACT = "contract"


class DocumentContext(_ValuesMixin, str, Enum):
    """Optional listing tag attached to a document at upload."""

    INITIAL_DATA = "initial_data"
    PROJECT_DOC = "project_doc"
