"""Application DTOs (frozen dataclasses, no ORM dependency)."""

from construction_docs.application.dtos.construction import ConstructionResult
from construction_docs.application.dtos.document import (
    DocumentCreate,
    DocumentFilter,
    DocumentResult,
    FileUpload,
)
from construction_docs.application.dtos.user import CurrentUser

__all__ = [
    "ConstructionResult",
    "CurrentUser",
    "DocumentCreate",
    "DocumentFilter",
    "DocumentResult",
    "FileUpload",
]
