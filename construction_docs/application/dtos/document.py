"""DTOs for document use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO


@dataclass(frozen=True)
class FileUpload:
    """Incoming file: stream plus the size and MIME type the client declared."""

    file_data: BinaryIO
    filename: str
    mime_type: str | None
    size: int


@dataclass(frozen=True)
class DocumentCreate:
    """Input for creating a document record (write-model). Use case builds this; repo persists and returns DocumentResult."""

    id: str
    original_name: str
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    category: str
    version: int
    project_id: str | None
    construction_id: str | None
    context: str | None
    checksum: str
    uploaded_by: str | None
    uploaded_at: datetime


@dataclass(frozen=True)
class DocumentResult:
    """Document read-model (result of get_by_id, get_by_construction, create).

    version is None only for legacy rows written before versioning existed.
    """

    id: str
    original_name: str
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    category: str
    version: int | None
    project_id: str | None
    construction_id: str | None
    context: str | None
    checksum: str | None
    uploaded_by: str | None
    uploaded_at: datetime
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DocumentFilter:
    """Compound filter for listings; None fields match everything."""

    construction_id: str | None = None
    project_id: str | None = None
    category: str | None = None
    context: str | None = None
