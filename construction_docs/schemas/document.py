"""Document API schemas. Documents serialize with camelCase keys."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DocumentResponse(_CamelModel):
    """Document metadata as returned by upload, replace, listings and GET by id."""

    id: str
    original_name: str
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    category: str
    version: int | None = None
    project_id: str | None = None
    construction_id: str | None = None
    context: str | None = None
    checksum: str | None = None
    uploaded_by: str | None = None
    uploaded_at: datetime
    created_at: datetime
    updated_at: datetime


class VersionGroupResponse(_CamelModel):
    """One version folder: documents keyed by category, every category present."""

    version_number: int
    documents_by_category: dict[str, list[DocumentResponse]]


class ConstructionVersionsResponse(_CamelModel):
    """Response for GET /documents/construction/{constructionId}/versions."""

    construction_id: str
    latest_version: int
    next_version: int
    versions: list[VersionGroupResponse]
