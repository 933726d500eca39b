"""Document repository. Returns application DTOs."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from construction_docs.application.dtos.document import DocumentCreate, DocumentResult
from construction_docs.domain.exceptions import ConflictException
from construction_docs.infrastructure.persistence.models.document import Document
from construction_docs.infrastructure.persistence.repositories.base import (
    BaseRepository,
)
from construction_docs.shared.utils import ensure_utc

logger = logging.getLogger(__name__)


def _create_to_document(d: DocumentCreate) -> Document:
    """Map DocumentCreate (write-model) to ORM Document for persistence."""
    return Document(
        id=d.id,
        original_name=d.original_name,
        file_name=d.file_name,
        file_path=d.file_path,
        file_size=d.file_size,
        mime_type=d.mime_type,
        category=d.category,
        version=d.version,
        project_id=d.project_id,
        construction_id=d.construction_id,
        context=d.context,
        checksum=d.checksum,
        uploaded_by=d.uploaded_by,
        uploaded_at=d.uploaded_at,
    )


def _document_to_result(d: Document) -> DocumentResult:
    """Map ORM Document to application DocumentResult."""
    return DocumentResult(
        id=d.id,
        original_name=d.original_name,
        file_name=d.file_name,
        file_path=d.file_path,
        file_size=d.file_size,
        mime_type=d.mime_type,
        category=d.category,
        version=d.version,
        project_id=d.project_id,
        construction_id=d.construction_id,
        context=d.context,
        checksum=d.checksum,
        uploaded_by=d.uploaded_by,
        uploaded_at=ensure_utc(d.uploaded_at),
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
    )


class DocumentRepository(BaseRepository[Document]):
    """Document repository. create_document() accepts DocumentCreate; reads return DocumentResult."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Document)

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        row = await self._get_orm_by_id(document_id)
        return _document_to_result(row) if row else None

    async def get_by_construction(self, construction_id: str) -> list[DocumentResult]:
        """Return every document of the construction, all versions and categories."""
        result = await self.db.execute(
            select(Document)
            .where(Document.construction_id == construction_id)
            .order_by(Document.uploaded_at, Document.id)
        )
        return [_document_to_result(d) for d in result.scalars().all()]

    async def get_by_project(self, project_id: str) -> list[DocumentResult]:
        """Return every document of the project, construction-scoped ones included."""
        result = await self.db.execute(
            select(Document)
            .where(Document.project_id == project_id)
            .order_by(Document.uploaded_at, Document.id)
        )
        return [_document_to_result(d) for d in result.scalars().all()]

    async def create_document(self, document: DocumentCreate) -> DocumentResult:
        """Insert the record; a constraint violation surfaces as ConflictException."""
        try:
            created = await super().create(_create_to_document(document))
        except IntegrityError as e:
            logger.warning("Document insert %s rejected: %s", document.id, e.orig)
            raise ConflictException(
                "Document could not be stored: conflicting record",
                document_id=document.id,
            ) from e
        return _document_to_result(created)

    async def delete_document(self, document_id: str) -> bool:
        """Hard delete. Returns False if no such document."""
        row = await self._get_orm_by_id(document_id)
        if row is None:
            return False
        await super().delete(row)
        return True
