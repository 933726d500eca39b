"""In-memory repositories and document builders shared by unit and API tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from construction_docs.application.dtos.construction import ConstructionResult
from construction_docs.application.dtos.document import DocumentCreate, DocumentResult

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


def make_document(
    doc_id: str,
    *,
    category: str = "working_documentation",
    version: int | None = 1,
    construction_id: str | None = "c1",
    project_id: str | None = "p1",
    context: str | None = None,
    minutes: int = 0,
    file_name: str = "plan.pdf",
) -> DocumentResult:
    """Build a DocumentResult; minutes offsets uploaded_at from BASE_TIME."""
    uploaded_at = BASE_TIME + timedelta(minutes=minutes)
    prefix = (
        f"constructions/{construction_id}" if construction_id else f"projects/{project_id}"
    )
    return DocumentResult(
        id=doc_id,
        original_name=file_name,
        file_name=file_name,
        file_path=f"{prefix}/documents/{doc_id}/v{version or 1}/{file_name}",
        file_size=1024,
        mime_type="application/pdf",
        category=category,
        version=version,
        project_id=project_id,
        construction_id=construction_id,
        context=context,
        checksum=None,
        uploaded_by="seed",
        uploaded_at=uploaded_at,
        created_at=uploaded_at,
        updated_at=uploaded_at,
    )


class InMemoryDocumentRepository:
    """IDocumentRepository over a dict. Preserves insertion order like a table scan."""

    def __init__(self, documents: list[DocumentResult] | None = None) -> None:
        self.documents: dict[str, DocumentResult] = {d.id: d for d in documents or []}
        self.create_calls = 0

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        return self.documents.get(document_id)

    async def get_by_construction(self, construction_id: str) -> list[DocumentResult]:
        return sorted(
            (d for d in self.documents.values() if d.construction_id == construction_id),
            key=lambda d: (d.uploaded_at, d.id),
        )

    async def get_by_project(self, project_id: str) -> list[DocumentResult]:
        return sorted(
            (d for d in self.documents.values() if d.project_id == project_id),
            key=lambda d: (d.uploaded_at, d.id),
        )

    async def create_document(self, document: DocumentCreate) -> DocumentResult:
        self.create_calls += 1
        result = DocumentResult(
            id=document.id,
            original_name=document.original_name,
            file_name=document.file_name,
            file_path=document.file_path,
            file_size=document.file_size,
            mime_type=document.mime_type,
            category=document.category,
            version=document.version,
            project_id=document.project_id,
            construction_id=document.construction_id,
            context=document.context,
            checksum=document.checksum,
            uploaded_by=document.uploaded_by,
            uploaded_at=document.uploaded_at,
            created_at=document.uploaded_at,
            updated_at=document.uploaded_at,
        )
        self.documents[result.id] = result
        return result

    async def delete_document(self, document_id: str) -> bool:
        return self.documents.pop(document_id, None) is not None


class InMemoryConstructionRepository:
    """IConstructionRepository over a dict; records lock acquisitions."""

    def __init__(self, constructions: list[tuple[str, str]] | None = None) -> None:
        self.constructions: dict[str, ConstructionResult] = {}
        self.locked: list[str] = []
        for construction_id, project_id in constructions or []:
            self.add(construction_id, project_id)

    def add(self, construction_id: str, project_id: str) -> ConstructionResult:
        row = ConstructionResult(
            id=construction_id,
            name=f"Construction {construction_id}",
            project_id=project_id,
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )
        self.constructions[construction_id] = row
        return row

    async def get_by_id(self, construction_id: str) -> ConstructionResult | None:
        return self.constructions.get(construction_id)

    async def lock_for_version_allocation(
        self, construction_id: str
    ) -> ConstructionResult | None:
        self.locked.append(construction_id)
        return self.constructions.get(construction_id)
