"""Read side: listings, compound filters, version folders, metadata and download."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass

from construction_docs.application.dtos.document import DocumentFilter, DocumentResult
from construction_docs.application.interfaces.repositories import IDocumentRepository
from construction_docs.application.interfaces.storage import IStorageService
from construction_docs.application.services.capability_policy import (
    CapabilityPolicy,
    default_policy,
)
from construction_docs.application.services.version_organizer import (
    VersionGroup,
    current_latest_version,
    next_version,
    organize_by_version,
)
from construction_docs.domain.enums import Capability, Role
from construction_docs.domain.exceptions import (
    MissingReferenceException,
    ResourceNotFoundException,
)


def filter_documents(
    documents: Iterable[DocumentResult], criteria: DocumentFilter
) -> list[DocumentResult]:
    """Keep documents matching every non-None field of criteria (AND)."""
    return [
        d
        for d in documents
        if (criteria.construction_id is None or d.construction_id == criteria.construction_id)
        and (criteria.project_id is None or d.project_id == criteria.project_id)
        and (criteria.category is None or d.category == criteria.category)
        and (criteria.context is None or d.context == criteria.context)
    ]


@dataclass(frozen=True)
class VersionOverview:
    """Version folders of one construction plus its latest and next version numbers."""

    construction_id: str
    latest_version: int
    next_version: int
    versions: list[VersionGroup]


class DocumentQueryService:
    """Single responsibility: document metadata, byte stream, and listing."""

    def __init__(
        self,
        storage_service: IStorageService,
        document_repo: IDocumentRepository,
        policy: CapabilityPolicy = default_policy,
    ) -> None:
        self.storage = storage_service
        self.document_repo = document_repo
        self.policy = policy

    async def by_construction(self, construction_id: str) -> list[DocumentResult]:
        return await self.document_repo.get_by_construction(construction_id)

    async def by_project(self, project_id: str) -> list[DocumentResult]:
        return await self.document_repo.get_by_project(project_id)

    async def list_documents(self, criteria: DocumentFilter) -> list[DocumentResult]:
        """Return documents matching criteria; empty list when nothing matches.

        The construction or project field picks the base set. A listing with
        neither is rejected rather than scanning every document.
        """
        if criteria.construction_id:
            base = await self.by_construction(criteria.construction_id)
        elif criteria.project_id:
            base = await self.by_project(criteria.project_id)
        else:
            raise MissingReferenceException("construction_id or project_id")
        return filter_documents(base, criteria)

    async def version_groups(self, construction_id: str) -> list[VersionGroup]:
        """Return the construction's documents as version folders, newest first."""
        return organize_by_version(await self.by_construction(construction_id))

    async def latest_version(self, construction_id: str) -> int:
        return current_latest_version(await self.by_construction(construction_id))

    async def version_overview(self, construction_id: str) -> VersionOverview:
        """Group, latest and next version from a single fetch."""
        docs = await self.by_construction(construction_id)
        return VersionOverview(
            construction_id=construction_id,
            latest_version=current_latest_version(docs),
            next_version=next_version(docs),
            versions=organize_by_version(docs),
        )

    async def get_document_metadata(
        self, role: Role | str | None, document_id: str
    ) -> DocumentResult:
        """Return document metadata; raise ResourceNotFoundException if not found."""
        self.policy.require(role, Capability.VIEW_DOCUMENT_METADATA)
        doc = await self.document_repo.get_by_id(document_id)
        if doc is None:
            raise ResourceNotFoundException("document", document_id)
        return doc

    async def open_download(
        self, role: Role | str | None, document_id: str
    ) -> tuple[DocumentResult, AsyncIterator[bytes]]:
        """Return the document and a stream of its bytes.

        Superseded versions stay downloadable. Raises ResourceNotFoundException
        if the record or its stored bytes are missing.
        """
        self.policy.require(role, Capability.DOWNLOAD_DOCUMENT)
        doc = await self.document_repo.get_by_id(document_id)
        if doc is None or not doc.file_path:
            raise ResourceNotFoundException("document", document_id)
        if not await self.storage.exists(doc.file_path):
            raise ResourceNotFoundException("document file", document_id)
        return doc, self.storage.download(doc.file_path)
