"""Repository interfaces (ports) for the application layer.

Use cases depend on these protocols; SQLAlchemy repositories in
infrastructure.persistence implement them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from construction_docs.application.dtos.construction import ConstructionResult
    from construction_docs.application.dtos.document import (
        DocumentCreate,
        DocumentResult,
    )


# Construction repository interface
class IConstructionRepository(Protocol):
    """Read access to constructions plus the version allocation lock."""

    async def get_by_id(self, construction_id: str) -> ConstructionResult | None:
        ...

    async def lock_for_version_allocation(
        self, construction_id: str
    ) -> ConstructionResult | None:
        """Lock the construction row until the current transaction ends.

        Serializes version allocation per construction. Returns None if the
        construction does not exist.
        """
        ...


# Document repository interface
class IDocumentRepository(Protocol):
    """Document metadata persistence. Returns DocumentResult read-models."""

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        ...

    async def get_by_construction(self, construction_id: str) -> list[DocumentResult]:
        ...

    async def get_by_project(self, project_id: str) -> list[DocumentResult]:
        ...

    async def create_document(self, document: DocumentCreate) -> DocumentResult:
        ...

    async def delete_document(self, document_id: str) -> bool:
        """Delete permanently; return False if no row matched."""
        ...
