"""SQLAlchemy repositories returning application DTOs."""

from construction_docs.infrastructure.persistence.repositories.construction_repo import (
    ConstructionRepository,
)
from construction_docs.infrastructure.persistence.repositories.document_repo import (
    DocumentRepository,
)

__all__ = ["ConstructionRepository", "DocumentRepository"]
