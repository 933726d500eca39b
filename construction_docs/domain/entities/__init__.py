"""Domain entities."""

from construction_docs.domain.entities.construction import ConstructionEntity
from construction_docs.domain.entities.document import DocumentEntity

__all__ = ["ConstructionEntity", "DocumentEntity"]
