"""Ports implemented by infrastructure."""

from construction_docs.application.interfaces.repositories import (
    IConstructionRepository,
    IDocumentRepository,
)
from construction_docs.application.interfaces.storage import IStorageService

__all__ = ["IConstructionRepository", "IDocumentRepository", "IStorageService"]
