"""Byte storage backends."""

from construction_docs.infrastructure.external.storage.factory import (
    StorageFactory,
)
from construction_docs.infrastructure.external.storage.local_storage import (
    LocalStorageService,
)

__all__ = ["LocalStorageService", "StorageFactory"]
