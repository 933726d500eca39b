"""Storage service factory: creates the configured backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from construction_docs.application.interfaces.storage import IStorageService

if TYPE_CHECKING:
    from construction_docs.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: "Settings | None" = None) -> IStorageService:
        """Create storage service from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from construction_docs.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()

        if backend == "local":
            from construction_docs.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            if not s.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return LocalStorageService(storage_root=s.storage_root)
        raise ValueError(f"Unknown storage backend: {backend}. Supported: 'local'")
