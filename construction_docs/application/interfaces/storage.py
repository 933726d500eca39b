"""Storage service protocol (DIP). Implementation: LocalStorageService."""

from collections.abc import AsyncIterator
from typing import Any, BinaryIO, Protocol


class IStorageService(Protocol):
    """Protocol for the byte storage collaborator."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes with checksum verification. Idempotent if same checksum."""
        ...

    def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        ...
