"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, BinaryIO, cast

import aiofiles
import aiofiles.os

from construction_docs.infrastructure.exceptions import (
    StorageAlreadyExistsError,
    StorageChecksumMismatchError,
    StorageDeleteError,
    StorageDownloadError,
    StorageInvalidPathError,
    StorageNotFoundError,
    StorageUploadError,
)
from construction_docs.shared.utils.datetime import utc_now


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes stream into a temp file
    in the target directory, hashing as they go, and are renamed into place
    only when the checksum matches. Content type and custom metadata live in
    a .meta.json sidecar next to the file.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB
    META_SUFFIX = ".meta.json"

    def __init__(self, storage_root: str) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StorageInvalidPathError on traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StorageInvalidPathError(storage_ref) from e
        if full_path == self.storage_root:
            raise StorageInvalidPathError(storage_ref)
        return full_path

    def _meta_path(self, file_path: Path) -> Path:
        return file_path.with_name(file_path.name + self.META_SUFFIX)

    async def _compute_checksum(self, file_path: Path) -> str:
        """SHA-256 of file."""
        sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, "rb") as f:
            while chunk := await f.read(self.CHUNK_SIZE):
                sha256.update(chunk)
        return sha256.hexdigest()

    async def _write_metadata(self, file_path: Path, metadata: dict[str, Any]) -> None:
        meta_path = self._meta_path(file_path)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps(metadata, indent=2))
        os.chmod(meta_path, 0o640)

    async def read_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return the JSON sidecar for storage_ref, or an empty dict."""
        meta_path = self._meta_path(self._get_full_path(storage_ref))
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path, "r") as f:
            result = json.loads(await f.read())
        return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes at storage_ref. Idempotent if the same content is already there."""
        target_path = self._get_full_path(storage_ref)
        try:
            if target_path.exists():
                existing_checksum = await self._compute_checksum(target_path)
                if existing_checksum == expected_checksum:
                    return {
                        "storage_ref": storage_ref,
                        "checksum": existing_checksum,
                        "size": target_path.stat().st_size,
                    }
                raise StorageAlreadyExistsError(storage_ref)

            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_name = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            temp_path = Path(temp_name)
            try:
                sha256 = hashlib.sha256()
                size = 0
                async with aiofiles.open(temp_path, "wb") as f:
                    while chunk := file_data.read(self.CHUNK_SIZE):
                        sha256.update(chunk)
                        size += len(chunk)
                        await f.write(chunk)
                computed = sha256.hexdigest()
                if computed != expected_checksum:
                    raise StorageChecksumMismatchError(
                        storage_ref, expected_checksum, computed
                    )
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if temp_path.exists():
                    temp_path.unlink()
            uploaded_at = utc_now().isoformat()
            await self._write_metadata(
                target_path,
                {
                    "storage_ref": storage_ref,
                    "checksum": computed,
                    "size": size,
                    "content_type": content_type,
                    "uploaded_at": uploaded_at,
                    "custom": metadata or {},
                },
            )
            return {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": size,
                "uploaded_at": uploaded_at,
            }
        except (StorageChecksumMismatchError, StorageAlreadyExistsError):
            raise
        except OSError as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content in CHUNK_SIZE pieces."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while chunk := await f.read(self.CHUNK_SIZE):
                    yield chunk
        except OSError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and sidecar, pruning empty parent dirs. Returns True if deleted."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except OSError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e
        parent = file_path.parent
        while parent != self.storage_root:
            try:
                if any(parent.iterdir()):
                    break
                parent.rmdir()
            except OSError:
                break
            parent = parent.parent
        return True

    async def exists(self, storage_ref: str) -> bool:
        return self._get_full_path(storage_ref).is_file()
