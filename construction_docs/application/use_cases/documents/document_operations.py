"""Document lifecycle: upload, replace (new version) and delete.

Each operation checks the caller's capability first, validates input before
touching storage, and never edits an existing document record.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
from typing import BinaryIO

from construction_docs.application.dtos.document import (
    DocumentCreate,
    DocumentResult,
    FileUpload,
)
from construction_docs.application.interfaces.repositories import (
    IConstructionRepository,
    IDocumentRepository,
)
from construction_docs.application.interfaces.storage import IStorageService
from construction_docs.application.services.capability_policy import (
    CapabilityPolicy,
    default_policy,
)
from construction_docs.application.services.file_validator import (
    FileValidator,
    normalize_mime_type,
)
from construction_docs.application.services.version_organizer import next_version
from construction_docs.domain.entities import ConstructionEntity, DocumentEntity
from construction_docs.domain.enums import (
    Capability,
    DocumentCategory,
    DocumentContext,
    ProjectDocumentCategory,
    Role,
)
from construction_docs.domain.exceptions import (
    InvalidCategoryException,
    MissingReferenceException,
    ResourceNotFoundException,
    ValidationException,
)
from construction_docs.domain.value_objects import StorageRef, VersionNumber
from construction_docs.infrastructure.exceptions import StorageException
from construction_docs.shared.utils import generate_cuid, utc_now

logger = logging.getLogger(__name__)

# Device names Windows refuses as filenames, with or without an extension.
_RESERVED_NAMES = frozenset(
    {"con", "prn", "aux", "nul"}
    | {f"com{i}" for i in range(1, 10)}
    | {f"lpt{i}" for i in range(1, 10)}
)


def _rewind_if_seekable(file_data: BinaryIO) -> None:
    """Reset file position to start if stream is seekable."""
    if getattr(file_data, "seekable", lambda: False)():
        file_data.seek(0)


def _sanitize_filename(filename: str) -> str:
    """Strip path separators and dangerous characters from filename."""
    name = os.path.basename(filename.replace("\\", "/"))
    name = name.replace("\x00", "").strip(". ")
    if not name:
        raise ValueError("Filename is empty or invalid after sanitization")
    if name.split(".", 1)[0].lower() in _RESERVED_NAMES:
        raise ValueError(f"Reserved filename: {name}")
    return name


def _compute_checksum_and_size_sync(file_data: BinaryIO) -> tuple[str, int]:
    """Blocking: one pass over file_data (run in executor). Returns (hexdigest, byte_count)."""
    sha256 = hashlib.sha256()
    total = 0
    _rewind_if_seekable(file_data)
    while chunk := file_data.read(65536):
        sha256.update(chunk)
        total += len(chunk)
    _rewind_if_seekable(file_data)
    return sha256.hexdigest(), total


def _parse_explicit_version(version: int | str | None) -> VersionNumber | None:
    """Accept an int or its decimal string (multipart form value); blank means none."""
    if version is None or (isinstance(version, str) and not version.strip()):
        return None
    try:
        value = int(version.strip()) if isinstance(version, str) else version
        return VersionNumber(value)
    except ValueError as e:
        raise ValidationException(
            f"Version must be a positive integer, got {version!r}", field="version"
        ) from e


def _validate_context(context: str | None) -> str | None:
    if context is None or context == "":
        return None
    if DocumentContext.parse(context) is None:
        raise ValidationException(
            f"Invalid document context: {context!r}", field="context"
        )
    return context


class DocumentUploadService:
    """Create documents: fresh uploads and replacements at the next version."""

    def __init__(
        self,
        storage_service: IStorageService,
        document_repo: IDocumentRepository,
        construction_repo: IConstructionRepository,
        policy: CapabilityPolicy = default_policy,
        file_validator: FileValidator | None = None,
    ) -> None:
        self.storage = storage_service
        self.document_repo = document_repo
        self.construction_repo = construction_repo
        self.policy = policy
        self.file_validator = file_validator or FileValidator()

    async def _compute_checksum_and_size(self, file_data: BinaryIO) -> tuple[str, int]:
        return await asyncio.to_thread(_compute_checksum_and_size_sync, file_data)

    async def _read_and_verify(self, file: FileUpload) -> tuple[str, int]:
        """Hash the stream and re-check the real byte count against the size limit."""
        checksum, size = await self._compute_checksum_and_size(file.file_data)
        self.file_validator.validate_size(size)
        return checksum, size

    async def _lock_construction(
        self, construction_id: str, project_id: str | None
    ) -> ConstructionEntity:
        """Take the per-construction allocation lock and check project ownership."""
        row = await self.construction_repo.lock_for_version_allocation(construction_id)
        if row is None:
            raise ResourceNotFoundException("construction", construction_id)
        construction = ConstructionEntity(
            id=row.id, name=row.name, project_id=row.project_id
        )
        if project_id is not None and not construction.belongs_to_project(project_id):
            raise ValidationException(
                f"Construction {construction_id} does not belong to project {project_id}",
                field="project_id",
            )
        return construction

    async def _discard_stored(self, storage_ref: str) -> None:
        try:
            await self.storage.delete(storage_ref)
        except StorageException as e:
            logger.warning(
                "Could not remove orphaned upload %s: %s", storage_ref, e.message
            )

    async def _store_and_record(
        self,
        file: FileUpload,
        document_id: str,
        storage_ref: StorageRef,
        checksum: str,
        size: int,
        create: DocumentCreate,
    ) -> DocumentResult:
        """Write bytes, then the record; remove the bytes if the record never lands."""
        _rewind_if_seekable(file.file_data)
        await self.storage.upload(
            file_data=file.file_data,
            storage_ref=storage_ref.value,
            expected_checksum=checksum,
            content_type=create.mime_type,
            metadata={
                "document_id": document_id,
                "project_id": create.project_id or "",
                "construction_id": create.construction_id or "",
                "original_name": create.original_name,
            },
        )
        try:
            return await self.document_repo.create_document(create)
        except (Exception, asyncio.CancelledError):
            await self._discard_stored(storage_ref.value)
            raise

    async def upload_document(
        self,
        *,
        role: Role | str | None,
        file: FileUpload,
        category: str | None,
        construction_id: str | None,
        project_id: str | None,
        version: int | str | None = None,
        context: str | None = None,
        uploaded_by: str | None = None,
    ) -> DocumentResult:
        """Upload a construction document.

        Without an explicit version the document starts a new version
        (latest + 1, or 1 for an empty construction). With one, it joins that
        version bucket as-is.

        Raises:
            PermissionDeniedException: Role lacks upload_document.
            EmptyFileException, FileTooLargeException, UnsupportedFileTypeException:
                File rejected.
            InvalidCategoryException: Category is not a construction category.
            MissingReferenceException: constructionId or projectId absent.
            ValidationException: Bad version/context, or construction of another project.
            ResourceNotFoundException: Construction does not exist.
        """
        self.policy.require(role, Capability.UPLOAD_DOCUMENT)
        self.file_validator.validate(file.size, file.mime_type)
        if DocumentCategory.parse(category) is None:
            raise InvalidCategoryException(category, DocumentCategory.values())
        if not construction_id:
            raise MissingReferenceException("construction_id")
        if not project_id:
            raise MissingReferenceException("project_id")
        explicit = _parse_explicit_version(version)
        context = _validate_context(context)
        try:
            filename = _sanitize_filename(file.filename)
        except ValueError as e:
            raise ValidationException(str(e), field="file") from e

        checksum, size = await self._read_and_verify(file)
        await self._lock_construction(construction_id, project_id)
        if explicit is None:
            existing = await self.document_repo.get_by_construction(construction_id)
            explicit = VersionNumber(next_version(existing))

        document_id = generate_cuid()
        storage_ref = StorageRef.for_construction_document(
            construction_id, document_id, explicit, filename
        )
        create = DocumentCreate(
            id=document_id,
            original_name=filename,
            file_name=filename,
            file_path=storage_ref.value,
            file_size=size,
            mime_type=normalize_mime_type(file.mime_type),
            category=category,
            version=explicit.value,
            project_id=project_id,
            construction_id=construction_id,
            context=context,
            checksum=checksum,
            uploaded_by=uploaded_by,
            uploaded_at=utc_now(),
        )
        created = await self._store_and_record(
            file, document_id, storage_ref, checksum, size, create
        )
        logger.info(
            "Uploaded document %s to construction %s as v%d (%s)",
            created.id,
            construction_id,
            explicit.value,
            category,
        )
        return created

    async def upload_project_document(
        self,
        *,
        role: Role | str | None,
        file: FileUpload,
        category: str | None,
        project_id: str | None,
        context: str | None = None,
        uploaded_by: str | None = None,
    ) -> DocumentResult:
        """Upload a project-scoped document (tz or contract); always version 1."""
        self.policy.require(role, Capability.UPLOAD_DOCUMENT)
        self.file_validator.validate(file.size, file.mime_type)
        if ProjectDocumentCategory.parse(category) is None:
            raise InvalidCategoryException(category, ProjectDocumentCategory.values())
        if not project_id:
            raise MissingReferenceException("project_id")
        context = _validate_context(context)
        try:
            filename = _sanitize_filename(file.filename)
        except ValueError as e:
            raise ValidationException(str(e), field="file") from e

        checksum, size = await self._read_and_verify(file)
        document_id = generate_cuid()
        try:
            storage_ref = StorageRef.for_project_document(project_id, document_id, filename)
        except ValueError as e:
            raise ValidationException(str(e), field="project_id") from e
        create = DocumentCreate(
            id=document_id,
            original_name=filename,
            file_name=filename,
            file_path=storage_ref.value,
            file_size=size,
            mime_type=normalize_mime_type(file.mime_type),
            category=category,
            version=1,
            project_id=project_id,
            construction_id=None,
            context=context,
            checksum=checksum,
            uploaded_by=uploaded_by,
            uploaded_at=utc_now(),
        )
        created = await self._store_and_record(
            file, document_id, storage_ref, checksum, size, create
        )
        logger.info("Uploaded project document %s to project %s", created.id, project_id)
        return created

    async def replace_document(
        self,
        *,
        role: Role | str | None,
        document_id: str,
        file: FileUpload,
        uploaded_by: str | None = None,
    ) -> DocumentResult:
        """Supersede a document with a new one at exactly its version + 1.

        The replaced document stays as it was and remains downloadable.
        Category, construction, project and context are copied from it as
        stored, so rows with legacy categories can be superseded too. A
        document with neither construction nor project cannot be placed in
        storage and raises MissingReferenceException.
        """
        self.policy.require(role, Capability.REPLACE_DOCUMENT)
        self.file_validator.validate(file.size, file.mime_type)
        try:
            filename = _sanitize_filename(file.filename)
        except ValueError as e:
            raise ValidationException(str(e), field="file") from e

        replaced = await self.document_repo.get_by_id(document_id)
        if replaced is None:
            raise ResourceNotFoundException("document", document_id)
        entity = DocumentEntity(
            id=replaced.id,
            category=replaced.category,
            project_id=replaced.project_id,
            construction_id=replaced.construction_id,
            version=replaced.version,
        )
        new_version = entity.superseding_version()

        checksum, size = await self._read_and_verify(file)
        new_id = generate_cuid()
        if entity.is_construction_document():
            await self._lock_construction(entity.construction_id, None)
            storage_ref = StorageRef.for_construction_document(
                entity.construction_id, new_id, new_version, filename
            )
        elif entity.project_id:
            storage_ref = StorageRef.for_project_document(
                entity.project_id, new_id, filename
            )
        else:
            raise MissingReferenceException("project_id")
        create = DocumentCreate(
            id=new_id,
            original_name=filename,
            file_name=filename,
            file_path=storage_ref.value,
            file_size=size,
            mime_type=normalize_mime_type(file.mime_type),
            category=replaced.category,
            version=new_version.value,
            project_id=entity.project_id,
            construction_id=replaced.construction_id,
            context=replaced.context,
            checksum=checksum,
            uploaded_by=uploaded_by,
            uploaded_at=utc_now(),
        )
        created = await self._store_and_record(
            file, new_id, storage_ref, checksum, size, create
        )
        logger.info(
            "Replaced document %s with %s: created version v%d",
            replaced.id,
            created.id,
            new_version.value,
        )
        return created


class DocumentDeletionService:
    """Permanently remove a document; versions are never renumbered."""

    def __init__(
        self,
        storage_service: IStorageService,
        document_repo: IDocumentRepository,
        policy: CapabilityPolicy = default_policy,
    ) -> None:
        self.storage = storage_service
        self.document_repo = document_repo
        self.policy = policy

    async def delete_document(
        self, *, role: Role | str | None, document_id: str
    ) -> DocumentResult:
        """Delete the record, then its bytes. Returns the deleted document.

        Raises ResourceNotFoundException if the document does not exist
        (including a repeated delete of the same id).
        """
        self.policy.require(role, Capability.DELETE_DOCUMENT)
        doc = await self.document_repo.get_by_id(document_id)
        if doc is None:
            raise ResourceNotFoundException("document", document_id)
        if not await self.document_repo.delete_document(document_id):
            raise ResourceNotFoundException("document", document_id)
        try:
            await self.storage.delete(doc.file_path)
        except StorageException as e:
            logger.warning(
                "Document %s deleted but its file %s was not removed: %s",
                document_id,
                doc.file_path,
                e.message,
            )
        logger.info(
            "Deleted document %s (construction %s, v%s)",
            document_id,
            doc.construction_id,
            doc.version,
        )
        return doc
