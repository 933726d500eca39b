"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories, storage and the
document use cases. Routes depend only on these, never on infrastructure
directly. Write paths share one transactional session per request, so the
construction row lock and the document insert commit together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import Headers

from construction_docs.application.dtos.user import CurrentUser
from construction_docs.application.interfaces.storage import IStorageService
from construction_docs.application.services.capability_policy import (
    CapabilityPolicy,
    default_policy,
)
from construction_docs.application.services.file_validator import FileValidator
from construction_docs.application.use_cases.documents import (
    DocumentDeletionService,
    DocumentQueryService,
    DocumentUploadService,
)
from construction_docs.core.config import get_settings
from construction_docs.domain.enums import Capability
from construction_docs.domain.exceptions import (
    AuthenticationException,
    DocumentServiceException,
)
from construction_docs.infrastructure.external.storage import StorageFactory
from construction_docs.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
)
from construction_docs.infrastructure.persistence.repositories import (
    ConstructionRepository,
    DocumentRepository,
)
from construction_docs.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


def _user_from_token(token: str) -> CurrentUser:
    """Decode a bearer token (sub = user id, role claim = role)."""
    try:
        payload = verify_token(token)
    except ValueError as e:
        raise AuthenticationException(str(e)) from e
    role = payload.get("role")
    return CurrentUser(id=str(payload["sub"]), role=role if isinstance(role, str) else None)


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(_http_bearer)
    ],
) -> CurrentUser:
    """Resolve the caller from the bearer token."""
    if credentials is None:
        raise AuthenticationException("Missing bearer token")
    return _user_from_token(credentials.credentials)


def get_capability_policy() -> CapabilityPolicy:
    return default_policy


def require_capability(capability: Capability):
    """Dependency factory: authenticate, then require capability for the caller's role."""

    async def _check(
        user: Annotated[CurrentUser, Depends(get_current_user)],
        policy: Annotated[CapabilityPolicy, Depends(get_capability_policy)],
    ) -> CurrentUser:
        policy.require(user.role, capability)
        return user

    return _check


def get_storage_service(request: Request) -> IStorageService:
    """Storage created in lifespan (app.state.storage); built on demand otherwise."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = StorageFactory.create_storage_service()
        request.app.state.storage = storage
    return storage


def get_file_validator() -> FileValidator:
    return FileValidator(max_size=get_settings().max_upload_size)


async def get_document_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DocumentRepository:
    """Document repository for read operations."""
    return DocumentRepository(db)


async def get_document_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> DocumentRepository:
    """Document repository inside the request transaction."""
    return DocumentRepository(db)


async def get_construction_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ConstructionRepository:
    """Construction repository sharing the write transaction (row lock holder)."""
    return ConstructionRepository(db)


async def get_document_upload_service(
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo_for_write)],
    construction_repo: Annotated[
        ConstructionRepository, Depends(get_construction_repo_for_write)
    ],
    policy: Annotated[CapabilityPolicy, Depends(get_capability_policy)],
    validator: Annotated[FileValidator, Depends(get_file_validator)],
) -> DocumentUploadService:
    """Build DocumentUploadService for upload, project upload and replace."""
    return DocumentUploadService(
        storage_service=storage,
        document_repo=document_repo,
        construction_repo=construction_repo,
        policy=policy,
        file_validator=validator,
    )


async def get_document_deletion_service(
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo_for_write)],
    policy: Annotated[CapabilityPolicy, Depends(get_capability_policy)],
) -> DocumentDeletionService:
    return DocumentDeletionService(
        storage_service=storage, document_repo=document_repo, policy=policy
    )


async def get_document_query_service(
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo)],
    policy: Annotated[CapabilityPolicy, Depends(get_capability_policy)],
) -> DocumentQueryService:
    """Build DocumentQueryService for metadata, download and listing."""
    return DocumentQueryService(
        storage_service=storage, document_repo=document_repo, policy=policy
    )


# Capability a body-carrying write needs, by HTTP method.
_BODY_CAPABILITIES: dict[str, Capability] = {
    "POST": Capability.UPLOAD_DOCUMENT,
    "PUT": Capability.REPLACE_DOCUMENT,
}


def authorize_oversized_body(
    scope: dict, policy: CapabilityPolicy = default_policy
) -> DocumentServiceException | None:
    """Authorization verdict for a request the size limit is about to refuse.

    Runs the same token and capability checks as the routes, so callers
    without the write capability get 401/403 rather than FILE_TOO_LARGE.
    Returns None when the caller may write (the size error then stands).
    """
    capability = _BODY_CAPABILITIES.get(scope.get("method", ""))
    if capability is None:
        return None
    scheme, _, token = (Headers(scope=scope).get("authorization") or "").partition(" ")
    try:
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationException("Missing bearer token")
        user = _user_from_token(token.strip())
        policy.require(user.role, capability)
    except DocumentServiceException as e:
        return e
    return None
