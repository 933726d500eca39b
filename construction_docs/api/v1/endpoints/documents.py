"""Document API: thin routes delegating to the lifecycle and query services.

Form fields are optional at the HTTP layer so missing or malformed values
surface as the service's domain errors, in the service's check order.
"""

import os
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile
from fastapi.responses import StreamingResponse

from construction_docs.api.v1.dependencies import (
    get_document_deletion_service,
    get_document_query_service,
    get_document_upload_service,
    require_capability,
)
from construction_docs.application.dtos.document import DocumentFilter, FileUpload
from construction_docs.application.dtos.user import CurrentUser
from construction_docs.application.use_cases.documents import (
    DocumentDeletionService,
    DocumentQueryService,
    DocumentUploadService,
)
from construction_docs.core.constants import DOCUMENT_VERSION_HEADER
from construction_docs.core.limiter import limit_upload, limit_writes
from construction_docs.domain.enums import Capability
from construction_docs.domain.exceptions import ValidationException
from construction_docs.schemas.document import (
    ConstructionVersionsResponse,
    DocumentResponse,
)

router = APIRouter()

_can_upload = require_capability(Capability.UPLOAD_DOCUMENT)
_can_replace = require_capability(Capability.REPLACE_DOCUMENT)
_can_delete = require_capability(Capability.DELETE_DOCUMENT)
_can_download = require_capability(Capability.DOWNLOAD_DOCUMENT)
_can_view = require_capability(Capability.VIEW_DOCUMENT_METADATA)


def _to_file_upload(file: UploadFile | None) -> FileUpload:
    """Wrap the multipart part; size falls back to measuring the spooled file."""
    if file is None:
        raise ValidationException("File is required", field="file")
    size = file.size
    if size is None:
        file.file.seek(0, os.SEEK_END)
        size = file.file.tell()
        file.file.seek(0)
    return FileUpload(
        file_data=file.file,
        filename=file.filename or "",
        mime_type=file.content_type,
        size=size,
    )


@router.post("/upload", response_model=DocumentResponse, status_code=201)
@limit_upload
async def upload_document(
    request: Request,
    user: Annotated[CurrentUser, Depends(_can_upload)],
    upload_svc: Annotated[DocumentUploadService, Depends(get_document_upload_service)],
    file: UploadFile | None = File(None),
    category: str | None = Form(None, alias="type"),
    project_id: str | None = Form(None, alias="projectId"),
    construction_id: str | None = Form(None, alias="constructionId"),
    version: str | None = Form(None),
    context: str | None = Form(None),
):
    """Upload a construction document. Without `version` it opens the next version."""
    return await upload_svc.upload_document(
        role=user.role,
        file=_to_file_upload(file),
        category=category,
        construction_id=construction_id,
        project_id=project_id,
        version=version,
        context=context,
        uploaded_by=user.id,
    )


@router.post("/project/upload", response_model=DocumentResponse, status_code=201)
@limit_upload
async def upload_project_document(
    request: Request,
    user: Annotated[CurrentUser, Depends(_can_upload)],
    upload_svc: Annotated[DocumentUploadService, Depends(get_document_upload_service)],
    file: UploadFile | None = File(None),
    category: str | None = Form(None, alias="type"),
    project_id: str | None = Form(None, alias="projectId"),
    context: str | None = Form(None),
):
    """Upload a project-scoped document (tz or contract)."""
    return await upload_svc.upload_project_document(
        role=user.role,
        file=_to_file_upload(file),
        category=category,
        project_id=project_id,
        context=context,
        uploaded_by=user.id,
    )


@router.get("/construction/{construction_id}", response_model=list[DocumentResponse])
async def list_construction_documents(
    construction_id: str,
    _: Annotated[CurrentUser, Depends(_can_view)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
):
    """Every document of the construction, all versions, as a flat list."""
    return await query_svc.by_construction(construction_id)


@router.get(
    "/construction/{construction_id}/versions",
    response_model=ConstructionVersionsResponse,
)
async def get_construction_versions(
    construction_id: str,
    _: Annotated[CurrentUser, Depends(_can_view)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
):
    """Documents grouped into version folders, newest first."""
    return await query_svc.version_overview(construction_id)


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    _: Annotated[CurrentUser, Depends(_can_view)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
    project_id: str | None = Query(None, alias="projectId"),
    construction_id: str | None = Query(None, alias="constructionId"),
    category: str | None = Query(None),
    context: str | None = Query(None),
):
    """Compound filter; projectId or constructionId is required."""
    return await query_svc.list_documents(
        DocumentFilter(
            construction_id=construction_id,
            project_id=project_id,
            category=category,
            context=context,
        )
    )


@router.get("/{document_id}/download")
async def download_document(
    document_id: str,
    user: Annotated[CurrentUser, Depends(_can_download)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
):
    """Stream the stored bytes with the stored MIME type and original filename."""
    doc, stream = await query_svc.open_download(user.role, document_id)
    return StreamingResponse(
        stream,
        media_type=doc.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(doc.original_name)}",
            "Content-Length": str(doc.file_size),
        },
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    user: Annotated[CurrentUser, Depends(_can_view)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
):
    return await query_svc.get_document_metadata(user.role, document_id)


@router.put("/{document_id}", response_model=DocumentResponse, status_code=201)
@limit_upload
async def replace_document(
    request: Request,
    response: Response,
    document_id: str,
    user: Annotated[CurrentUser, Depends(_can_replace)],
    upload_svc: Annotated[DocumentUploadService, Depends(get_document_upload_service)],
    file: UploadFile | None = File(None),
):
    """Replace a document: creates a new document at its version + 1.

    The new version number is also sent in the X-Document-Version header.
    """
    created = await upload_svc.replace_document(
        role=user.role,
        document_id=document_id,
        file=_to_file_upload(file),
        uploaded_by=user.id,
    )
    response.headers[DOCUMENT_VERSION_HEADER] = str(created.version)
    return created


@router.delete("/{document_id}", status_code=204)
@limit_writes
async def delete_document(
    request: Request,
    document_id: str,
    user: Annotated[CurrentUser, Depends(_can_delete)],
    delete_svc: Annotated[
        DocumentDeletionService, Depends(get_document_deletion_service)
    ],
):
    """Delete permanently. Other versions keep their numbers."""
    await delete_svc.delete_document(role=user.role, document_id=document_id)
    return Response(status_code=204)
