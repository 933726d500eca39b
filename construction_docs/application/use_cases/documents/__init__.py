"""Document use cases: lifecycle (upload, replace, delete) and queries."""

from construction_docs.application.use_cases.documents.document_operations import (
    DocumentDeletionService,
    DocumentUploadService,
)
from construction_docs.application.use_cases.documents.document_query import (
    DocumentQueryService,
    VersionOverview,
    filter_documents,
)

__all__ = [
    "DocumentDeletionService",
    "DocumentQueryService",
    "VersionOverview",
    "DocumentUploadService",
    "filter_documents",
]
