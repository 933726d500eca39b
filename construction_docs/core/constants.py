"""Core constants: upload limits and the MIME types accepted for documents.

Single source of truth shared by file validation, settings defaults and the
request size middleware.
"""

# 100 MiB; a file of exactly this size is accepted.
MAX_UPLOAD_SIZE = 100 * 1024 * 1024

ALLOWED_MIME_TYPES: frozenset[str] = frozenset(
    {
        "application/pdf",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "image/dwg",
        "application/dwg",
        "application/autocad",
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/webp",
        "image/svg+xml",
    }
)

# Human-readable list for error messages.
ALLOWED_FILE_KINDS = "PDF, DOC, DOCX, XLS, XLSX, DWG, JPG, PNG, GIF, BMP, WebP, SVG"

# Header set on replace responses with the newly minted version number.
DOCUMENT_VERSION_HEADER = "X-Document-Version"
