"""ORM models. Import here so Alembic autogenerate sees every table."""

from construction_docs.infrastructure.persistence.models.construction import (
    Construction,
)
from construction_docs.infrastructure.persistence.models.document import Document

__all__ = ["Construction", "Document"]
