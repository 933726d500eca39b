"""Document ORM model. File storage metadata and version number."""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from construction_docs.infrastructure.persistence.database import Base
from construction_docs.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
)


class Document(CuidMixin, TimestampMixin, Base):
    """Document record. Table: document.

    construction_id is NULL for project-scoped documents (tz, contract).
    version is nullable for rows written before versioning; readers treat
    NULL as 1. Rows are never updated after insert.
    """

    __tablename__ = "document"

    original_name: Mapped[str] = mapped_column(String, nullable=False)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    file_path: Mapped[str] = mapped_column(String, nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    mime_type: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    version: Mapped[int | None] = mapped_column(Integer, nullable=True, default=1)
    project_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    construction_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("construction.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    context: Mapped[str | None] = mapped_column(String(32), nullable=True)
    checksum: Mapped[str | None] = mapped_column(String(64), nullable=True)
    uploaded_by: Mapped[str | None] = mapped_column(String, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        Index("ix_document_construction_version", "construction_id", "version"),
        Index("ix_document_project_category", "project_id", "category"),
        CheckConstraint(
            "version IS NULL OR version >= 1", name="ck_document_version_positive"
        ),
    )
