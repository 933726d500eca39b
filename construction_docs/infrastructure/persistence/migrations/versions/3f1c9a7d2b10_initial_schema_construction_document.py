"""initial schema: construction and document

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18

construction is owned by the construction CRUD service; this service reads it
and locks its row while allocating document versions. document.version stays
nullable so rows imported from before versioning load (read as version 1).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "3f1c9a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "construction",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_construction_project_id", "construction", ["project_id"], unique=False
    )

    op.create_table(
        "document",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("original_name", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("file_path", sa.String(), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=True),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("construction_id", sa.String(), nullable=True),
        sa.Column("context", sa.String(length=32), nullable=True),
        sa.Column("checksum", sa.String(length=64), nullable=True),
        sa.Column("uploaded_by", sa.String(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["construction_id"], ["construction.id"], ondelete="RESTRICT"
        ),
        sa.CheckConstraint(
            "version IS NULL OR version >= 1", name="ck_document_version_positive"
        ),
    )
    op.create_index("ix_document_project_id", "document", ["project_id"], unique=False)
    op.create_index(
        "ix_document_construction_id", "document", ["construction_id"], unique=False
    )
    op.create_index(
        "ix_document_construction_version",
        "document",
        ["construction_id", "version"],
        unique=False,
    )
    op.create_index(
        "ix_document_project_category",
        "document",
        ["project_id", "category"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_document_project_category", table_name="document")
    op.drop_index("ix_document_construction_version", table_name="document")
    op.drop_index("ix_document_construction_id", table_name="document")
    op.drop_index("ix_document_project_id", table_name="document")
    op.drop_table("document")
    op.drop_index("ix_construction_project_id", table_name="construction")
    op.drop_table("construction")
