"""Document store table."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20261018_01_document_store"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("collection", sa.String(length=64), nullable=False),
        sa.Column("document_id", sa.String(length=128), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
    )
    op.create_index(
        "ix_documents_collection_document_id",
        "documents",
        ["collection", "document_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("ix_documents_collection_document_id", table_name="documents")
    op.drop_table("documents")
