"""ORM model backing the SQL flavour of the document store."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from .base import Base, TimestampMixin


class DocumentModel(TimestampMixin, Base):
    """One JSON document addressed by ``(collection, document_id)``."""

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_collection_document_id", "collection", "document_id", unique=True),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    collection: Mapped[str] = mapped_column(String(64), nullable=False)
    document_id: Mapped[str] = mapped_column(String(128), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)


__all__ = ["DocumentModel"]
