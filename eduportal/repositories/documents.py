"""Database-backed document repository."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import DocumentModel


def _require_key(value: str, label: str) -> str:
    if not value.strip():
        raise ValueError(f"{label} cannot be empty.")
    return value


class DocumentRepository:
    """Persistence helper exposing collection/document semantics over one SQL table."""

    def get(self, session: Session, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        model = self._find(session, collection, document_id)
        if model is None:
            return None
        return copy.deepcopy(model.data)

    def set(
        self,
        session: Session,
        collection: str,
        document_id: str,
        data: Mapping[str, Any],
    ) -> Dict[str, Any]:
        model = self._find(session, collection, document_id)
        if model is None:
            model = DocumentModel(
                collection=_require_key(collection, "Collection"),
                document_id=_require_key(document_id, "Document id"),
            )
            session.add(model)
        model.data = copy.deepcopy(dict(data))
        session.flush()
        return copy.deepcopy(model.data)

    def update(
        self,
        session: Session,
        collection: str,
        document_id: str,
        fields: Mapping[str, Any],
    ) -> Optional[Dict[str, Any]]:
        model = self._find(session, collection, document_id)
        if model is None:
            return None
        # Reassign rather than mutate so the JSON column is flagged dirty.
        model.data = {**model.data, **copy.deepcopy(dict(fields))}
        session.flush()
        return copy.deepcopy(model.data)

    def query(
        self,
        session: Session,
        collection: str,
        field: str,
        value: Any,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        column = DocumentModel.data[field]
        if isinstance(value, bool):
            condition = column.as_boolean() == value
        elif isinstance(value, int):
            condition = column.as_integer() == value
        elif isinstance(value, str):
            condition = column.as_string() == value
        else:
            raise ValueError(f"Unsupported query value type: {type(value).__name__}")
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.collection == collection, condition)
            .order_by(DocumentModel.created_at, DocumentModel.id)
        )
        return [(model.document_id, copy.deepcopy(model.data)) for model in session.execute(stmt).scalars()]

    def _find(self, session: Session, collection: str, document_id: str) -> Optional[DocumentModel]:
        stmt = select(DocumentModel).where(
            DocumentModel.collection == _require_key(collection, "Collection"),
            DocumentModel.document_id == _require_key(document_id, "Document id"),
        )
        return session.execute(stmt).scalar_one_or_none()


documents = DocumentRepository()

__all__ = ["DocumentRepository", "documents"]
