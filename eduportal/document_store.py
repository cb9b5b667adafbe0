"""Document store seam: collection/document persistence behind one narrow interface.

Two backends implement :class:`DocumentStore`:

* :class:`DatabaseDocumentStore` keeps every document in the ``documents``
  table through SQLAlchemy.
* :class:`JsonFileDocumentStore` keeps a single JSON file on disk and is meant
  for offline work and local development.

Backend failures are translated to :class:`StoreUnavailableError` so the HTTP
layer never sees driver exceptions.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import Settings
from .db.models import DocumentModel
from .db.session import build_engine, build_session_factory, session_scope
from .errors import NotFoundError, StoreUnavailableError
from .repositories.documents import DocumentRepository, documents

logger = logging.getLogger(__name__)

DOCUMENT_ID_LENGTH = 20


@dataclass(frozen=True)
class Document:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)


def new_document_id() -> str:
    return uuid.uuid4().hex[:DOCUMENT_ID_LENGTH]


class DocumentStore(Protocol):
    mode: str

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        ...

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        ...

    def query(self, collection: str, field: str, value: Any) -> List[Document]:
        ...

    def ping(self) -> None:
        ...


class DatabaseDocumentStore:
    mode = "database"

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        repository: DocumentRepository = documents,
    ) -> None:
        self._session_factory = session_factory
        self._repository = repository

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            with session_scope(self._session_factory, commit=False) as session:
                return self._repository.get(session, collection, document_id)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to read {collection}/{document_id}") from exc

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            with session_scope(self._session_factory) as session:
                return self._repository.set(session, collection, document_id, data)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to write {collection}/{document_id}") from exc

    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            with session_scope(self._session_factory) as session:
                updated = self._repository.update(session, collection, document_id, fields)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to update {collection}/{document_id}") from exc
        if updated is None:
            raise NotFoundError(f"No document {document_id!r} in collection {collection!r}.")
        return updated

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        document_id = new_document_id()
        stored = self.set(collection, document_id, data)
        return Document(id=document_id, data=stored)

    def query(self, collection: str, field: str, value: Any) -> List[Document]:
        try:
            with session_scope(self._session_factory, commit=False) as session:
                rows = self._repository.query(session, collection, field, value)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to query {collection} by {field}") from exc
        return [Document(id=document_id, data=data) for document_id, data in rows]

    def ping(self) -> None:
        try:
            with session_scope(self._session_factory, commit=False) as session:
                session.execute(select(DocumentModel.id).limit(1))
        except SQLAlchemyError as exc:
            raise StoreUnavailableError("Document table is not reachable") from exc


class JsonFileDocumentStore:
    """JSON-file persistence for offline mode; one lock serialises each file access."""

    mode = "legacy"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.RLock()

    def _load_unlocked(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailableError(f"Failed to read document file {self._path}") from exc
        if not isinstance(raw, dict):
            raise StoreUnavailableError(f"Document file {self._path} is malformed")
        return raw

    def _write_unlocked(self, payload: Dict[str, Dict[str, Dict[str, Any]]]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            staging = self._path.with_suffix(self._path.suffix + ".tmp")
            with staging.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            staging.replace(self._path)
        except OSError as exc:
            raise StoreUnavailableError(f"Failed to write document file {self._path}") from exc

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            stored = self._load_unlocked().get(collection, {}).get(document_id)
            return copy.deepcopy(stored) if stored is not None else None

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        with self._lock:
            payload = self._load_unlocked()
            payload.setdefault(collection, {})[document_id] = copy.deepcopy(dict(data))
            self._write_unlocked(payload)
            return copy.deepcopy(payload[collection][document_id])

    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        with self._lock:
            payload = self._load_unlocked()
            existing = payload.get(collection, {}).get(document_id)
            if existing is None:
                raise NotFoundError(f"No document {document_id!r} in collection {collection!r}.")
            existing.update(copy.deepcopy(dict(fields)))
            self._write_unlocked(payload)
            return copy.deepcopy(existing)

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        document_id = new_document_id()
        stored = self.set(collection, document_id, data)
        return Document(id=document_id, data=stored)

    def query(self, collection: str, field: str, value: Any) -> List[Document]:
        with self._lock:
            entries = self._load_unlocked().get(collection, {})
            return [
                Document(id=document_id, data=copy.deepcopy(data))
                for document_id, data in entries.items()
                if data.get(field) == value
            ]

    def ping(self) -> None:
        with self._lock:
            self._load_unlocked()


def create_document_store(settings: Settings) -> DocumentStore:
    """Build the process-wide store for the configured persistence mode."""
    if settings.persistence_mode == "legacy":
        path = Path(settings.legacy_store_path)
        logger.info("Using JSON document store at %s", path)
        return JsonFileDocumentStore(path)
    engine = build_engine(settings)
    logger.info("Using database document store (%s)", engine.url.render_as_string(hide_password=True))
    return DatabaseDocumentStore(build_session_factory(engine))


__all__ = [
    "DatabaseDocumentStore",
    "Document",
    "DocumentStore",
    "JsonFileDocumentStore",
    "create_document_store",
    "new_document_id",
]
