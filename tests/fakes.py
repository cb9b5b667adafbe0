"""In-process doubles shared by the test modules."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from eduportal.document_store import Document, DocumentStore
from eduportal.errors import StoreUnavailableError
from eduportal.mailer import EmailMessage


class RecordingStore:
    """Wraps a store and records every call made through it."""

    def __init__(self, inner: DocumentStore) -> None:
        self.inner = inner
        self.mode = inner.mode
        self.calls: List[Tuple[str, str]] = []

    @property
    def writes(self) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[0] in {"set", "update", "add"}]

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get", collection))
        return self.inner.get(collection, document_id)

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("set", collection))
        return self.inner.set(collection, document_id, data)

    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update", collection))
        return self.inner.update(collection, document_id, fields)

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        self.calls.append(("add", collection))
        return self.inner.add(collection, data)

    def query(self, collection: str, field: str, value: Any) -> List[Document]:
        self.calls.append(("query", collection))
        return self.inner.query(collection, field, value)

    def ping(self) -> None:
        self.inner.ping()


class UnavailableStore:
    mode = "database"

    def _fail(self, *args: Any, **kwargs: Any) -> Any:
        raise StoreUnavailableError("connection refused")

    get = set = update = add = query = ping = _fail


class FakeEmailSender:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.sent: List[EmailMessage] = []
        self.error = error

    def send(self, message: EmailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
