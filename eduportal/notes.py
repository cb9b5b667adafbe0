"""Per-user study notes."""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .document_store import Document, DocumentStore
from .errors import ValidationError

logger = logging.getLogger(__name__)

NOTES_COLLECTION = "notes"
OWNER_FIELD = "firebaseUid"


class Note(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    firebase_uid: str = Field(..., alias="firebaseUid")
    subject: str = ""
    chapter: str = ""
    content: str = ""

    @classmethod
    def from_document(cls, document: Document) -> "Note":
        return cls.model_validate({**document.data, "id": document.id})


class NotesService:
    """Create and list notes; notes are immutable once saved."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def create(
        self,
        owner: Optional[str],
        subject: Optional[str] = "",
        chapter: Optional[str] = "",
        content: Optional[str] = "",
    ) -> Note:
        if owner is None or not owner.strip():
            raise ValidationError("Firebase UID is required.")
        payload = {
            "subject": subject or "",
            "chapter": chapter or "",
            "content": content or "",
            OWNER_FIELD: owner,
        }
        document = self._store.add(NOTES_COLLECTION, payload)
        logger.info("Saved note %s for %s", document.id, payload[OWNER_FIELD])
        return Note.from_document(document)

    def list_by_owner(self, owner: str) -> List[Note]:
        if not owner or not owner.strip():
            return []
        return [Note.from_document(doc) for doc in self._store.query(NOTES_COLLECTION, OWNER_FIELD, owner)]


__all__ = ["NOTES_COLLECTION", "Note", "NotesService"]
