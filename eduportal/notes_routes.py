"""Notes REST endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from .dependencies import get_notes_service
from .errors import PortalError
from .notes import Note, NotesService

router = APIRouter(prefix="/api/notes", tags=["notes"])
logger = logging.getLogger(__name__)


class NoteCreateRequest(BaseModel):
    subject: Optional[str] = ""
    chapter: Optional[str] = ""
    content: Optional[str] = ""
    firebaseUid: Optional[str] = None


@router.get("/{uid}", response_model=List[Note], status_code=status.HTTP_200_OK)
def list_notes(uid: str, service: NotesService = Depends(get_notes_service)) -> List[Note]:
    return service.list_by_owner(uid)


@router.post("", response_model=Note, status_code=status.HTTP_201_CREATED)
def create_note(payload: NoteCreateRequest, service: NotesService = Depends(get_notes_service)) -> Note:
    try:
        return service.create(payload.firebaseUid, payload.subject, payload.chapter, payload.content)
    except PortalError as exc:
        if exc.status_code >= 500:
            logger.exception("Failed to save note for %s", payload.firebaseUid)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
