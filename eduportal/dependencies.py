"""Process-wide collaborators injected into request handlers."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from .config import get_settings
from .document_store import DocumentStore, create_document_store
from .mailer import WelcomeMailer, create_email_sender
from .notes import NotesService
from .user_profile import ProfileService


@lru_cache
def get_document_store() -> DocumentStore:
    return create_document_store(get_settings())


@lru_cache
def get_welcome_mailer() -> WelcomeMailer:
    settings = get_settings()
    return WelcomeMailer(create_email_sender(settings), settings.mail_from)


def get_profile_service(store: DocumentStore = Depends(get_document_store)) -> ProfileService:
    return ProfileService(store)


def get_notes_service(store: DocumentStore = Depends(get_document_store)) -> NotesService:
    return NotesService(store)


def reset_dependencies() -> None:
    """Drop cached collaborators so the next request rebuilds them from settings."""
    get_document_store.cache_clear()
    get_welcome_mailer.cache_clear()
    get_settings.cache_clear()


__all__ = [
    "get_document_store",
    "get_notes_service",
    "get_profile_service",
    "get_welcome_mailer",
    "reset_dependencies",
]
