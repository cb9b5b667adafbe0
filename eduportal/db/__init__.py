"""Database utilities for the EduPortal backend."""

from .base import Base
from .models import DocumentModel
from .session import build_engine, build_session_factory, session_scope

__all__ = [
    "Base",
    "DocumentModel",
    "build_engine",
    "build_session_factory",
    "session_scope",
]
