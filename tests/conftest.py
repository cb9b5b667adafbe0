from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

os.environ.setdefault("EDUPORTAL_PERSISTENCE_MODE", "legacy")
os.environ.setdefault("EDUPORTAL_EMAIL_BACKEND", "log")

from eduportal.db.base import Base  # noqa: E402
from eduportal.db.session import build_session_factory  # noqa: E402
from eduportal.dependencies import get_document_store, get_welcome_mailer  # noqa: E402
from eduportal.document_store import DatabaseDocumentStore, DocumentStore, JsonFileDocumentStore  # noqa: E402
from eduportal.mailer import WelcomeMailer  # noqa: E402
from eduportal.main import app  # noqa: E402

from tests.fakes import FakeEmailSender, RecordingStore  # noqa: E402


@pytest.fixture()
def database_store(tmp_path: Path) -> Iterator[DatabaseDocumentStore]:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'documents.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield DatabaseDocumentStore(build_session_factory(engine))
    finally:
        engine.dispose()


@pytest.fixture()
def json_store(tmp_path: Path) -> JsonFileDocumentStore:
    return JsonFileDocumentStore(tmp_path / "documents.json")


@pytest.fixture(params=["database", "legacy"])
def store(request: pytest.FixtureRequest) -> DocumentStore:
    if request.param == "database":
        return request.getfixturevalue("database_store")
    return request.getfixturevalue("json_store")


@pytest.fixture()
def recording_store(store: DocumentStore) -> RecordingStore:
    return RecordingStore(store)


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def client(recording_store: RecordingStore, email_sender: FakeEmailSender) -> Iterator[TestClient]:
    app.dependency_overrides[get_document_store] = lambda: recording_store
    app.dependency_overrides[get_welcome_mailer] = lambda: WelcomeMailer(email_sender, "portal@example.com")
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
