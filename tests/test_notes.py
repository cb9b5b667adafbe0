from __future__ import annotations

import pytest

from eduportal.errors import ValidationError
from eduportal.notes import NOTES_COLLECTION, NotesService
from tests.fakes import RecordingStore


@pytest.fixture()
def notes(recording_store: RecordingStore) -> NotesService:
    return NotesService(recording_store)


def test_created_note_is_listed_for_its_owner(notes: NotesService) -> None:
    saved = notes.create("uid-1", "Physics", "Optics", "Snell's law")

    listed = notes.list_by_owner("uid-1")

    assert [note.id for note in listed] == [saved.id]
    assert listed[0].subject == "Physics"
    assert listed[0].chapter == "Optics"
    assert listed[0].content == "Snell's law"
    assert listed[0].firebase_uid == "uid-1"


def test_notes_are_scoped_to_owner(notes: NotesService) -> None:
    notes.create("uid-1", "Math", "Algebra", "x + 1")
    notes.create("uid-2", "Art", "Color", "red")

    assert [note.subject for note in notes.list_by_owner("uid-2")] == ["Art"]
    assert notes.list_by_owner("uid-3") == []


def test_duplicate_content_creates_distinct_notes(notes: NotesService) -> None:
    first = notes.create("uid-1", "Math", "Algebra", "same")
    second = notes.create("uid-1", "Math", "Algebra", "same")

    assert first.id != second.id
    assert len(notes.list_by_owner("uid-1")) == 2


def test_missing_text_fields_default_to_empty(notes: NotesService) -> None:
    saved = notes.create("uid-1", None, None, None)

    assert (saved.subject, saved.chapter, saved.content) == ("", "", "")


@pytest.mark.parametrize("owner", [None, "", "  "])
def test_owner_is_required(notes: NotesService, recording_store: RecordingStore, owner) -> None:
    with pytest.raises(ValidationError):
        notes.create(owner, "Math", "Algebra", "x")
    assert recording_store.writes == []


def test_empty_owner_lists_nothing_without_querying(notes: NotesService, recording_store: RecordingStore) -> None:
    assert notes.list_by_owner("") == []
    assert ("query", NOTES_COLLECTION) not in recording_store.calls


def test_owner_is_stored_verbatim(notes: NotesService) -> None:
    saved = notes.create(" uid-9 ", "Math", "Algebra", "x")

    assert saved.firebase_uid == " uid-9 "
    assert [note.id for note in notes.list_by_owner(" uid-9 ")] == [saved.id]
    assert notes.list_by_owner("uid-9") == []
