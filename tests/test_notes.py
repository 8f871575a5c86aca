import pytest

from katakana_srs.errors import InvalidInput, NotFound
from katakana_srs.notes import delete_note, get_note, save_note


def test_save_note(seeded_db):
    note = save_note(seeded_db, 1, "Looks like an axe")
    assert note.symbol_id == 1
    assert note.note == "Looks like an axe"
    assert note.created_at is not None


def test_save_note_updates_existing(seeded_db):
    first = save_note(seeded_db, 1, "old")
    second = save_note(seeded_db, 1, "new")
    assert second.id == first.id
    assert get_note(seeded_db, 1).note == "new"
    assert seeded_db.scalar("SELECT COUNT(*) FROM user_notes") == 1


def test_save_note_requires_text(seeded_db):
    with pytest.raises(InvalidInput):
        save_note(seeded_db, 1, "   ")


def test_save_note_unknown_symbol(seeded_db):
    with pytest.raises(NotFound):
        save_note(seeded_db, 999, "text")


def test_delete_note(seeded_db):
    save_note(seeded_db, 1, "text")
    delete_note(seeded_db, 1)
    assert get_note(seeded_db, 1) is None
    delete_note(seeded_db, 1)  # no-op when absent
