"""User notes attached to symbols."""
from datetime import datetime

from katakana_srs.db import Database
from katakana_srs.errors import InvalidInput, NotFound
from katakana_srs.models import UserNote, format_ts


def get_note(db: Database, symbol_id: int) -> UserNote | None:
    row = db.query_one("SELECT * FROM user_notes WHERE symbol_id = ?", (symbol_id,))
    return UserNote.from_row(row) if row else None


def save_note(db: Database, symbol_id: int, text: str) -> UserNote:
    """Create or replace the note for a symbol."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidInput("Note text is required")
    now = format_ts(datetime.now())
    with db.transaction() as conn:
        if conn.execute("SELECT 1 FROM symbols WHERE id = ?", (symbol_id,)).fetchone() is None:
            raise NotFound(f"Symbol not found: {symbol_id}")
        conn.execute(
            """INSERT INTO user_notes (symbol_id, note, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(symbol_id) DO UPDATE SET note = excluded.note, updated_at = excluded.updated_at""",
            (symbol_id, text, now, now),
        )
    return get_note(db, symbol_id)


def delete_note(db: Database, symbol_id: int) -> None:
    db.execute("DELETE FROM user_notes WHERE symbol_id = ?", (symbol_id,))
