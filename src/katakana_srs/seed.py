"""Seed the database with the lesson batches and the katakana catalog."""
import json
from datetime import datetime
from pathlib import Path

from loguru import logger

from katakana_srs.db import Database
from katakana_srs.models import format_ts

CONTENT_DIR = Path(__file__).parent / "content"


def load_lessons() -> list[dict]:
    """Lesson batches from lessons.json, ordered by batch number."""
    data = json.loads((CONTENT_DIR / "lessons.json").read_text(encoding="utf-8"))
    return sorted(data["batches"], key=lambda b: b["batch_number"])


def is_seeded(db: Database) -> bool:
    """Check whether the catalog has already been seeded."""
    return db.scalar("SELECT COUNT(*) FROM symbols") > 0


def seed_lesson_batches(db: Database) -> None:
    """Insert every lesson batch, not yet completed."""
    with db.transaction() as conn:
        for batch in load_lessons():
            conn.execute(
                "INSERT OR IGNORE INTO lesson_batches (batch_number, name, description, completed) VALUES (?, ?, ?, 0)",
                (batch["batch_number"], batch["name"], batch["description"]),
            )


def seed_symbols(db: Database) -> None:
    """Insert the catalog. Review records are only created by completing lessons."""
    created_at = format_ts(datetime.now())
    with db.transaction() as conn:
        for batch in load_lessons():
            for symbol in batch["symbols"]:
                conn.execute(
                    """INSERT OR IGNORE INTO symbols (character, romaji, category, batch_number, created_at)
                    VALUES (?, ?, ?, ?, ?)""",
                    (symbol["character"], symbol["romaji"], batch["category"], batch["batch_number"], created_at),
                )


def seed_all(db: Database) -> None:
    """Run all seed functions in order."""
    if is_seeded(db):
        return
    logger.info("Seeding lesson batches and katakana catalog")
    with db.transaction():
        seed_lesson_batches(db)
        seed_symbols(db)
    logger.info("Seeded {} symbols", db.scalar("SELECT COUNT(*) FROM symbols"))
