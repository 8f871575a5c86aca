"""Lesson batches and turning completed lessons into review records."""
from datetime import datetime

from loguru import logger

from katakana_srs.config import get_settings
from katakana_srs.db import Database
from katakana_srs.errors import AlreadyCompleted, InvalidInput, NotFound
from katakana_srs.models import LessonBatch, LessonItem, Symbol, format_ts
from katakana_srs.stages import Stage, floor_to_hour, interval

SEED_POLICIES = ("first_attempt", "stage_zero")


def get_lesson_batches(db: Database) -> list[LessonBatch]:
    rows = db.query("SELECT * FROM lesson_batches ORDER BY batch_number ASC")
    return [LessonBatch.from_row(r) for r in rows]


def get_lesson_batch(db: Database, batch_number: int) -> LessonBatch:
    row = db.query_one("SELECT * FROM lesson_batches WHERE batch_number = ?", (batch_number,))
    if row is None:
        raise NotFound(f"Lesson batch not found: {batch_number}")
    return LessonBatch.from_row(row)


def get_next_lesson(db: Database) -> LessonBatch | None:
    """The lowest-numbered batch not completed yet, or None when all are done."""
    row = db.query_one(
        "SELECT * FROM lesson_batches WHERE completed = 0 ORDER BY batch_number ASC LIMIT 1"
    )
    return LessonBatch.from_row(row) if row else None


def get_available_lessons_count(db: Database) -> int:
    return db.scalar("SELECT COUNT(*) FROM lesson_batches WHERE completed = 0")


def get_lesson_items(db: Database, batch_number: int) -> list[LessonItem]:
    rows = db.query(
        """SELECT s.*, n.note
        FROM symbols s
        LEFT JOIN user_notes n ON n.symbol_id = s.id
        WHERE s.batch_number = ?
        ORDER BY s.id ASC""",
        (batch_number,),
    )
    return [LessonItem(symbol=Symbol.from_row(r), note=r["note"]) for r in rows]


def seed_review(correct_first_try: bool, now: datetime, policy: str = "first_attempt") -> dict:
    """Initial stage, counts and due time for a newly learned symbol.

    The due time is rounded down to the hour so lessons finished within the
    same hour come up for review together.
    """
    if policy not in SEED_POLICIES:
        raise InvalidInput(f"Unknown lesson seed policy: {policy!r}")
    if policy == "first_attempt" and correct_first_try:
        stage = Stage.APPRENTICE_2
    else:
        stage = Stage.APPRENTICE_1
    return {
        "stage": int(stage),
        "next_due": floor_to_hour(now + interval(stage)),
        "correct_count": 1 if correct_first_try else 0,
        "incorrect_count": 0 if correct_first_try else 1,
    }


def complete_lesson(
    db: Database,
    batch_number: int,
    first_attempts: dict[int, bool] | None = None,
    now: datetime | None = None,
    policy: str | None = None,
    strict: bool = False,
) -> int:
    """Mark a batch completed and create review records for its symbols.

    ``first_attempts`` maps symbol id to whether the first quiz answer for that
    symbol was correct; symbols missing from it count as incorrect. Completing
    an already completed batch changes nothing (or raises AlreadyCompleted
    when ``strict``). Returns the number of review records created.
    """
    if isinstance(batch_number, bool) or not isinstance(batch_number, int):
        raise InvalidInput(f"Batch number must be an integer, got {batch_number!r}")
    now = now or datetime.now()
    policy = policy or get_settings().lesson_seed_policy
    first_attempts = first_attempts or {}

    with db.transaction() as conn:
        batch = conn.execute(
            "SELECT completed FROM lesson_batches WHERE batch_number = ?", (batch_number,)
        ).fetchone()
        if batch is None:
            raise NotFound(f"Lesson batch not found: {batch_number}")
        if batch["completed"]:
            if strict:
                raise AlreadyCompleted(batch_number)
            logger.info("Lesson batch {} already completed, nothing to do", batch_number)
            return 0

        conn.execute(
            "UPDATE lesson_batches SET completed = 1, completed_at = ? WHERE batch_number = ?",
            (format_ts(now), batch_number),
        )
        symbol_ids = [
            r["id"] for r in conn.execute(
                "SELECT id FROM symbols WHERE batch_number = ? ORDER BY id", (batch_number,)
            ).fetchall()
        ]
        created = 0
        for symbol_id in symbol_ids:
            seed = seed_review(bool(first_attempts.get(symbol_id, False)), now, policy)
            cursor = conn.execute(
                """INSERT OR IGNORE INTO reviews
                (symbol_id, stage, next_due, correct_count, incorrect_count, created_at)
                VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    symbol_id,
                    seed["stage"],
                    format_ts(seed["next_due"]),
                    seed["correct_count"],
                    seed["incorrect_count"],
                    format_ts(now),
                ),
            )
            created += cursor.rowcount

    logger.info("Completed lesson batch {}: {} review(s) created", batch_number, created)
    return created
