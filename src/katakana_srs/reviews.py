"""Review sessions: due items and answer submission."""
from datetime import datetime

from loguru import logger

from katakana_srs.db import Database
from katakana_srs.errors import InvalidInput, RecordNotFound
from katakana_srs.models import (
    DueReview, ReviewRecord, Symbol, SymbolStatus, format_ts, parse_ts,
)
from katakana_srs.scheduler import apply_answer, check_correctness

JOINED_COLUMNS = """
    s.id AS symbol_id, s.character, s.romaji, s.category, s.batch_number,
    r.id AS review_id, r.stage, r.next_due, r.correct_count, r.incorrect_count,
    r.last_reviewed, r.created_at AS review_created_at
"""


def _symbol_from_joined(row) -> Symbol:
    return Symbol(
        id=row["symbol_id"],
        character=row["character"],
        romaji=row["romaji"],
        category=row["category"],
        batch_number=row["batch_number"],
    )


def _review_from_joined(row) -> ReviewRecord | None:
    if row["review_id"] is None:
        return None
    return ReviewRecord(
        id=row["review_id"],
        symbol_id=row["symbol_id"],
        stage=row["stage"],
        next_due=parse_ts(row["next_due"]),
        correct_count=row["correct_count"],
        incorrect_count=row["incorrect_count"],
        last_reviewed=parse_ts(row["last_reviewed"]),
        created_at=parse_ts(row["review_created_at"]),
    )


def _check_review_id(review_id) -> int:
    if isinstance(review_id, int) and not isinstance(review_id, bool):
        return review_id
    if isinstance(review_id, str) and review_id.strip().isdigit():
        return int(review_id)
    raise InvalidInput(f"Review id must be an integer, got {review_id!r}")


def get_review(db: Database, review_id) -> ReviewRecord:
    review_id = _check_review_id(review_id)
    row = db.query_one("SELECT * FROM reviews WHERE id = ?", (review_id,))
    if row is None:
        raise RecordNotFound(review_id)
    return ReviewRecord.from_row(row)


def get_all_reviews(db: Database) -> list[ReviewRecord]:
    rows = db.query("SELECT * FROM reviews ORDER BY id")
    return [ReviewRecord.from_row(r) for r in rows]


def get_due_reviews(db: Database, now: datetime | None = None) -> list[DueReview]:
    """Reviews due at ``now`` with their symbol and note, soonest first."""
    now = now or datetime.now()
    rows = db.query(
        f"""SELECT {JOINED_COLUMNS}, n.note
        FROM reviews r
        JOIN symbols s ON r.symbol_id = s.id
        LEFT JOIN user_notes n ON n.symbol_id = s.id
        WHERE r.next_due <= ?
        ORDER BY r.next_due ASC, r.id ASC""",
        (format_ts(now),),
    )
    return [
        DueReview(review=_review_from_joined(r), symbol=_symbol_from_joined(r), note=r["note"])
        for r in rows
    ]


def get_all_symbols_with_reviews(db: Database) -> list[SymbolStatus]:
    """Every symbol, with its review record or None if not learned yet."""
    rows = db.query(
        f"""SELECT {JOINED_COLUMNS}
        FROM symbols s
        LEFT JOIN reviews r ON r.symbol_id = s.id
        ORDER BY s.id ASC"""
    )
    return [SymbolStatus(symbol=_symbol_from_joined(r), review=_review_from_joined(r)) for r in rows]


def submit_answer(db: Database, review_id, is_correct, now: datetime | None = None) -> ReviewRecord:
    """Apply one answer to a review record and persist it atomically."""
    review_id = _check_review_id(review_id)
    check_correctness(is_correct)
    now = now or datetime.now()
    with db.transaction() as conn:
        row = conn.execute("SELECT * FROM reviews WHERE id = ?", (review_id,)).fetchone()
        if row is None:
            raise RecordNotFound(review_id)
        updated = apply_answer(ReviewRecord.from_row(row), is_correct, now)
        conn.execute(
            """UPDATE reviews
            SET stage = ?, next_due = ?, correct_count = ?, incorrect_count = ?, last_reviewed = ?
            WHERE id = ?""",
            (
                updated.stage,
                format_ts(updated.next_due),
                updated.correct_count,
                updated.incorrect_count,
                format_ts(updated.last_reviewed),
                review_id,
            ),
        )
    logger.debug(
        "Review {} answered {}: stage {} -> {}, next due {}",
        review_id, "correct" if is_correct else "incorrect",
        row["stage"], updated.stage, format_ts(updated.next_due),
    )
    return updated
