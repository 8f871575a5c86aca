"""Versioned data migrations over existing review records.

Each migration is applied at most once; the ``schema_migrations`` table
records which versions have run. A migration's ``apply`` is a pure function
from (record, now) to the record's new state, or None to leave it alone.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from katakana_srs.db import Database
from katakana_srs.models import ReviewRecord, format_ts
from katakana_srs.stages import floor_to_hour, interval


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    apply: Callable[[ReviewRecord, datetime], Optional[ReviewRecord]]


def rebase_next_due(record: ReviewRecord, now: datetime) -> Optional[ReviewRecord]:
    """Reschedule a pending review onto the current interval table.

    Overdue reviews are left as they are. The new time is anchored on the last
    answer (or on creation for never-answered records) and rounded down to the
    hour; if that is already in the past the review becomes due this hour.
    """
    if record.next_due <= now:
        return None
    anchor = record.last_reviewed or record.created_at
    if anchor is None:
        return None
    next_due = floor_to_hour(anchor + interval(record.stage))
    if next_due <= now:
        next_due = floor_to_hour(now)
    if next_due == record.next_due:
        return None
    return replace(record, next_due=next_due)


MIGRATIONS = [
    Migration(1, "accelerated_intervals", rebase_next_due),
]


def applied_versions(db: Database) -> set[int]:
    return {row["version"] for row in db.query("SELECT version FROM schema_migrations")}


def run_migration(db: Database, migration: Migration, now: datetime) -> int:
    """Apply one migration and record it, atomically. Returns rows changed."""
    changed = 0
    with db.transaction() as conn:
        if conn.execute(
            "SELECT 1 FROM schema_migrations WHERE version = ?", (migration.version,)
        ).fetchone():
            return 0
        for row in conn.execute("SELECT * FROM reviews ORDER BY id").fetchall():
            updated = migration.apply(ReviewRecord.from_row(row), now)
            if updated is None:
                continue
            conn.execute(
                "UPDATE reviews SET stage = ?, next_due = ? WHERE id = ?",
                (updated.stage, format_ts(updated.next_due), updated.id),
            )
            changed += 1
        conn.execute(
            "INSERT INTO schema_migrations (version, name, applied_at) VALUES (?, ?, ?)",
            (migration.version, migration.name, format_ts(now)),
        )
    return changed


def apply_migrations(db: Database, now: datetime | None = None, migrations=None) -> list[int]:
    """Run every migration not applied yet, in version order.

    Returns the versions applied by this call.
    """
    now = now or datetime.now()
    migrations = sorted(migrations if migrations is not None else MIGRATIONS, key=lambda m: m.version)
    done = applied_versions(db)
    applied = []
    for migration in migrations:
        if migration.version in done:
            continue
        changed = run_migration(db, migration, now)
        logger.info("Migration {} ({}) updated {} review(s)", migration.version, migration.name, changed)
        applied.append(migration.version)
    return applied
