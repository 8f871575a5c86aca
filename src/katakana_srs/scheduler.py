"""SRS scheduling: stage transitions and next review times.

Everything here is a pure function of (stage, correctness, now). A correct
answer moves an item up one stage, capped at Enlightened; a wrong answer sends
it all the way back to Apprentice I. The next review lands exactly one stage
interval after the answer.
"""
from dataclasses import replace
from datetime import datetime

from katakana_srs.errors import InvalidInput
from katakana_srs.models import ReviewRecord
from katakana_srs.stages import MAX_STAGE, MIN_STAGE, Stage, interval, to_stage


def check_correctness(is_correct) -> bool:
    if not isinstance(is_correct, bool):
        raise InvalidInput(f"is_correct must be a boolean, got {is_correct!r}")
    return is_correct


def next_stage(stage: int, is_correct: bool) -> Stage:
    stage = to_stage(stage)
    if check_correctness(is_correct):
        return Stage(min(stage + 1, MAX_STAGE))
    return MIN_STAGE


def schedule(stage: int, is_correct: bool, now: datetime) -> tuple[Stage, datetime]:
    """Return (new_stage, next_due) for an answer given at ``now``."""
    new_stage = next_stage(stage, is_correct)
    return new_stage, now + interval(new_stage)


def apply_answer(record: ReviewRecord, is_correct: bool, now: datetime) -> ReviewRecord:
    """Return a copy of ``record`` updated for one answer."""
    new_stage, next_due = schedule(record.stage, is_correct, now)
    return replace(
        record,
        stage=int(new_stage),
        next_due=next_due,
        correct_count=record.correct_count + (1 if is_correct else 0),
        incorrect_count=record.incorrect_count + (0 if is_correct else 1),
        last_reviewed=now,
    )
