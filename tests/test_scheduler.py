from datetime import datetime, timedelta

import pytest

from katakana_srs.errors import InvalidInput, InvalidStage
from katakana_srs.models import ReviewRecord
from katakana_srs.scheduler import apply_answer, next_stage, schedule
from katakana_srs.stages import interval


def make_record(stage=0, correct=0, incorrect=0):
    return ReviewRecord(
        id=1, symbol_id=1, stage=stage, next_due=datetime(2026, 3, 10, 12, 0),
        correct_count=correct, incorrect_count=incorrect,
    )


@pytest.mark.parametrize("stage", range(7))
def test_correct_advances_one_stage(stage):
    assert next_stage(stage, True) == stage + 1


def test_correct_at_top_stage_stays():
    assert next_stage(7, True) == 7


@pytest.mark.parametrize("stage", range(8))
def test_incorrect_resets_to_first_stage(stage):
    assert next_stage(stage, False) == 0


@pytest.mark.parametrize("stage", range(8))
@pytest.mark.parametrize("is_correct", [True, False])
def test_next_due_is_exactly_one_interval_away(stage, is_correct, now):
    new_stage, next_due = schedule(stage, is_correct, now)
    assert next_due == now + interval(new_stage)
    assert next_due > now


@pytest.mark.parametrize("is_correct", [True, False])
def test_exactly_one_counter_increments(is_correct, now):
    updated = apply_answer(make_record(stage=2, correct=4, incorrect=3), is_correct, now)
    if is_correct:
        assert (updated.correct_count, updated.incorrect_count) == (5, 3)
    else:
        assert (updated.correct_count, updated.incorrect_count) == (4, 4)


def test_stage_three_correct_scenario(now):
    record = make_record(stage=3, correct=2)
    record.last_reviewed = now
    updated = apply_answer(record, True, now)
    assert updated.stage == 4
    assert updated.next_due == now + timedelta(hours=168)
    assert updated.correct_count == 3
    assert updated.last_reviewed == now


def test_apply_answer_does_not_mutate_input(now):
    record = make_record(stage=5)
    apply_answer(record, False, now)
    assert record.stage == 5
    assert record.last_reviewed is None


@pytest.mark.parametrize("bad", [1, 0, "true", None])
def test_non_boolean_correctness_rejected(bad, now):
    with pytest.raises(InvalidInput):
        schedule(0, bad, now)


def test_out_of_range_stage_rejected(now):
    with pytest.raises(InvalidStage):
        schedule(8, True, now)
