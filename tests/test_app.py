import random
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from katakana_srs import app
from katakana_srs.app import (
    SessionExitRequested, check_answer, run_lesson, run_review_session, session_prompt,
)
from katakana_srs.due_queue import DueQueue
from katakana_srs.lessons import complete_lesson, get_lesson_batch, get_next_lesson
from katakana_srs.reviews import get_all_reviews, get_due_reviews, get_review


class InOrder(random.Random):
    def shuffle(self, x):
        pass

    def randint(self, a, b):
        return b


def ordered_queue(items):
    return DueQueue(items, rng=InOrder())


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("katakana_srs.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("katakana_srs.app.Prompt.ask", return_value=" MENU "):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("katakana_srs.app.Prompt.ask", return_value="ka"):
        assert session_prompt("test prompt") == "ka"


def test_check_answer():
    assert check_answer("shi", "  SHI ")
    assert not check_answer("shi", "si")


def test_run_lesson_completes_batch_with_first_attempts(seeded_db):
    batch = get_next_lesson(seeded_db)
    # five reveals, then イ missed once and answered again at the end
    answers = ["", "", "", "", "", "a", "x", "u", "e", "o", "i"]
    with patch("katakana_srs.app.Prompt.ask", side_effect=answers), \
            patch("katakana_srs.app.DueQueue", ordered_queue), \
            patch("katakana_srs.lessons.get_settings") as settings:
        settings.return_value.lesson_seed_policy = "first_attempt"
        created = run_lesson(seeded_db, batch)
    assert created == 5
    assert get_lesson_batch(seeded_db, 1).completed
    stages = {r.symbol_id: r.stage for r in get_all_reviews(seeded_db)}
    assert stages == {1: 1, 2: 0, 3: 1, 4: 1, 5: 1}


def test_run_lesson_exit_leaves_batch_open(seeded_db):
    batch = get_next_lesson(seeded_db)
    with patch("katakana_srs.app.Prompt.ask", side_effect=["", "q"]):
        with pytest.raises(SessionExitRequested):
            run_lesson(seeded_db, batch)
    assert not get_lesson_batch(seeded_db, 1).completed
    assert get_all_reviews(seeded_db) == []


def test_run_review_session_submits_first_attempt_only(seeded_db):
    complete_lesson(seeded_db, 1, now=datetime.now() - timedelta(hours=3))
    due = [d for d in get_due_reviews(seeded_db) if d.symbol.character == "ア"]
    assert len(due) == 1
    with patch("katakana_srs.app.Prompt.ask", side_effect=["o", "a"]):
        score, total = run_review_session(seeded_db, due)
    assert (score, total) == (0, 1)
    review = get_review(seeded_db, due[0].id)
    assert review.stage == 0
    assert review.incorrect_count == 2
    assert review.correct_count == 0
    assert review.last_reviewed is not None


def test_run_review_session_empty():
    with patch("katakana_srs.app.Prompt.ask") as ask:
        assert run_review_session(None, []) == (0, 0)
    ask.assert_not_called()


def test_run_review_session_exit_keeps_answers(seeded_db):
    complete_lesson(seeded_db, 1, now=datetime.now() - timedelta(hours=3))
    due = get_due_reviews(seeded_db)
    with patch("katakana_srs.app.Prompt.ask", side_effect=[due[0].symbol.romaji, "q"]), \
            patch("katakana_srs.app.DueQueue", ordered_queue):
        with pytest.raises(SessionExitRequested):
            run_review_session(seeded_db, due)
    assert get_review(seeded_db, due[0].id).stage == 1
    assert get_review(seeded_db, due[1].id).stage == 0


def test_cmd_lesson_when_all_done(seeded_db):
    with patch.object(app, "get_next_lesson", return_value=None), \
            patch.object(app, "run_lesson") as run:
        app.cmd_lesson(seeded_db)
    run.assert_not_called()
