import random

import pytest

from katakana_srs.due_queue import DueQueue
from katakana_srs.errors import InvalidInput, SessionComplete


class NoShuffle(random.Random):
    """Keeps the input order and always requeues at the end."""

    def shuffle(self, x):
        pass

    def randint(self, a, b):
        return b


def items(n):
    return [{"id": i} for i in range(1, n + 1)]


def test_initial_order_is_a_permutation():
    queue = DueQueue(items(10), rng=random.Random(3))
    assert sorted(queue.pending_keys()) == list(range(1, 11))
    assert queue.total == 10
    assert queue.remaining == 10


def test_shuffle_uses_rng():
    a = DueQueue(items(10), rng=random.Random(42)).pending_keys()
    b = DueQueue(items(10), rng=random.Random(42)).pending_keys()
    assert a == b


def test_empty_queue_is_complete():
    queue = DueQueue([])
    assert queue.is_finished
    with pytest.raises(SessionComplete):
        queue.next_item()


def test_correct_answer_removes_item():
    queue = DueQueue(items(3), rng=NoShuffle())
    item = queue.next_item()
    assert item == {"id": 1}
    queue.record_answer(item, True)
    assert queue.pending_keys() == [2, 3]
    assert queue.completed == 1


def test_miss_with_no_items_left_repeats():
    queue = DueQueue(items(1))
    item = queue.next_item()
    queue.record_answer(item, False)
    assert queue.next_item() == item


def test_miss_with_one_item_left_goes_to_end():
    queue = DueQueue(items(2), rng=NoShuffle())
    queue.record_answer(queue.next_item(), False)
    assert queue.pending_keys() == [2, 1]


@pytest.mark.parametrize("seed", range(50))
def test_miss_is_never_presented_twice_in_a_row(seed):
    queue = DueQueue(items(6), rng=random.Random(seed))
    item = queue.next_item()
    queue.record_answer(item, False)
    assert queue.next_item() != item
    assert queue.remaining == 6


@pytest.mark.parametrize("seed", range(50))
def test_miss_is_reinserted_after_at_least_one_other_item(seed):
    queue = DueQueue(items(5), rng=random.Random(seed))
    key = queue.next_item()["id"]
    queue.record_answer({"id": key}, False)
    position = queue.pending_keys().index(key)
    assert 1 <= position <= 4


def test_reinsert_positions_cover_the_whole_range():
    seen = set()
    for seed in range(200):
        queue = DueQueue(items(5), rng=random.Random(seed))
        key = queue.next_item()["id"]
        queue.record_answer({"id": key}, False)
        seen.add(queue.pending_keys().index(key))
    assert seen == {1, 2, 3, 4}


def test_session_terminates_with_repeated_misses():
    rng = random.Random(7)
    queue = DueQueue(items(8), rng=rng)
    misses = {}
    answered_correctly = []
    for _ in range(1000):
        try:
            item = queue.next_item()
        except SessionComplete:
            break
        key = item["id"]
        # miss every item twice before getting it right
        correct = misses.get(key, 0) >= 2
        misses[key] = misses.get(key, 0) + 1
        queue.record_answer(item, correct)
        if correct:
            answered_correctly.append(key)
    assert queue.is_finished
    assert sorted(answered_correctly) == list(range(1, 9))
    assert queue.attempts == 24


def test_first_attempts_are_tracked_once():
    queue = DueQueue(items(3), rng=NoShuffle())
    assert queue.record_answer(queue.next_item(), False) is True
    assert queue.record_answer(queue.next_item(), True) is True
    assert queue.record_answer(queue.next_item(), True) is True
    # item 1 comes back after its miss
    item = queue.next_item()
    assert item == {"id": 1}
    assert queue.record_answer(item, True) is False
    assert queue.first_attempts == {1: False, 2: True, 3: True}
    assert queue.first_attempt_correct() == 2
    assert queue.first_attempt_accuracy() == 67


def test_accuracy_zero_before_answers():
    assert DueQueue(items(2)).first_attempt_accuracy() == 0


def test_answer_must_match_presented_item():
    queue = DueQueue(items(3), rng=NoShuffle())
    with pytest.raises(InvalidInput):
        queue.record_answer({"id": 1}, True)
    queue.next_item()
    with pytest.raises(InvalidInput):
        queue.record_answer({"id": 2}, True)


def test_answer_must_be_boolean():
    queue = DueQueue(items(2))
    item = queue.next_item()
    with pytest.raises(InvalidInput):
        queue.record_answer(item, "yes")


def test_custom_key():
    queue = DueQueue(["ア", "イ"], key=lambda s: s, rng=NoShuffle())
    queue.record_answer(queue.next_item(), True)
    assert queue.first_attempts == {"ア": True}
