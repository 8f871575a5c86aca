"""In-memory presentation order for lesson quizzes and review sessions.

A queue is built once from a snapshot of items and shuffled. Items leave it
only when answered correctly; a missed item goes back in at a random later
position, never directly after itself unless it is the last one left.
"""
import random

from katakana_srs.errors import InvalidInput, SessionComplete


def _default_key(item):
    return item["id"] if isinstance(item, dict) else item.id


class DueQueue:
    def __init__(self, items, key=_default_key, rng: random.Random | None = None):
        self._key = key
        self._rng = rng or random.Random()
        self._queue = list(items)
        self._rng.shuffle(self._queue)
        self._total = len(self._queue)
        self._current = None
        self.first_attempts: dict = {}
        self.attempts = 0

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def total(self) -> int:
        return self._total

    @property
    def remaining(self) -> int:
        return len(self._queue)

    @property
    def completed(self) -> int:
        return self._total - len(self._queue)

    @property
    def is_finished(self) -> bool:
        return not self._queue

    def pending_keys(self) -> list:
        return [self._key(item) for item in self._queue]

    def next_item(self):
        """Return the item to present next; raises SessionComplete when empty."""
        if not self._queue:
            raise SessionComplete()
        self._current = self._queue[0]
        return self._current

    def record_answer(self, item, is_correct: bool) -> bool:
        """Record an answer for the presented item.

        Returns True when this was the item's first attempt this session.
        """
        if not isinstance(is_correct, bool):
            raise InvalidInput(f"is_correct must be a boolean, got {is_correct!r}")
        if self._current is None or self._key(item) != self._key(self._current):
            raise InvalidInput("Answer does not match the item being presented")
        key = self._key(item)
        first = key not in self.first_attempts
        if first:
            self.first_attempts[key] = is_correct
        self.attempts += 1

        current = self._queue.pop(0)
        self._current = None
        if not is_correct:
            self._requeue(current)
        return first

    def _requeue(self, item) -> None:
        remaining = len(self._queue)
        if remaining <= 1:
            self._queue.append(item)
            return
        # index 1 is two places after the missed item's old slot; remaining is the end
        self._queue.insert(self._rng.randint(1, remaining), item)

    def first_attempt_correct(self) -> int:
        return sum(1 for ok in self.first_attempts.values() if ok)

    def first_attempt_accuracy(self) -> int:
        """Percent of items answered correctly on the first try."""
        if not self.first_attempts:
            return 0
        return round(self.first_attempt_correct() / len(self.first_attempts) * 100)
