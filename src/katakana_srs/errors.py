"""Exception types raised by the core."""


class KatakanaSRSError(Exception):
    """Base class for every error the core raises."""


class NotFound(KatakanaSRSError):
    """Unknown review, symbol or lesson batch."""


class RecordNotFound(NotFound):
    def __init__(self, review_id):
        super().__init__(f"Review not found: {review_id}")
        self.review_id = review_id


class InvalidInput(KatakanaSRSError):
    """Malformed correctness flag, non-numeric id or missing field."""


class InvalidStage(InvalidInput, ValueError):
    def __init__(self, stage):
        super().__init__(f"Invalid SRS stage: {stage!r} (expected 0-7)")
        self.stage = stage


class AlreadyCompleted(KatakanaSRSError):
    def __init__(self, batch_number: int):
        super().__init__(f"Lesson batch {batch_number} is already completed")
        self.batch_number = batch_number


class StorageFailure(KatakanaSRSError):
    """The storage layer failed; the operation was not applied."""


class SessionComplete(KatakanaSRSError):
    """Raised by a DueQueue once every item has been answered correctly."""
