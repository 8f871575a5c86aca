"""Data classes for the katakana SRS domain model."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def parse_ts(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def format_ts(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat(timespec="seconds")


@dataclass(frozen=True)
class Symbol:
    id: int
    character: str
    romaji: str
    category: str
    batch_number: int

    @classmethod
    def from_row(cls, row) -> "Symbol":
        return cls(
            id=row["id"],
            character=row["character"],
            romaji=row["romaji"],
            category=row["category"],
            batch_number=row["batch_number"],
        )


@dataclass
class LessonBatch:
    batch_number: int
    name: str
    description: str = ""
    completed: bool = False
    completed_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "LessonBatch":
        return cls(
            batch_number=row["batch_number"],
            name=row["name"],
            description=row["description"],
            completed=bool(row["completed"]),
            completed_at=parse_ts(row["completed_at"]),
        )


@dataclass
class ReviewRecord:
    id: int
    symbol_id: int
    stage: int
    next_due: datetime
    correct_count: int = 0
    incorrect_count: int = 0
    last_reviewed: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "ReviewRecord":
        return cls(
            id=row["id"],
            symbol_id=row["symbol_id"],
            stage=row["stage"],
            next_due=parse_ts(row["next_due"]),
            correct_count=row["correct_count"],
            incorrect_count=row["incorrect_count"],
            last_reviewed=parse_ts(row["last_reviewed"]),
            created_at=parse_ts(row["created_at"]),
        )


@dataclass
class DueReview:
    review: ReviewRecord
    symbol: Symbol
    note: Optional[str] = None

    @property
    def id(self) -> int:
        return self.review.id


@dataclass
class SymbolStatus:
    symbol: Symbol
    review: Optional[ReviewRecord] = None

    @property
    def stage(self) -> Optional[int]:
        return self.review.stage if self.review else None


@dataclass
class LessonItem:
    symbol: Symbol
    note: Optional[str] = None

    @property
    def id(self) -> int:
        return self.symbol.id


@dataclass
class UserNote:
    id: int
    symbol_id: int
    note: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "UserNote":
        return cls(
            id=row["id"],
            symbol_id=row["symbol_id"],
            note=row["note"],
            created_at=parse_ts(row["created_at"]),
            updated_at=parse_ts(row["updated_at"]),
        )

