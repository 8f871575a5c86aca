"""SRS stage table: intervals, tier labels and display names."""
from datetime import datetime, timedelta
from enum import IntEnum

from katakana_srs.errors import InvalidStage


class Stage(IntEnum):
    APPRENTICE_1 = 0
    APPRENTICE_2 = 1
    APPRENTICE_3 = 2
    APPRENTICE_4 = 3
    GURU_1 = 4
    GURU_2 = 5
    MASTER = 6
    ENLIGHTENED = 7


MIN_STAGE = Stage.APPRENTICE_1
MAX_STAGE = Stage.ENLIGHTENED

# Hours until the next review once an item reaches the stage.
STAGE_INTERVALS = {
    Stage.APPRENTICE_1: 2,
    Stage.APPRENTICE_2: 4,
    Stage.APPRENTICE_3: 8,
    Stage.APPRENTICE_4: 24,
    Stage.GURU_1: 168,
    Stage.GURU_2: 336,
    Stage.MASTER: 720,
    Stage.ENLIGHTENED: 2880,
}

STAGE_NAMES = {
    Stage.APPRENTICE_1: "Apprentice I",
    Stage.APPRENTICE_2: "Apprentice II",
    Stage.APPRENTICE_3: "Apprentice III",
    Stage.APPRENTICE_4: "Apprentice IV",
    Stage.GURU_1: "Guru I",
    Stage.GURU_2: "Guru II",
    Stage.MASTER: "Master",
    Stage.ENLIGHTENED: "Enlightened",
}

TIERS = ["Apprentice", "Guru", "Master", "Enlightened"]


def to_stage(stage) -> Stage:
    """Validate an integer stage and return it as a Stage."""
    if isinstance(stage, bool) or not isinstance(stage, int):
        raise InvalidStage(stage)
    if not MIN_STAGE <= stage <= MAX_STAGE:
        raise InvalidStage(stage)
    return Stage(stage)


def interval_hours(stage: int) -> int:
    return STAGE_INTERVALS[to_stage(stage)]


def interval(stage: int) -> timedelta:
    return timedelta(hours=interval_hours(stage))


def tier_label(stage: int) -> str:
    stage = to_stage(stage)
    if stage <= Stage.APPRENTICE_4:
        return "Apprentice"
    elif stage <= Stage.GURU_2:
        return "Guru"
    elif stage == Stage.MASTER:
        return "Master"
    return "Enlightened"


def stage_name(stage: int) -> str:
    return STAGE_NAMES[to_stage(stage)]


def floor_to_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)
