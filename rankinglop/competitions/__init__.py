"""Competition records, course classification and season synchronization."""
from .courses import (
    DEFAULT_COURSE_LENGTH,
    build_competition,
    course_length,
    course_type,
    make_competition_id,
    parse_course_length,
)
from .store import CompetitionNotFoundError, CompetitionStore
from .sync import SeasonSyncElement, SyncClosedError

__all__ = [
    "DEFAULT_COURSE_LENGTH",
    "build_competition",
    "course_length",
    "course_type",
    "make_competition_id",
    "parse_course_length",
    "CompetitionNotFoundError",
    "CompetitionStore",
    "SeasonSyncElement",
    "SyncClosedError",
]
