"""Pydantic schemas for records, scrape payloads and API models."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Athlete Schemas ---


class AthleteRecord(BaseModel):
    """An athlete with a stable identity, keyed by name+club fingerprint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    fingerprint: str = Field(alias="sha")
    name: str
    club: str


class CompetitorRequest(BaseModel):
    """Schema for a create-or-get athlete request."""

    name: str = Field(..., min_length=1)
    club: str = ""


class CompetitorResponse(BaseModel):
    """Schema for a create-or-get athlete response."""

    athlete: AthleteRecord
    existed: bool


class AthleteIdResponse(BaseModel):
    """Schema for a pure identity lookup."""

    id: str


# --- Competition Schemas ---


class CourseType(str, Enum):
    """Coarse course classification inferred from the course name."""

    LONG = "long"
    MEDIUM = "medium"
    SHORT = "short"
    NEWBIE = "newbie"


class Course(BaseModel):
    """A course within a competition."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    info: str = ""
    length: float = 0.0
    course_type: CourseType


class Competition(BaseModel):
    """A competition with its nested courses."""

    model_config = ConfigDict(frozen=True)

    id: str
    number: int = 0
    name: str
    date: datetime
    courses: list[Course] = []
    info: str = ""
    url: str = ""
    url_invite: str = ""
    url_live_results: str = ""
    place: str = ""
    organizer: str = ""
    responsible: str = ""


class CompetitionWithCourse(BaseModel):
    """Result of a competition lookup by event and course name."""

    competition: Competition
    course: Course


# --- Scrape Schemas ---


class EventCourse(BaseModel):
    """A course as announced on the event page."""

    name: str
    info: str = ""


class Event(BaseModel):
    """A scraped competition event."""

    number: int = 0
    name: str
    date: datetime
    courses: Optional[list[EventCourse]] = None
    info: str = ""
    url: str = ""
    url_invite: str = ""
    url_live_results: str = ""
    place: str = ""
    organizer: str = ""
    responsible: str = ""


class ResultRow(BaseModel):
    """A single athlete line in a course result list."""

    name: str
    club: str = ""
    placement: Optional[int] = None
    time: str = ""


class CourseResult(BaseModel):
    """Result list for one course of an event."""

    course_name: str
    rows: list[ResultRow] = []


class SeasonResult(BaseModel):
    """One event of a season together with its result lists."""

    event: Optional[Event] = None
    courses: list[CourseResult] = []


class SeasonFetch(BaseModel):
    """One scraped batch of season results."""

    url: str = ""
    year: int
    results: Optional[list[SeasonResult]] = None


class ScrapeResponse(BaseModel):
    """Schema for an ingestion response."""

    season: int
    competitions: int
    message: str
