"""Competition identities and course classification."""
import logging
import re
import uuid
from datetime import datetime
from typing import Optional

from rankinglop.database.schemas import Competition, Course, CourseType, Event

logger = logging.getLogger(__name__)

# First match wins
COURSE_TYPE_KEYWORDS = (
    ("lang", CourseType.LONG),
    ("mellom", CourseType.MEDIUM),
    ("kort", CourseType.SHORT),
)

DEFAULT_COURSE_LENGTH = 0.0

_COURSE_LENGTH_RE = re.compile(r"\((?P<km>\d{1,2}[.,]\d) km\)")


def course_type(name: str) -> CourseType:
    """Classify a course from keywords in its name.

    Examples:
        >>> course_type("Langdistanse")
        <CourseType.LONG: 'long'>
        >>> course_type("Åpent løp")
        <CourseType.NEWBIE: 'newbie'>
    """
    lowered = (name or "").lower()
    for keyword, kind in COURSE_TYPE_KEYWORDS:
        if keyword in lowered:
            return kind
    return CourseType.NEWBIE


def parse_course_length(name: str) -> Optional[float]:
    """Course length in km from a "(D,D km)" part of the name.

    Returns:
        The parsed length, or None if the name carries no parsable length
    """
    match = _COURSE_LENGTH_RE.search(name or "")
    if not match:
        return None
    try:
        return float(match.group("km").replace(",", "."))
    except ValueError:
        return None


def course_length(name: str) -> float:
    """Course length in km, falling back to DEFAULT_COURSE_LENGTH."""
    length = parse_course_length(name)
    if length is None:
        return DEFAULT_COURSE_LENGTH
    return length


def make_competition_id(date: datetime) -> str:
    """YYYYMMDD followed by a random 4 hex character suffix."""
    return f"{date:%Y%m%d}-{uuid.uuid4().hex[:4]}"


def build_competition(competition_id: str, event: Event) -> Competition:
    """Build a competition record with classified courses from a scraped event."""
    courses = []
    for event_course in event.courses or []:
        kind = course_type(event_course.name)
        courses.append(
            Course(
                id=f"{competition_id}-{kind.value}",
                name=event_course.name,
                info=event_course.info,
                length=course_length(event_course.name),
                course_type=kind,
            )
        )

    return Competition(
        id=competition_id,
        number=event.number,
        name=event.name,
        date=event.date,
        courses=courses,
        info=event.info,
        url=event.url,
        url_invite=event.url_invite,
        url_live_results=event.url_live_results,
        place=event.place,
        organizer=event.organizer,
        responsible=event.responsible,
    )
