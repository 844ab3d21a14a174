"""Tests for course classification and competition identities."""
import re
from datetime import datetime

import pytest

from rankinglop.competitions.courses import (
    DEFAULT_COURSE_LENGTH,
    build_competition,
    course_length,
    course_type,
    make_competition_id,
    parse_course_length,
)
from rankinglop.database.schemas import CourseType, Event, EventCourse


class TestCourseType:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Langdistanse", CourseType.LONG),
            ("Mellomdistanse", CourseType.MEDIUM),
            ("Kortdistanse", CourseType.SHORT),
            ("Åpent løp", CourseType.NEWBIE),
            ("LANG (8,4 km)", CourseType.LONG),
            ("Kort (3,0 km)", CourseType.SHORT),
            ("", CourseType.NEWBIE),
        ],
    )
    def test_classification(self, name, expected):
        assert course_type(name) == expected

    def test_first_keyword_wins(self):
        assert course_type("Kort eller lang") == CourseType.LONG
        assert course_type("Kort/mellom") == CourseType.MEDIUM


class TestCourseLength:
    def test_comma_decimal(self):
        assert course_length("Lang (8,4 km)") == 8.4

    def test_dot_decimal(self):
        assert course_length("Mellom (5.2 km)") == 5.2

    def test_missing_length_defaults(self):
        assert course_length("Lang") == 0
        assert parse_course_length("Lang") is None

    def test_parsed_zero_is_not_a_fallback(self):
        assert parse_course_length("Lang (0,0 km)") == 0.0
        assert parse_course_length("Lang (0,0 km)") is not None

    def test_three_digit_length_is_not_matched(self):
        assert parse_course_length("Ultra (123,4 km)") is None
        assert course_length("Ultra (123,4 km)") == DEFAULT_COURSE_LENGTH

    def test_requires_km_in_parentheses(self):
        assert parse_course_length("Lang 8,4 km") is None
        assert parse_course_length("Lang (8,4km)") is None


class TestCompetitionId:
    def test_format(self):
        competition_id = make_competition_id(datetime(2019, 5, 12, 18, 0))
        assert re.fullmatch(r"20190512-[0-9a-f]{4}", competition_id)

    def test_zero_padded_date(self):
        assert make_competition_id(datetime(2021, 1, 3)).startswith("20210103-")


class TestBuildCompetition:
    @pytest.fixture
    def event(self):
        return Event(
            number=3,
            name="Rankingløp 3",
            date=datetime(2019, 5, 12, 18, 0),
            courses=[
                EventCourse(name="Lang (8,4 km)", info="Fellesstart"),
                EventCourse(name="Åpent løp"),
            ],
            info="Parkering ved skolen",
            url="https://ilgeoform.no/rankinglop/3",
            url_invite="https://ilgeoform.no/rankinglop/3/invitasjon",
            url_live_results="https://www.livelox.com/Events/Show/1",
            place="Lillomarka",
            organizer="IL Geoform",
            responsible="Kari Nordmann",
        )

    def test_copies_event_fields(self, event):
        competition = build_competition("20190512-ab12", event)

        assert competition.id == "20190512-ab12"
        assert competition.number == 3
        assert competition.name == "Rankingløp 3"
        assert competition.date == datetime(2019, 5, 12, 18, 0)
        assert competition.url_live_results == "https://www.livelox.com/Events/Show/1"
        assert competition.place == "Lillomarka"
        assert competition.organizer == "IL Geoform"
        assert competition.responsible == "Kari Nordmann"

    def test_builds_courses_in_order(self, event):
        competition = build_competition("20190512-ab12", event)

        assert [c.id for c in competition.courses] == ["20190512-ab12-long", "20190512-ab12-newbie"]
        assert competition.courses[0].length == 8.4
        assert competition.courses[0].info == "Fellesstart"
        assert competition.courses[1].length == 0
        assert competition.courses[1].course_type == CourseType.NEWBIE

    def test_event_without_courses(self, event):
        event = event.model_copy(update={"courses": None})
        assert build_competition("20190512-ab12", event).courses == []
