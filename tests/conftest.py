"""Shared pytest fixtures for tests."""
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rankinglop.config.settings import Settings
from rankinglop.database.connection import Base
from rankinglop.database.models import StoredBlob
from rankinglop.database.schemas import (
    CourseResult,
    Event,
    EventCourse,
    ResultRow,
    SeasonFetch,
    SeasonResult,
)
from rankinglop.storage.blob_store import BlobStore


@pytest.fixture(scope="function")
def test_engine():
    """Create an in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session_factory(test_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def test_settings():
    """Settings that ignore any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def blob_store(test_session_factory, test_settings):
    """Blob store on the in-memory database."""
    return BlobStore(session_factory=test_session_factory, settings=test_settings)


@pytest.fixture
def make_event():
    """Factory for scraped events."""

    def _make_event(name="Rankingløp 1", date=datetime(2019, 5, 12, 18, 0), courses=None, **kwargs):
        if courses is None:
            courses = ["Lang (8,4 km)", "Mellom (5,2 km)", "Kort (3,0 km)", "Åpent løp"]
        return Event(
            name=name,
            date=date,
            courses=[EventCourse(name=c) for c in courses],
            **kwargs,
        )

    return _make_event


@pytest.fixture
def make_fetch():
    """Factory for season fetches; each event becomes one season result."""

    def _make_fetch(year=2019, events=(), rows=None):
        results = []
        for event in events:
            courses = []
            if rows:
                courses = [
                    CourseResult(
                        course_name=event.courses[0].name if event.courses else "",
                        rows=[ResultRow(name=name, club=club) for name, club in rows],
                    )
                ]
            results.append(SeasonResult(event=event, courses=courses))
        return SeasonFetch(
            url=f"https://ilgeoform.no/rankinglop/index-{year}.html",
            year=year,
            results=results,
        )

    return _make_fetch


@pytest.fixture
def sample_blob(test_session_factory):
    """A stored athlete blob."""
    with test_session_factory() as db:
        blob = StoredBlob(
            container="athletes",
            name="0b7d3c1e-1111-4a2b-9c3d-000000000001.json",
            data=b'{"id": "0b7d3c1e-1111-4a2b-9c3d-000000000001", "sha": "abc", "name": "Kari Nordmann", "club": "IL Geoform"}',
        )
        db.add(blob)
        db.commit()
        db.refresh(blob)
        return blob
