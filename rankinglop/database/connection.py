"""Database connection and session management."""
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from rankinglop.config.settings import get_settings


def get_database_url() -> str:
    """Get database URL, ensuring data directory exists."""
    settings = get_settings()
    db_url = settings.database_url

    # Extract path from sqlite URL and ensure directory exists
    if db_url.startswith("sqlite:///"):
        db_path = db_url.replace("sqlite:///", "")
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return db_url


# The sync loops write from worker threads
engine = create_engine(
    get_database_url(),
    connect_args={"check_same_thread": False},
    echo=False,
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Provide a database session that closes after use.

    Yields:
        SQLAlchemy Session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
