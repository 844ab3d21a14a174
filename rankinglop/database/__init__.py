"""Database module with SQLAlchemy models and connection management."""
from .connection import engine, SessionLocal, get_db, Base
from .models import StoredBlob

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "StoredBlob",
]
