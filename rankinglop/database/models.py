"""SQLAlchemy ORM models for the blob containers."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    LargeBinary,
    UniqueConstraint,
)

from .connection import Base


class StoredBlob(Base):
    """A named blob inside a storage container (one JSON document)."""

    __tablename__ = "stored_blobs"
    __table_args__ = (UniqueConstraint("container", "name", name="uq_blob_container_name"),)

    id = Column(Integer, primary_key=True, index=True)
    container = Column(String(100), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    data = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    @property
    def size(self) -> int:
        """Size of the stored payload in bytes."""
        return len(self.data or b"")

    def __repr__(self) -> str:
        return f"<StoredBlob(container='{self.container}', name='{self.name}')>"
