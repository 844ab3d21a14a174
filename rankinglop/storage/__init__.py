"""Blob storage used as the persistence collaborator."""
from .blob_store import (
    AthletePersist,
    AthleteReader,
    BlobStore,
    CompetitionFetch,
    CompetitionPersist,
    ReadRequest,
    ReadResult,
    StorageError,
)

__all__ = [
    "AthletePersist",
    "AthleteReader",
    "BlobStore",
    "CompetitionFetch",
    "CompetitionPersist",
    "ReadRequest",
    "ReadResult",
    "StorageError",
]
