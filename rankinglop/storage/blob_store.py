"""Blob storage backed by the database.

Each container holds named JSON documents. The athlete cache streams its
records from here at startup, and the competition store reads and writes the
full competition list as a single document.

Usage:
    >>> store = BlobStore()
    >>> request = ReadRequest(container="athletes", pattern=r"\\.json$")
    >>> threading.Thread(target=store.read, args=(request,)).start()
    >>> for result in request:
    ...     print(result.name, len(result.data))
"""
import json
import logging
import queue
import re
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from rankinglop.config.settings import Settings, get_settings
from rankinglop.database.connection import SessionLocal
from rankinglop.database.models import StoredBlob
from rankinglop.database.schemas import AthleteRecord, Competition

logger = logging.getLogger(__name__)

_COMPETITION_LIST = TypeAdapter(list[Competition])


class StorageError(Exception):
    """Error reading from or writing to blob storage."""

    pass


@dataclass
class ReadResult:
    """One matching blob from a streamed read."""

    name: str
    data: bytes


_END_OF_STREAM = object()


@dataclass
class ReadRequest:
    """A streamed read of every blob in a container matching a pattern.

    The producer calls send() per blob and finish() once at the end.
    Iterating the request yields results until the producer has finished.
    """

    container: str
    pattern: str
    _results: queue.Queue = field(default_factory=queue.Queue, repr=False)
    _done: threading.Event = field(default_factory=threading.Event, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def send(self, result: ReadResult) -> None:
        if self._done.is_set():
            raise StorageError(f"Read of {self.container} already finished")
        self._results.put(result)

    def finish(self) -> None:
        """Signal that no more results follow. Later calls are no-ops."""
        with self._lock:
            if self._done.is_set():
                return
            self._done.set()
            self._results.put(_END_OF_STREAM)

    @property
    def finished(self) -> bool:
        return self._done.is_set()

    def __iter__(self) -> Iterator[ReadResult]:
        while True:
            item = self._results.get()
            if item is _END_OF_STREAM:
                return
            yield item


AthleteReader = Callable[[ReadRequest], None]
AthletePersist = Callable[[AthleteRecord], None]
CompetitionFetch = Callable[[], list[Competition]]
CompetitionPersist = Callable[[list[Competition]], None]


class BlobStore:
    """Container/name keyed blob storage on top of SQLAlchemy."""

    def __init__(
        self,
        session_factory: sessionmaker = SessionLocal,
        settings: Optional[Settings] = None,
    ):
        """Initialize the store.

        Args:
            session_factory: Factory producing SQLAlchemy sessions
            settings: Container names (defaults to application settings)
        """
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    def read(self, request: ReadRequest) -> None:
        """Stream every blob in the container whose name matches the pattern.

        Always finishes the request, also when the query fails.

        Args:
            request: Read request to feed
        """
        try:
            regex = re.compile(request.pattern)
            with self.session_factory() as db:
                blobs = (
                    db.query(StoredBlob)
                    .filter(StoredBlob.container == request.container)
                    .order_by(StoredBlob.name)
                    .all()
                )
                for blob in blobs:
                    if regex.search(blob.name):
                        request.send(ReadResult(name=blob.name, data=bytes(blob.data)))
        except (re.error, SQLAlchemyError) as e:
            logger.error(f"Failed to read container {request.container}: {e}")
        finally:
            request.finish()

    def get(self, container: str, name: str) -> Optional[bytes]:
        """Get a single blob, or None if it does not exist."""
        try:
            with self.session_factory() as db:
                blob = db.query(StoredBlob).filter_by(container=container, name=name).first()
                return bytes(blob.data) if blob else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get {container}/{name}: {e}")

    def write(self, container: str, name: str, data: bytes) -> None:
        """Create or replace a blob.

        Raises:
            StorageError: If the write fails
        """
        try:
            with self.session_factory() as db:
                blob = db.query(StoredBlob).filter_by(container=container, name=name).first()
                if blob:
                    blob.data = data
                else:
                    db.add(StoredBlob(container=container, name=name, data=data))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {container}/{name}: {e}")

        logger.debug(f"Stored {container}/{name} ({len(data)} bytes)")

    def persist_athlete(self, athlete: AthleteRecord) -> None:
        """Write one athlete as `<id>.json` in the athletes container."""
        self.write(
            self.settings.athletes_container,
            f"{athlete.id}.json",
            athlete.model_dump_json(by_alias=True).encode("utf-8"),
        )

    def fetch_competitions(self) -> list[Competition]:
        """Load the persisted competition list (empty if none was stored).

        Raises:
            StorageError: If the stored document is malformed
        """
        data = self.get(self.settings.competitions_container, self.settings.competitions_file)
        if data is None:
            return []
        try:
            return _COMPETITION_LIST.validate_json(data)
        except ValidationError as e:
            raise StorageError(f"Malformed competition list: {e}")

    def persist_competitions(self, competitions: list[Competition]) -> None:
        """Write the full competition list as one document."""
        payload = [c.model_dump(mode="json") for c in competitions]
        self.write(
            self.settings.competitions_container,
            self.settings.competitions_file,
            json.dumps(payload, ensure_ascii=False).encode("utf-8"),
        )
        logger.info(f"Persisted {len(competitions)} competitions")

    def container_counts(self) -> dict[str, int]:
        """Number of stored blobs per configured container."""
        containers = [self.settings.athletes_container, self.settings.competitions_container]
        try:
            with self.session_factory() as db:
                rows = (
                    db.query(StoredBlob.container, func.count(StoredBlob.id))
                    .filter(StoredBlob.container.in_(containers))
                    .group_by(StoredBlob.container)
                    .all()
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count blobs: {e}")

        counts = dict.fromkeys(containers, 0)
        counts.update({container: count for container, count in rows})
        return counts
