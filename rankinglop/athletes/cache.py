"""In-memory athlete identity cache.

Maps a name+club fingerprint to a stable athlete identity. Records are loaded
once from blob storage and created lazily on first lookup afterwards.
"""
import logging
import threading
from typing import Optional

from pydantic import ValidationError

from rankinglop.config.settings import get_settings
from rankinglop.database.schemas import AthleteRecord
from rankinglop.storage.blob_store import AthleteReader, ReadRequest
from .fingerprint import UNKNOWN_ATHLETE_ID, fingerprint, new_athlete_id

logger = logging.getLogger(__name__)


class AthleteCache:
    """Create-or-get cache of athletes keyed by fingerprint and by identity.

    Every access to the indexes happens under a single lock, so concurrent
    competitor() calls for the same athlete create at most one record.
    """

    def __init__(self, container: Optional[str] = None, pattern: Optional[str] = None):
        """Initialize an empty cache.

        Args:
            container: Blob container holding athlete records
            pattern: Regex selecting athlete blob names
        """
        settings = get_settings()
        self.container = container or settings.athletes_container
        self.pattern = pattern or settings.athletes_file_pattern
        self._by_fingerprint: dict[str, AthleteRecord] = {}
        self._by_id: dict[str, AthleteRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_fingerprint)

    def all(self) -> list[AthleteRecord]:
        """Snapshot of all athletes. Order is unspecified."""
        with self._lock:
            return list(self._by_fingerprint.values())

    def id(self, name: str, club: str) -> str:
        """Identity of the athlete, or "unknown" if never seen."""
        sha = fingerprint(name, club)
        with self._lock:
            athlete = self._by_fingerprint.get(sha)
        return athlete.id if athlete else UNKNOWN_ATHLETE_ID

    def by_id(self, athlete_id: str) -> Optional[AthleteRecord]:
        with self._lock:
            return self._by_id.get(athlete_id)

    def competitor(self, name: str, club: str) -> tuple[AthleteRecord, bool]:
        """Get the athlete for name+club, creating it if needed.

        Returns:
            Tuple of (athlete, existed)
        """
        sha = fingerprint(name, club)
        with self._lock:
            athlete = self._by_fingerprint.get(sha)
            if athlete:
                return athlete, True

            athlete = AthleteRecord(id=new_athlete_id(), fingerprint=sha, name=name, club=club)
            self._by_fingerprint[sha] = athlete
            self._by_id[athlete.id] = athlete

        logger.debug(f"Created athlete {athlete.id} for {name!r} ({club!r})")
        return athlete, False

    def init(self, reader: AthleteReader) -> int:
        """Bulk-load persisted athletes.

        Runs the reader in its own thread and consumes its results until the
        reader finishes. Malformed blobs are logged and skipped.

        Args:
            reader: Callable streaming blobs into a ReadRequest

        Returns:
            Number of athletes loaded
        """
        request = ReadRequest(container=self.container, pattern=self.pattern)

        def produce():
            try:
                reader(request)
            except Exception:
                logger.exception(f"Failed to read athletes from {self.container}")
            finally:
                request.finish()

        producer = threading.Thread(target=produce, name="athlete-reader", daemon=True)
        producer.start()

        by_fingerprint: dict[str, AthleteRecord] = {}
        by_id: dict[str, AthleteRecord] = {}
        for result in request:
            try:
                athlete = AthleteRecord.model_validate_json(result.data)
            except ValidationError as e:
                logger.error(f"Skipping malformed athlete blob {result.name}: {e}")
                continue
            by_fingerprint[athlete.fingerprint] = athlete
            by_id[athlete.id] = athlete

        producer.join()

        with self._lock:
            self._by_fingerprint = by_fingerprint
            self._by_id = by_id

        logger.info(
            f"initialized ({len(by_fingerprint)} athletes)",
            extra={"event": "initialized", "package": "athletes", "count": len(by_fingerprint)},
        )
        return len(by_fingerprint)
