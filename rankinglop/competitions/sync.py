"""Request/acknowledge handshake between a season producer and its sync loop."""
import queue
import threading
from typing import Optional

from rankinglop.database.schemas import SeasonFetch

_CLOSED = object()


class SyncClosedError(Exception):
    """Batch sent to a season element that has been closed."""

    pass


class SeasonSyncElement:
    """Batch-in / done-out channel pair for one season.

    send() blocks until the loop has acknowledged the batch, and only one
    batch is in flight per element at any time.
    """

    def __init__(self, season: int):
        self.season = season
        self._batches: queue.Queue = queue.Queue()
        self._acks: queue.Queue = queue.Queue()
        self._send_lock = threading.Lock()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, fetch: SeasonFetch) -> None:
        """Hand a batch to the sync loop and wait for its acknowledgment.

        Raises:
            SyncClosedError: If the element has been closed
        """
        with self._send_lock:
            if self.closed:
                raise SyncClosedError(f"Season {self.season} sync is closed")
            self._batches.put(fetch)
            self._acks.get()

    def receive(self) -> Optional[SeasonFetch]:
        """Block for the next batch. None once the element is closed."""
        item = self._batches.get()
        if item is _CLOSED:
            return None
        return item

    def acknowledge(self) -> None:
        self._acks.put(None)

    def close(self) -> None:
        """Stop the loop after any in-flight batch."""
        with self._send_lock:
            if self.closed:
                return
            self._closed.set()
            self._batches.put(_CLOSED)
