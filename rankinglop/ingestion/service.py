"""Dispatches scrape events to per-season synchronization loops.

Flow:
    ingest(fetch) -> ScrapeEvent -> dispatcher thread -> season worker
        -> SeasonSyncElement.send() -> CompetitionStore sync loop (ack)
        -> athlete registration -> event completed

The dispatcher only validates and routes. Each season has its own worker, so
one batch is in flight per season while different seasons proceed in parallel.
"""
import logging
import queue
import threading
from datetime import date
from typing import Callable, Optional

from rankinglop.athletes.cache import AthleteCache
from rankinglop.competitions.store import CompetitionStore
from rankinglop.competitions.sync import SeasonSyncElement
from rankinglop.database.schemas import SeasonFetch
from rankinglop.storage.blob_store import AthletePersist
from .events import ScrapeEvent

logger = logging.getLogger(__name__)

_STOP = object()


class IngestionError(Exception):
    """Error rejecting or processing an ingestion request."""

    pass


class SeasonWorker:
    """Feeds one season's events through its sync element, in order."""

    def __init__(self, season: int, register: Callable[[SeasonFetch], int]):
        self.season = season
        self.element = SeasonSyncElement(season)
        self.events: queue.Queue = queue.Queue()
        self._register = register
        self._thread = threading.Thread(target=self._run, name=f"season-worker-{season}", daemon=True)

    def start(self, store: CompetitionStore) -> None:
        store.start(self.element)
        self._thread.start()

    def put(self, event: ScrapeEvent) -> None:
        self.events.put(event)

    def stop(self) -> list[ScrapeEvent]:
        """Stop after the current event and return events never started."""
        self.events.put(_STOP)
        self._thread.join()
        self.element.close()
        return _drain(self.events)

    def _run(self) -> None:
        while True:
            event = self.events.get()
            if event is _STOP:
                break
            try:
                self.element.send(event.fetch)
                created = self._register(event.fetch)
            except Exception as e:
                logger.error(f"Season {self.season}: ingestion failed: {e}")
                event.complete(e)
                continue
            if created:
                logger.info(f"Season {self.season}: {created} new athletes")
            event.complete()


def _drain(events: queue.Queue) -> list[ScrapeEvent]:
    pending = []
    while True:
        try:
            item = events.get_nowait()
        except queue.Empty:
            return pending
        if item is not _STOP:
            pending.append(item)


class IngestionService:
    """Owns the event queue and one season worker per season."""

    def __init__(
        self,
        store: CompetitionStore,
        cache: AthleteCache,
        persist_athlete: Optional[AthletePersist] = None,
        first_season: int = 2009,
    ):
        """Initialize the service.

        Args:
            store: Competition store receiving the season batches
            cache: Athlete cache assigning identities to result rows
            persist_athlete: Optional writer for newly created athletes
            first_season: Earliest season accepted
        """
        self.store = store
        self.cache = cache
        self.persist_athlete = persist_athlete
        self.first_season = first_season
        self.events: queue.Queue = queue.Queue()
        self._workers: dict[int, SeasonWorker] = {}
        self._lock = threading.Lock()
        self._dispatcher: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._dispatcher is not None and self._dispatcher.is_alive()

    @property
    def seasons(self) -> list[int]:
        with self._lock:
            return sorted(self._workers)

    def start(self) -> None:
        """Start the dispatcher thread."""
        if self.running:
            return
        self._dispatcher = threading.Thread(target=self._dispatch, name="ingestion-dispatcher", daemon=True)
        self._dispatcher.start()

    def close(self) -> None:
        """Stop the dispatcher and every season worker.

        Events still queued are failed with IngestionError so no caller is
        left waiting.
        """
        if self.running:
            self.events.put(_STOP)
            self._dispatcher.join()

        pending = _drain(self.events)
        with self._lock:
            workers = list(self._workers.values())
            self._workers.clear()
        for worker in workers:
            pending.extend(worker.stop())

        for event in pending:
            event.complete(IngestionError("Ingestion service closed"))
        if pending:
            logger.warning(f"Dropped {len(pending)} pending events on close")

    def submit(self, fetch: SeasonFetch) -> ScrapeEvent:
        """Enqueue a fetch and return its event without waiting.

        Raises:
            IngestionError: If the dispatcher is not running
        """
        if not self.running:
            raise IngestionError("Ingestion service is not running")
        event = ScrapeEvent(fetch=fetch)
        self.events.put(event)
        return event

    def ingest(self, fetch: SeasonFetch, timeout: Optional[float] = None) -> None:
        """Enqueue a fetch and block until it has been processed.

        Raises:
            IngestionError: If the fetch was rejected
            TimeoutError: If timeout elapses first
        """
        self.submit(fetch).wait(timeout=timeout)

    def _dispatch(self) -> None:
        while True:
            event = self.events.get()
            if event is _STOP:
                break
            try:
                self._validate_season(event.fetch.year)
            except IngestionError as e:
                logger.error(f"Season {event.fetch.year}: ingestion rejected: {e}")
                event.complete(e)
                continue
            self._worker_for(event.fetch.year).put(event)

    def _validate_season(self, season: int) -> None:
        this_year = date.today().year
        if season > this_year:
            raise IngestionError(f"Season {season} is in the future")
        if season < self.first_season:
            raise IngestionError(f"Season {season} is before {self.first_season}")

    def _worker_for(self, season: int) -> SeasonWorker:
        with self._lock:
            worker = self._workers.get(season)
            if worker is None:
                worker = SeasonWorker(season, self._register_athletes)
                worker.start(self.store)
                self._workers[season] = worker
            return worker

    def _register_athletes(self, fetch: SeasonFetch) -> int:
        """Give every result row an athlete identity, persisting new athletes."""
        created = 0
        for result in fetch.results or []:
            for course in result.courses:
                for row in course.rows:
                    athlete, existed = self.cache.competitor(row.name, row.club)
                    if existed:
                        continue
                    created += 1
                    if self.persist_athlete is None:
                        continue
                    try:
                        self.persist_athlete(athlete)
                    except Exception as e:
                        logger.error(f"Failed to persist athlete {athlete.id}: {e}")
        return created
