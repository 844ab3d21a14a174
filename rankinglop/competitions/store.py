"""Competition store and its per-season synchronization loop.

The store is loaded once from the persisted competition list. Afterwards it
only grows through start(): each season element feeds scraped batches to a
dedicated loop, which adds unseen competitions and persists the full list
whenever a batch changed anything.

Competition identities are the event date plus a random suffix, generated
before the existence check. A repeated event therefore gets a new identity
and is stored again on every fetch.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from rankinglop.database.schemas import Competition, Course, SeasonFetch
from rankinglop.storage.blob_store import CompetitionFetch, CompetitionPersist
from .courses import build_competition, make_competition_id
from .sync import SeasonSyncElement

logger = logging.getLogger(__name__)


class CompetitionNotFoundError(LookupError):
    """No competition matches the requested event and course names."""

    pass


class CompetitionStore:
    """Competitions keyed by identity, shared between sync loops and readers."""

    def __init__(
        self,
        persist: CompetitionPersist,
        fetch: CompetitionFetch,
        id_factory: Callable[[datetime], str] = make_competition_id,
    ):
        """Initialize the store and load previously persisted competitions.

        Args:
            persist: Writes the full competition list
            fetch: Returns the persisted competition list
            id_factory: Builds a competition identity from the event date
        """
        self._competitions: dict[str, Competition] = {}
        self._lock = threading.Lock()
        # Held across snapshot and write; persisted lists only ever grow
        self._persist_lock = threading.Lock()
        self._persist = persist
        self._make_id = id_factory
        self._load(fetch)

    def _load(self, fetch: CompetitionFetch) -> None:
        try:
            competitions = fetch()
        except Exception as e:
            logger.error(f"Failed to fetch competitions, starting empty: {e}")
            return

        with self._lock:
            for competition in competitions:
                self._competitions[competition.id] = competition
        logger.info(f"Loaded {len(competitions)} competitions")

    def __len__(self) -> int:
        with self._lock:
            return len(self._competitions)

    def list(self) -> list[Competition]:
        """Snapshot of all competitions. Order is unspecified."""
        with self._lock:
            return list(self._competitions.values())

    def get(self, competition_id: str) -> Competition | None:
        with self._lock:
            return self._competitions.get(competition_id)

    def competition_by_names(self, event_name: str, course_name: str) -> tuple[Competition, Course]:
        """Find the first competition and course matching both names exactly.

        Raises:
            CompetitionNotFoundError: If no competition/course pair matches
        """
        for competition in self.list():
            if competition.name != event_name:
                continue
            for course in competition.courses:
                if course.name == course_name:
                    return competition, course

        raise CompetitionNotFoundError(
            f"could not find competition {event_name} with course {course_name}"
        )

    def competitions_for_season(self, season: int) -> list[Competition]:
        """Competitions whose identity starts with the season year."""
        prefix = str(season)
        return [c for c in self.list() if c.id[:4] == prefix]

    def start(self, element: SeasonSyncElement) -> threading.Thread:
        """Run the sync loop for a season element in a background thread.

        The loop lives until the element is closed.
        """
        thread = threading.Thread(
            target=self._run,
            args=(element,),
            name=f"season-sync-{element.season}",
            daemon=True,
        )
        thread.start()
        return thread

    def _run(self, element: SeasonSyncElement) -> None:
        logger.info(f"Season {element.season}: sync loop started")
        while True:
            fetch = element.receive()
            if fetch is None:
                break
            try:
                self.sync(fetch)
            except Exception:
                logger.exception(f"Season {element.season}: failed to process batch")
            finally:
                element.acknowledge()
        logger.info(f"Season {element.season}: sync loop stopped")

    def sync(self, fetch: SeasonFetch) -> int:
        """Add unseen competitions from a batch and persist on change.

        Returns:
            Number of competitions added
        """
        if not fetch.results:
            logger.debug(f"Season {fetch.year}: empty batch")
            return 0

        added = 0
        for result in fetch.results:
            if result.event is None:
                continue
            competition_id = self._make_id(result.event.date)
            with self._lock:
                if competition_id in self._competitions:
                    continue
                self._competitions[competition_id] = build_competition(competition_id, result.event)
            added += 1

        if added:
            logger.info(f"Season {fetch.year}: {added} new competitions")
            with self._persist_lock:
                try:
                    self._persist(self.list())
                except Exception as e:
                    logger.error(f"Season {fetch.year}: failed to persist competitions: {e}")

        return added
