"""Ingestion events passed from the request boundary to the dispatcher."""
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Optional

from rankinglop.database.schemas import SeasonFetch


@dataclass
class ScrapeEvent:
    """A parsed season fetch plus a single-use completion signal."""

    fetch: SeasonFetch
    done: Future = field(default_factory=Future)

    def complete(self, error: Optional[BaseException] = None) -> None:
        """Resolve the event with success (no error) or the given error."""
        if error is None:
            self.done.set_result(None)
        else:
            self.done.set_exception(error)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the event is processed, re-raising its error."""
        self.done.result(timeout=timeout)
