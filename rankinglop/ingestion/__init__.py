"""Ingestion of scraped season batches."""
from .events import ScrapeEvent
from .service import IngestionError, IngestionService

__all__ = [
    "ScrapeEvent",
    "IngestionError",
    "IngestionService",
]
