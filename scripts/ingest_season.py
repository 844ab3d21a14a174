#!/usr/bin/env python3
"""CLI script to ingest a scraped season batch from a JSON file."""
import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pydantic import ValidationError

from rankinglop.athletes.cache import AthleteCache
from rankinglop.competitions.store import CompetitionStore
from rankinglop.config.logging import configure_logging
from rankinglop.config.settings import get_settings
from rankinglop.database.connection import engine, Base
from rankinglop.database.schemas import SeasonFetch
from rankinglop.ingestion.service import IngestionError, IngestionService
from rankinglop.storage.blob_store import BlobStore


def main():
    parser = argparse.ArgumentParser(
        description="Ingest a scraped season batch into the competition and athlete stores"
    )
    parser.add_argument(
        "path",
        type=Path,
        help="JSON file with one season fetch",
    )
    parser.add_argument(
        "--timeout", "-t",
        type=float,
        help="Seconds to wait for the batch to be processed",
    )
    parser.add_argument(
        "--log-level", "-l",
        help="Override the configured log level",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        fetch = SeasonFetch.model_validate_json(args.path.read_bytes())
    except (OSError, ValidationError) as e:
        print(f"\nError: could not read {args.path}: {e}", file=sys.stderr)
        sys.exit(1)

    settings = get_settings()
    Base.metadata.create_all(bind=engine)
    blob_store = BlobStore(settings=settings)

    cache = AthleteCache(settings.athletes_container, settings.athletes_file_pattern)
    cache.init(blob_store.read)
    store = CompetitionStore(
        persist=blob_store.persist_competitions,
        fetch=blob_store.fetch_competitions,
    )
    athletes_before = len(cache)
    competitions_before = len(store)

    print(f"Ingesting season {fetch.year} from {args.path}")

    ingestion = IngestionService(
        store,
        cache,
        persist_athlete=blob_store.persist_athlete,
        first_season=settings.first_season,
    )
    ingestion.start()
    try:
        ingestion.ingest(fetch, timeout=args.timeout or settings.ingest_timeout_seconds)
    except (IngestionError, TimeoutError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        ingestion.close()

    print(f"\nIngestion complete!")
    print(f"  Competitions: {competitions_before} -> {len(store)}")
    print(f"  Season {fetch.year}: {len(store.competitions_for_season(fetch.year))}")
    print(f"  Athletes: {athletes_before} -> {len(cache)}")


if __name__ == "__main__":
    main()
