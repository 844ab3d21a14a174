#!/usr/bin/env python3
"""Create the blob table and report the configured containers."""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import inspect

from rankinglop.config.settings import get_settings
from rankinglop.database.connection import engine, Base
from rankinglop.database.models import StoredBlob
from rankinglop.storage.blob_store import BlobStore


def init_database():
    """Create tables, then list columns and blob counts per container."""
    settings = get_settings()
    print(f"Initializing {settings.database_url}...")
    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    for table in inspector.get_table_names():
        columns = ", ".join(col["name"] for col in inspector.get_columns(table))
        print(f"  {table}: {columns}")

    print("\nContainers:")
    for container, count in BlobStore(settings=settings).container_counts().items():
        print(f"  {container}: {count} blobs")
    print(f"\nCompetition list document: {settings.competitions_container}/{settings.competitions_file}")


if __name__ == "__main__":
    init_database()
