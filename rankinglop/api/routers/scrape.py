"""API endpoint for ingesting a scraped season."""
from fastapi import APIRouter, Depends, HTTPException

from rankinglop.api.dependencies import get_competition_store, get_ingestion_service
from rankinglop.competitions.store import CompetitionStore
from rankinglop.config.settings import Settings, get_settings
from rankinglop.database.schemas import ScrapeResponse, SeasonFetch
from rankinglop.ingestion.service import IngestionError, IngestionService

router = APIRouter(prefix="/scrape", tags=["scrape"])


@router.post("/{year}", response_model=ScrapeResponse)
def ingest_season(
    year: int,
    fetch: SeasonFetch,
    ingestion: IngestionService = Depends(get_ingestion_service),
    store: CompetitionStore = Depends(get_competition_store),
    settings: Settings = Depends(get_settings),
):
    """Ingest one scraped batch for a season.

    Blocks until the season's sync loop has acknowledged the batch.
    """
    if fetch.year != year:
        raise HTTPException(
            status_code=400,
            detail=f"Batch is for season {fetch.year}, not {year}",
        )

    try:
        ingestion.ingest(fetch, timeout=settings.ingest_timeout_seconds)
    except IngestionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TimeoutError:
        raise HTTPException(status_code=504, detail=f"Season {year} ingestion timed out")

    return ScrapeResponse(
        season=year,
        competitions=len(store.competitions_for_season(year)),
        message="Season ingested successfully",
    )
