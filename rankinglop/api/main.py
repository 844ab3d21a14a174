"""FastAPI application setup."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rankinglop.athletes.cache import AthleteCache
from rankinglop.competitions.store import CompetitionStore
from rankinglop.config.logging import configure_logging
from rankinglop.config.settings import get_settings
from rankinglop.database.connection import engine, Base
from rankinglop.ingestion.service import IngestionService
from rankinglop.storage.blob_store import BlobStore
from rankinglop.api.routers import athletes, competitions, scrape

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load both caches and start ingestion before serving requests."""
    configure_logging()
    settings = get_settings()
    Base.metadata.create_all(bind=engine)

    blob_store = BlobStore(settings=settings)

    cache = AthleteCache(settings.athletes_container, settings.athletes_file_pattern)
    cache.init(blob_store.read)

    store = CompetitionStore(
        persist=blob_store.persist_competitions,
        fetch=blob_store.fetch_competitions,
    )

    ingestion = IngestionService(
        store,
        cache,
        persist_athlete=blob_store.persist_athlete,
        first_season=settings.first_season,
    )
    ingestion.start()

    app.state.athlete_cache = cache
    app.state.competition_store = store
    app.state.ingestion_service = ingestion
    logger.info(f"Ready with {len(cache)} athletes and {len(store)} competitions")

    yield

    ingestion.close()


app = FastAPI(
    title="Rankingløp",
    description="Athlete and competition identities for the ranking race series",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(athletes.router, prefix="/api")
app.include_router(competitions.router, prefix="/api")
app.include_router(scrape.router, prefix="/api")


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "name": "Rankingløp API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
