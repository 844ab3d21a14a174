"""Shared dependencies for API endpoints."""
from fastapi import Request

from rankinglop.athletes.cache import AthleteCache
from rankinglop.competitions.store import CompetitionStore
from rankinglop.ingestion.service import IngestionService


def get_athlete_cache(request: Request) -> AthleteCache:
    """Athlete cache created at application startup."""
    return request.app.state.athlete_cache


def get_competition_store(request: Request) -> CompetitionStore:
    """Competition store created at application startup."""
    return request.app.state.competition_store


def get_ingestion_service(request: Request) -> IngestionService:
    """Running ingestion service created at application startup."""
    return request.app.state.ingestion_service
