"""API endpoints for athlete identities."""
from fastapi import APIRouter, Depends, HTTPException, Query

from rankinglop.api.dependencies import get_athlete_cache
from rankinglop.athletes.cache import AthleteCache
from rankinglop.database.schemas import (
    AthleteIdResponse,
    AthleteRecord,
    CompetitorRequest,
    CompetitorResponse,
)

router = APIRouter(prefix="/athletes", tags=["athletes"])


@router.get("", response_model=list[AthleteRecord])
def list_athletes(cache: AthleteCache = Depends(get_athlete_cache)):
    """List every known athlete."""
    return cache.all()


@router.get("/id", response_model=AthleteIdResponse)
def athlete_id(
    name: str = Query(..., min_length=1, description="Athlete name"),
    club: str = Query("", description="Athlete club"),
    cache: AthleteCache = Depends(get_athlete_cache),
):
    """Look up an athlete identity without creating it.

    Returns "unknown" when the athlete has never been seen.
    """
    return AthleteIdResponse(id=cache.id(name, club))


@router.post("", response_model=CompetitorResponse)
def get_or_create_athlete(
    request: CompetitorRequest,
    cache: AthleteCache = Depends(get_athlete_cache),
):
    """Get the athlete for a name and club, creating it on first sight."""
    athlete, existed = cache.competitor(request.name, request.club)
    return CompetitorResponse(athlete=athlete, existed=existed)


@router.get("/{athlete_id}", response_model=AthleteRecord)
def get_athlete(
    athlete_id: str,
    cache: AthleteCache = Depends(get_athlete_cache),
):
    """Get a single athlete by identity."""
    athlete = cache.by_id(athlete_id)
    if not athlete:
        raise HTTPException(status_code=404, detail="Athlete not found")
    return athlete
