"""API endpoints for competition listing and lookup."""
from fastapi import APIRouter, Depends, HTTPException, Query

from rankinglop.api.dependencies import get_competition_store
from rankinglop.competitions.store import CompetitionNotFoundError, CompetitionStore
from rankinglop.database.schemas import Competition, CompetitionWithCourse

router = APIRouter(prefix="/competitions", tags=["competitions"])


@router.get("", response_model=list[Competition])
def list_competitions(store: CompetitionStore = Depends(get_competition_store)):
    """List all competitions, oldest first."""
    return sorted(store.list(), key=lambda c: (c.date, c.id))


@router.get("/lookup", response_model=CompetitionWithCourse)
def lookup_competition(
    event: str = Query(..., min_length=1, description="Exact event name"),
    course: str = Query(..., min_length=1, description="Exact course name"),
    store: CompetitionStore = Depends(get_competition_store),
):
    """Find a competition and course by their exact names."""
    try:
        competition, found = store.competition_by_names(event, course)
    except CompetitionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CompetitionWithCourse(competition=competition, course=found)


@router.get("/season/{season}", response_model=list[Competition])
def season_competitions(
    season: int,
    store: CompetitionStore = Depends(get_competition_store),
):
    """List the competitions of one season, oldest first."""
    return sorted(store.competitions_for_season(season), key=lambda c: (c.date, c.id))


@router.get("/{competition_id}", response_model=Competition)
def get_competition(
    competition_id: str,
    store: CompetitionStore = Depends(get_competition_store),
):
    """Get a single competition by identity."""
    competition = store.get(competition_id)
    if not competition:
        raise HTTPException(status_code=404, detail="Competition not found")
    return competition
