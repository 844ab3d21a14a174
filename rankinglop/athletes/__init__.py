"""Athlete identities keyed by name+club fingerprint."""
from .cache import AthleteCache
from .fingerprint import UNKNOWN_ATHLETE_ID, fingerprint, new_athlete_id

__all__ = [
    "AthleteCache",
    "UNKNOWN_ATHLETE_ID",
    "fingerprint",
    "new_athlete_id",
]
