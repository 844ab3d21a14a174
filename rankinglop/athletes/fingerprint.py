"""Athlete fingerprints and identities."""
import base64
import hashlib
import uuid

UNKNOWN_ATHLETE_ID = "unknown"


def normalize(value: str) -> str:
    """Trim surrounding whitespace and lowercase."""
    return (value or "").strip().lower()


def fingerprint(name: str, club: str) -> str:
    """URL-safe base64 SHA-1 of the normalized name followed by the normalized club.

    Examples:
        >>> fingerprint("Jane Doe", "Club") == fingerprint(" jane doe ", "CLUB")
        True
    """
    digest = hashlib.sha1((normalize(name) + normalize(club)).encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")


def new_athlete_id() -> str:
    """Fresh random athlete identity."""
    return str(uuid.uuid4())
