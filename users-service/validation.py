"""
Registration payload validation.

``validate_registration`` is a pure function: it either returns the cleaned
fields or raises the first rule violated, checking in a fixed order so the
reported error is deterministic. Persisting the result is the caller's job.
"""
import re
import uuid
from typing import Any, Dict, Mapping

from errors import InvalidFormat, MissingField
from models import User

CLUBS = (
    "Cache Valley Stone Society",
    "Ogden Curling Club",
    "Park City Curling Club",
    "Salt City Curling Club",
    "Utah Olympic Oval Curling Club",
)

USERNAME_MIN, USERNAME_MAX = 6, 20
PASSWORD_MIN, PASSWORD_MAX = 8, 36

# At least one letter and one digit, letters and digits only.
PASSWORD_PATTERN = re.compile(r"(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]{8,}", re.ASCII)

TRUE_STRINGS = {"true", "1", "yes", "on"}


def _as_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def _within(value: Any, low: int, high: int) -> bool:
    return isinstance(value, str) and low <= len(value) <= high


def validate_registration(payload: Mapping[str, Any]) -> Dict[str, Any]:
    username = payload.get("username")
    password = payload.get("password")
    favorite_club = payload.get("favoriteClub")

    if not username:
        raise MissingField("username")
    if not password:
        raise MissingField("password")
    if not favorite_club:
        raise MissingField("favoriteClub")

    if not _within(username, USERNAME_MIN, USERNAME_MAX):
        raise InvalidFormat(
            "username length",
            f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters",
        )
    if not _within(password, PASSWORD_MIN, PASSWORD_MAX):
        raise InvalidFormat(
            "password length",
            f"Password must be between {PASSWORD_MIN} and {PASSWORD_MAX} characters",
        )
    if not PASSWORD_PATTERN.fullmatch(password):
        raise InvalidFormat(
            "password complexity",
            "Password must contain at least one letter and one digit, and only letters and digits",
        )
    if favorite_club not in CLUBS:
        raise InvalidFormat("unknown club", "Not a valid club")

    return {
        "username": username,
        "password": password,
        "favoriteClub": favorite_club,
        "newsLetter": _as_bool(payload.get("newsLetter")),
    }


def build_user(fields: Mapping[str, Any]) -> User:
    """Attach a fresh id to validated fields."""
    return User(id=str(uuid.uuid4()), **fields)
