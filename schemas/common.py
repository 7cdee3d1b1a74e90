"""
Shared literal types and field helpers for the content schemas.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Literal, Optional
from urllib.parse import urlparse

Language = Literal["zh", "en"]
Difficulty = Literal["beginner", "intermediate", "advanced"]

DIFFICULTIES = ("beginner", "intermediate", "advanced")

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# ids double as URL slugs and export file names
ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


def is_valid_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def check_url(value: Optional[str], label: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not is_valid_url(value):
        raise ValueError(f"{label} must be a valid http(s) URL")
    return value


def coerce_date_string(value: Any) -> Any:
    # YAML turns unquoted 2024-01-15 into a date object
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def check_date_string(value: str) -> str:
    if not _DATE_RE.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value
