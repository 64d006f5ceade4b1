"""
Shared helpers for document models.

Convention:
    - Each collection's document shape lives in its own file under `db/models/`
    - Models are plain dataclasses; `to_document()` produces the dict
      written to the store, with camelCase field names as stored
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def text_or_empty(value) -> str:
    """Coerce a possibly-missing scalar to a string field value."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def list_or_empty(value) -> list:
    """Coerce a possibly-missing value to a list field value."""
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
