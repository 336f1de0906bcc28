# src/unitea_functions/db/time.py
"""Time and identifier helpers for database models."""

import uuid
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def new_uuid() -> str:
    """Return a random UUID in its canonical string form."""
    return str(uuid.uuid4())
