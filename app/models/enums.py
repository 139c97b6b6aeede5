"""Enum types mirroring the Postgres columns they are stored in."""

from enum import Enum


class ReadingStatus(str, Enum):
    """Per-bookmark reading state."""
    plan_to_read = "plan_to_read"
    reading = "reading"
    on_hold = "on_hold"
    dropped = "dropped"
    completed = "completed"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"
