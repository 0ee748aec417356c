"""Date display helpers shared by model properties."""
from datetime import date
from typing import Optional


def format_date(value: Optional[date]) -> str:
    """Human-readable date, e.g. ``Jan 2, 1900``; empty when unset."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def format_date_for_input(value: Optional[date]) -> str:
    """``YYYY-MM-DD`` form used by ``<input type="date">``."""
    return value.isoformat() if value else ""
