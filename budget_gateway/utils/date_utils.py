"""Date manipulation utilities"""

from datetime import date
from typing import Optional


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD string; empty values yield None, malformed ones raise ValueError"""
    if not value:
        return None
    return date.fromisoformat(value)


def month_key(day: date) -> str:
    """Calendar month of a date as YYYY-MM"""
    return day.strftime("%Y-%m")
