"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Optional, Tuple


def validity_window(start: Optional[date] = None, days: int = 30) -> Tuple[date, date]:
    """Return (proposal_date, valid_until) with valid_until `days` after start"""
    start = start or date.today()
    return start, start + timedelta(days=days)


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, also accepting a full ISO timestamp"""
    return date.fromisoformat(value[:10])
