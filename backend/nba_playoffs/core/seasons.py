"""
NBA season utilities.
"""

from datetime import datetime, timezone
from typing import Optional


# The regular season tips off in October
SEASON_START_MONTH = 10


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_current_season(now: Optional[datetime] = None) -> str:
    """
    Get the current NBA season label.

    The season spans two years: Oct-Dec belongs to the season ending next
    year (e.g., Oct 2025 = "2025-2026", Mar 2026 = "2025-2026").

    Args:
        now: Reference time (defaults to the current UTC time)

    Returns:
        "<start year>-<end year>"
    """
    now = now or utc_now()
    start = now.year if now.month >= SEASON_START_MONTH else now.year - 1
    return f"{start}-{start + 1}"


def season_end_year(season: str) -> int:
    """
    Get the year a season ends in ("2025-2026" -> 2026).

    A bare end year ("2026") is accepted as well.

    Raises:
        ValueError: If the label isn't a valid season
    """
    parts = season.strip().split("-")
    if len(parts) == 1 and parts[0].isdigit():
        return int(parts[0])
    if len(parts) == 2 and all(p.isdigit() for p in parts):
        start, end = int(parts[0]), int(parts[1])
        if end == start + 1:
            return end
    raise ValueError(f"Invalid season {season!r}, expected e.g. '2025-2026'")
