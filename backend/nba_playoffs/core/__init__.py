"""
Core utilities.
"""

from .divisions import DIVISION_CONFERENCES, division_conference
from .seasons import get_current_season, season_end_year, utc_now

__all__ = [
    "DIVISION_CONFERENCES",
    "division_conference",
    "get_current_season",
    "season_end_year",
    "utc_now",
]
