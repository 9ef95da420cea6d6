"""
Abstract base class for team statistics providers.

This provides a common interface for fetching per-team season statistics
from an external source (ESPN, a stored snapshot, etc.).
"""

from abc import ABC, abstractmethod
from typing import List

from ..simulator.models import TeamStatLine


class StatsProvider(ABC):
    """Abstract base class for team statistics providers."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return the source name stored alongside fetched stats (e.g., 'ESPN')."""
        pass

    @abstractmethod
    async def fetch_team_stats(self, season: str) -> List[TeamStatLine]:
        """
        Fetch one stat line per team for a season.

        Args:
            season: Season label, e.g. "2025-2026"

        Returns:
            Stat lines with conference, ratings, three-point pct and record

        Raises:
            SeasonNotFoundError: If the source has no data for the season
            StatsSourceError: If there's an error communicating with the source
        """
        pass


class SeasonNotFoundError(Exception):
    """Raised when the source has no data for a season."""
    pass


class StatsSourceError(Exception):
    """Raised when there's an error communicating with the stats source."""
    pass
