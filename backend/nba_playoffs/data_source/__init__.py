"""
Team statistics providers.

Provides a unified interface for fetching NBA team statistics from
external sources.
"""

from .base import (
    StatsProvider,
    SeasonNotFoundError,
    StatsSourceError
)
from .espn import ESPNStatsProvider, normalize_conference, estimate_possessions


def get_provider(source: str = "espn") -> StatsProvider:
    """
    Get the statistics provider for a source.

    Args:
        source: Source name ('espn')

    Returns:
        Provider instance

    Raises:
        ValueError: If the source is not supported
    """
    if source.lower() == "espn":
        return ESPNStatsProvider()

    raise ValueError(f"Unsupported stats source: {source}. Supported: espn")


__all__ = [
    "StatsProvider",
    "SeasonNotFoundError",
    "StatsSourceError",
    "ESPNStatsProvider",
    "normalize_conference",
    "estimate_possessions",
    "get_provider",
]
