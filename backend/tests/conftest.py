"""
Shared fixtures for simulator and API tests.
"""

import pytest

from nba_playoffs.simulator.models import TeamStatLine, RatedTeam


def stat_line(
    name: str,
    conference: str = "Eastern",
    offensive_rating: float = 110.0,
    defensive_rating: float = 110.0,
    three_point_pct: float = 0.36,
    wins: int = 41,
    losses: int = 41
) -> TeamStatLine:
    return TeamStatLine(
        name=name,
        conference=conference,
        offensive_rating=offensive_rating,
        defensive_rating=defensive_rating,
        three_point_pct=three_point_pct,
        wins=wins,
        losses=losses
    )


@pytest.fixture
def make_line():
    """Factory for stat lines with sensible defaults."""
    return stat_line


@pytest.fixture
def make_team():
    """Factory for rated teams with a given weighted rating."""
    def _make(name: str, rating: float, conference: str = "Eastern", wins: int = 41, losses: int = 41):
        return RatedTeam(
            stats=stat_line(name, conference, wins=wins, losses=losses),
            weighted_rating=rating
        )
    return _make


@pytest.fixture
def league_stats():
    """Fifteen teams per conference; lower numbers have better offenses."""
    lines = []
    for conference, prefix in (("Eastern", "East"), ("Western", "West")):
        for i in range(1, 16):
            lines.append(stat_line(
                f"{prefix} {i:02d}",
                conference,
                offensive_rating=122.0 - i,
                defensive_rating=105.0 + i * 0.5,
                three_point_pct=0.38 - i * 0.002,
                wins=62 - 2 * i,
                losses=20 + 2 * i
            ))
    return lines
