"""
ESPN statistics provider.

Builds team stat lines from ESPN's public NBA JSON API: the standings feed
gives conference, record and points for/against, and each team's statistics
feed gives the box score totals used to estimate possessions.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from .base import StatsProvider, SeasonNotFoundError, StatsSourceError
from ..core.divisions import DIVISION_CONFERENCES
from ..core.seasons import season_end_year
from ..simulator.models import TeamStatLine


logger = logging.getLogger(__name__)

ESPN_TIMEOUT = float(os.getenv("ESPN_TIMEOUT", "30"))

# Free throws that end a possession (and-ones, technicals and the first of
# two don't), the usual box score estimate
FREE_THROW_POSSESSION_FACTOR = 0.44


def normalize_conference(label: Optional[str]) -> Optional[str]:
    """
    Map an ESPN conference or division label to "Eastern" / "Western".

    Handles "Eastern Conference", "East", "EC" and division names such as
    "Atlantic Division". Returns None when the label can't be placed.
    """
    if not label:
        return None

    text = label.strip().lower()
    if text.startswith("east") or text == "ec":
        return "Eastern"
    if text.startswith("west") or text == "wc":
        return "Western"

    for division, conference in DIVISION_CONFERENCES.items():
        if division.lower() in text:
            return conference

    return None


def estimate_possessions(
    field_goals_attempted: float,
    offensive_rebounds: float,
    turnovers: float,
    free_throws_attempted: float
) -> float:
    """Possessions = FGA - OREB + TOV + 0.44 * FTA."""
    return (
        field_goals_attempted
        - offensive_rebounds
        + turnovers
        + FREE_THROW_POSSESSION_FACTOR * free_throws_attempted
    )


def _stat_values(stats: List[Dict[str, Any]]) -> Dict[str, float]:
    """Flatten an ESPN stats list into name -> numeric value."""
    values = {}
    for stat in stats:
        name = stat.get("name") or stat.get("type")
        value = stat.get("value")
        if name and isinstance(value, (int, float)):
            values[name] = float(value)
    return values


def parse_standings(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Parse the standings feed into one entry per team.

    Returns:
        Dicts with id, name, conference, wins, losses, points_for and
        points_against (per game)
    """
    teams = []
    for group in data.get("children", []):
        group_conference = normalize_conference(group.get("name") or group.get("abbreviation"))
        entries = group.get("standings", {}).get("entries", [])

        for entry in entries:
            team = entry.get("team", {})
            values = _stat_values(entry.get("stats", []))

            wins = int(values.get("wins", 0))
            losses = int(values.get("losses", 0))
            games = wins + losses

            points_for = values.get("avgPointsFor")
            if points_for is None and games:
                points_for = values.get("pointsFor", 0.0) / games
            points_against = values.get("avgPointsAgainst")
            if points_against is None and games:
                points_against = values.get("pointsAgainst", 0.0) / games

            teams.append({
                "id": str(team.get("id", "")),
                "name": team.get("displayName") or team.get("name", ""),
                "conference": group_conference,
                "wins": wins,
                "losses": losses,
                "points_for": points_for or 0.0,
                "points_against": points_against or 0.0,
            })

    return teams


def parse_team_statistics(data: Dict[str, Any]) -> Dict[str, float]:
    """Flatten a team statistics feed (all categories) into name -> value."""
    results = data.get("results", data)
    categories = results.get("stats", {}).get("categories", [])
    values = {}
    for category in categories:
        values.update(_stat_values(category.get("stats", [])))
    return values


def build_stat_line(team: Dict[str, Any], box: Dict[str, float]) -> TeamStatLine:
    """
    Combine a standings entry with the team's box score averages.

    Offensive and defensive ratings are points scored and allowed per 100
    possessions; the three-point percentage is stored as a fraction.

    Raises:
        StatsSourceError: If the possession estimate isn't positive
    """
    possessions = estimate_possessions(
        box.get("avgFieldGoalsAttempted", 0.0),
        box.get("avgOffensiveRebounds", 0.0),
        box.get("avgTurnovers", box.get("avgTotalTurnovers", 0.0)),
        box.get("avgFreeThrowsAttempted", 0.0),
    )
    if possessions <= 0:
        raise StatsSourceError(f"No usable box score totals for {team['name']}")

    three_point_pct = box.get("threePointFieldGoalPct", box.get("threePointPct", 0.0))
    if three_point_pct > 1:
        three_point_pct /= 100

    return TeamStatLine(
        name=team["name"],
        conference=team["conference"],
        offensive_rating=round(100 * team["points_for"] / possessions, 2),
        defensive_rating=round(100 * team["points_against"] / possessions, 2),
        three_point_pct=round(three_point_pct, 4),
        wins=team["wins"],
        losses=team["losses"]
    )


class ESPNStatsProvider(StatsProvider):
    """Team statistics from ESPN's public NBA API."""

    STANDINGS_URL = "https://site.api.espn.com/apis/v2/sports/basketball/nba/standings"
    TEAM_STATS_URL = "https://site.api.espn.com/apis/site/v2/sports/basketball/nba/teams/{team_id}/statistics"

    def __init__(self, timeout: float = ESPN_TIMEOUT):
        """
        Initialize the ESPN provider.

        Args:
            timeout: HTTP request timeout in seconds
        """
        self.timeout = timeout

    @property
    def source_name(self) -> str:
        return "ESPN"

    async def _fetch_json(
        self, client: httpx.AsyncClient, url: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Fetch and decode one ESPN endpoint.

        Raises:
            SeasonNotFoundError: On a 404
            StatsSourceError: On any other HTTP or network error, or a body that isn't JSON
        """
        try:
            response = await client.get(url, params=params)

            if response.status_code == 404:
                raise SeasonNotFoundError(
                    f"ESPN has no data for season {params.get('season')}"
                )

            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            raise StatsSourceError(f"ESPN API error: {e}")
        except httpx.RequestError as e:
            raise StatsSourceError(f"Network error: {e}")
        except ValueError as e:
            raise StatsSourceError(f"ESPN returned invalid JSON from {url}: {e}")

    async def fetch_team_stats(self, season: str) -> List[TeamStatLine]:
        """Fetch standings and per-team statistics, then build stat lines."""
        try:
            year = season_end_year(season)
        except ValueError as e:
            raise SeasonNotFoundError(str(e))

        params = {"season": year}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            standings = parse_standings(
                await self._fetch_json(client, self.STANDINGS_URL, {**params, "level": 2})
            )
            if not standings:
                raise SeasonNotFoundError(f"ESPN returned no standings for season {season}")

            box_scores = await asyncio.gather(*(
                self._fetch_json(client, self.TEAM_STATS_URL.format(team_id=team["id"]), params)
                for team in standings
            ))

        lines = []
        for team, box_data in zip(standings, box_scores):
            if team["conference"] is None:
                logger.warning("Could not determine conference for %s", team["name"])
            lines.append(build_stat_line(team, parse_team_statistics(box_data)))

        logger.info("Fetched ESPN stats for %d teams (%s)", len(lines), season)
        return lines
