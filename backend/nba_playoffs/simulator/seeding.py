"""
Conference seeding and tie-breaker resolution.

Seeding order:
1. Weighted rating (higher is better)
2. Regular season win percentage
3. Total wins
4. Team name (alphabetical, so replays never depend on input order)
"""

from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence

from .errors import InvalidStatError
from .models import RatedTeam
from .ratings import CONFERENCES


def _seed_key(team: RatedTeam):
    return (-team.weighted_rating, -team.win_pct, -team.wins, team.name)


def rank_teams(teams: Iterable[RatedTeam]) -> List[RatedTeam]:
    """
    Rank teams best-first.

    Teams level on weighted rating are separated by win percentage, then
    total wins, then name.
    """
    return sorted(teams, key=_seed_key)


def split_by_conference(teams: Iterable[RatedTeam]) -> Dict[str, List[RatedTeam]]:
    """
    Group rated teams by conference, each group ranked best-first.

    Raises:
        InvalidStatError: If a team has no conference or an unknown one
    """
    grouped: Dict[str, List[RatedTeam]] = defaultdict(list)
    for team in teams:
        if team.conference not in CONFERENCES:
            raise InvalidStatError(
                f"Team {team.name} has no valid conference (got {team.conference!r})"
            )
        grouped[team.conference].append(team)

    return {conf: rank_teams(grouped.get(conf, [])) for conf in CONFERENCES}


def build_seed_index(seeds: Sequence[RatedTeam]) -> Mapping[str, int]:
    """Read-only team name -> seed (1-based) lookup."""
    return MappingProxyType({team.name: i for i, team in enumerate(seeds, start=1)})
