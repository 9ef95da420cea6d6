"""
Best-of-seven series simulation.
"""

import logging
import math
from typing import Callable, List, Optional

from .errors import MissingTeamDataError
from .games import simulate_game
from .models import RatedTeam, GameRecord, SeriesResult
from .rng import RandomSource


logger = logging.getLogger(__name__)

WINS_NEEDED = 4
MAX_GAMES = 7

# 2-2-1-1-1: the first-named team hosts games 1, 2, 5 and 7
HOME_GAMES = frozenset({1, 2, 5, 7})

GameFn = Callable[..., RatedTeam]


def check_team(team: Optional[RatedTeam], label: str) -> None:
    if team is None:
        raise MissingTeamDataError(f"{label} is missing")
    rating = getattr(team, "weighted_rating", None)
    if rating is None or not isinstance(rating, (int, float)) or not math.isfinite(rating):
        raise MissingTeamDataError(f"{label} ({getattr(team, 'name', '?')}) has no weighted rating")


def run_series(
    team_a: RatedTeam,
    team_b: RatedTeam,
    rng: RandomSource,
    use_luck_factor: bool = False,
    use_home_court_advantage: bool = True,
    game_fn: GameFn = simulate_game
) -> SeriesResult:
    """
    Simulate a best-of-seven series.

    Args:
        team_a: Higher seed; hosts games 1, 2, 5 and 7 with home court on
        team_b: Lower seed
        rng: Random source for this run
        use_luck_factor: Apply the per-game luck term
        use_home_court_advantage: Give the host the home court bonus;
            otherwise every game is played as if on a neutral court
        game_fn: Single game resolver (swappable for tests)

    Returns:
        SeriesResult with 4 to 7 games

    Raises:
        MissingTeamDataError: If either team is absent or unrated
    """
    check_team(team_a, "Team 1")
    check_team(team_b, "Team 2")

    a_wins = 0
    b_wins = 0
    games: List[GameRecord] = []

    while a_wins < WINS_NEEDED and b_wins < WINS_NEEDED:
        game_number = a_wins + b_wins + 1
        if use_home_court_advantage:
            team_a_home = game_number in HOME_GAMES
        else:
            team_a_home = None

        winner = game_fn(
            team_a, team_b, rng,
            team_a_home=team_a_home,
            use_luck_factor=use_luck_factor
        )
        if winner == team_a:
            a_wins += 1
        else:
            b_wins += 1

        games.append(GameRecord(
            game_number=game_number,
            winner=winner.name,
            home_team=team_a_home is True
        ))
        logger.debug(
            "Game %d: %s wins (%s)", game_number, winner.name,
            "neutral" if team_a_home is None else ("home" if team_a_home else "away")
        )

    series_winner = team_a if a_wins > b_wins else team_b
    logger.debug(
        "Series %s vs %s: %s wins %d-%d",
        team_a.name, team_b.name, series_winner.name, max(a_wins, b_wins), min(a_wins, b_wins)
    )

    return SeriesResult(
        team1=team_a,
        team2=team_b,
        winner=series_winner,
        team1_wins=a_wins,
        team2_wins=b_wins,
        games=tuple(games)
    )
