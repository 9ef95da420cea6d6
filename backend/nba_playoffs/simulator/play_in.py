"""
Play-in tournament resolution.

Seeds 7-10 of a conference play three single games:

    7v8:   winner is the 7th seed, loser plays the final
    9v10:  winner plays the final, loser is eliminated
    final: 7v8 loser vs 9v10 winner, winner is the 8th seed

The higher seed hosts each game when home court advantage is on.
"""

import logging
from typing import Sequence

from .errors import InsufficientTeamsError
from .games import simulate_game
from .models import RatedTeam, PlayInGame, PlayInResult
from .rng import RandomSource
from .series import GameFn, check_team


logger = logging.getLogger(__name__)

PLAY_IN_FIELD_SIZE = 10
DIRECT_QUALIFIERS = 6


def _play(
    label: str,
    higher: RatedTeam,
    lower: RatedTeam,
    rng: RandomSource,
    use_luck_factor: bool,
    use_home_court_advantage: bool,
    game_fn: GameFn
) -> PlayInGame:
    team_a_home = True if use_home_court_advantage else None
    winner = game_fn(
        higher, lower, rng,
        team_a_home=team_a_home,
        use_luck_factor=use_luck_factor
    )
    logger.debug("Play-in %s: %s def. %s", label, winner.name,
                 lower.name if winner == higher else higher.name)
    return PlayInGame(
        label=label,
        team1=higher,
        team2=lower,
        winner=winner,
        home_team=team_a_home is True
    )


def resolve_play_in(
    ranked: Sequence[RatedTeam],
    rng: RandomSource,
    use_luck_factor: bool = False,
    use_home_court_advantage: bool = True,
    game_fn: GameFn = simulate_game
) -> PlayInResult:
    """
    Resolve a conference's play-in into its final 8 seeds.

    Args:
        ranked: Conference teams ordered best-first (at least 10)
        rng: Random source for this run
        use_luck_factor: Apply the per-game luck term
        use_home_court_advantage: Give the higher seed the home court bonus
        game_fn: Single game resolver (swappable for tests)

    Returns:
        PlayInResult with seeds 1-6 unchanged plus the resolved 7th and 8th

    Raises:
        InsufficientTeamsError: If fewer than 10 ranked teams are supplied
    """
    if len(ranked) < PLAY_IN_FIELD_SIZE:
        raise InsufficientTeamsError(
            f"Not enough teams for the play-in tournament "
            f"(found {len(ranked)}, need at least {PLAY_IN_FIELD_SIZE})"
        )

    for i, team in enumerate(ranked[:PLAY_IN_FIELD_SIZE], start=1):
        check_team(team, f"Seed {i}")

    seed7, seed8, seed9, seed10 = ranked[6:10]

    game1 = _play("7v8", seed7, seed8, rng, use_luck_factor, use_home_court_advantage, game_fn)
    game2 = _play("9v10", seed9, seed10, rng, use_luck_factor, use_home_court_advantage, game_fn)

    # 7v8 loser always outranks the 9v10 winner, so it is team1 (and hosts)
    game3 = _play("final", game1.loser, game2.winner, rng,
                  use_luck_factor, use_home_court_advantage, game_fn)

    seeds = tuple(ranked[:DIRECT_QUALIFIERS]) + (game1.winner, game3.winner)

    return PlayInResult(
        games=(game1, game2, game3),
        seeds=seeds,
        eliminated=(game2.loser, game3.loser)
    )
