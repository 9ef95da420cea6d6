"""
Bracket simulation engine.

A run moves through fixed stages:

    IDLE -> RATINGS_COMPUTED -> PLAY_IN_RESOLVED -> ROUND_1_DONE
         -> ROUND_2_DONE -> ROUND_3_DONE -> FINALS_DONE

Both conferences finish a round before either starts the next one. Any
failure aborts the run in the stage being worked on; no partial result is
returned.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import SimulationError, InsufficientTeamsError, PairingError
from .models import (
    TeamStatLine,
    WeightingConfig,
    RatedTeam,
    RoundResult,
    ConferenceResult,
    PlayInResult,
    SimulationResult,
)
from .play_in import resolve_play_in
from .ratings import CONFERENCES, compute_ratings, validate_weighting
from .rng import RandomSource
from .seeding import split_by_conference, build_seed_index
from .series import run_series


logger = logging.getLogger(__name__)

BRACKET_SIZE = 8
CONFERENCE_ROUNDS = 3

Seeded = Tuple[int, RatedTeam]


class Stage(str, Enum):
    """Stages of a single simulation run."""
    IDLE = "idle"
    RATINGS_COMPUTED = "ratings_computed"
    PLAY_IN_RESOLVED = "play_in_resolved"
    ROUND_1_DONE = "round_1_done"
    ROUND_2_DONE = "round_2_done"
    ROUND_3_DONE = "round_3_done"
    FINALS_DONE = "finals_done"


ROUND_STAGES = {1: Stage.ROUND_1_DONE, 2: Stage.ROUND_2_DONE, 3: Stage.ROUND_3_DONE}


@contextmanager
def _stage(label: str):
    """Tag any simulation error raised inside the block with the stage label."""
    try:
        yield
    except SimulationError as e:
        if e.stage is None:
            e.stage = label
        raise


def pair_round(seeded: Sequence[Seeded]) -> List[Tuple[Seeded, Seeded]]:
    """
    Pair surviving teams highest seed vs lowest seed.

    Args:
        seeded: (seed, team) pairs, in any order

    Returns:
        (higher, lower) pairs, best pairing first

    Raises:
        PairingError: If the number of teams is odd
    """
    if len(seeded) % 2 != 0:
        raise PairingError(f"Cannot pair an odd number of teams ({len(seeded)})")
    ordered = sorted(seeded, key=lambda st: st[0])
    count = len(ordered)
    return [(ordered[i], ordered[count - 1 - i]) for i in range(count // 2)]


class ConferenceBracket:
    """One conference's 8-team bracket, advanced a round at a time."""

    def __init__(self, name: str, seeds: Sequence[RatedTeam], play_in: Optional[PlayInResult] = None):
        if len(seeds) != BRACKET_SIZE:
            raise InsufficientTeamsError(
                f"{name} conference needs exactly {BRACKET_SIZE} seeded teams, got {len(seeds)}"
            )
        self.name = name
        self.play_in = play_in
        self.seed_index = build_seed_index(seeds)
        self.remaining: List[Seeded] = [(self.seed_index[team.name], team) for team in seeds]
        self.rounds: List[RoundResult] = []

    def play_round(
        self,
        rng: RandomSource,
        use_luck_factor: bool = False,
        use_home_court_advantage: bool = True
    ) -> RoundResult:
        """Play every series of the next round; the higher seed is listed first."""
        round_number = len(self.rounds) + 1
        series_results = tuple(
            run_series(
                higher, lower, rng,
                use_luck_factor=use_luck_factor,
                use_home_court_advantage=use_home_court_advantage
            )
            for (_, higher), (_, lower) in pair_round(self.remaining)
        )
        round_result = RoundResult(round=round_number, series=series_results)
        self.rounds.append(round_result)
        self.remaining = [(self.seed_index[s.winner.name], s.winner) for s in series_results]
        return round_result

    def result(self) -> ConferenceResult:
        if len(self.rounds) != CONFERENCE_ROUNDS or len(self.remaining) != 1:
            raise PairingError(
                f"{self.name} conference finished with {len(self.remaining)} teams "
                f"after {len(self.rounds)} rounds"
            )
        return ConferenceResult(
            name=self.name,
            rounds=tuple(self.rounds),
            champion=self.remaining[0][1],
            play_in=self.play_in
        )


def simulate_conference(
    name: str,
    seeds: Sequence[RatedTeam],
    rng: RandomSource,
    use_luck_factor: bool = False,
    use_home_court_advantage: bool = True,
    play_in: Optional[PlayInResult] = None
) -> ConferenceResult:
    """
    Simulate three rounds of a conference bracket.

    Round 1 pairs 1v8, 2v7, 3v6, 4v5. Later rounds re-pair the survivors so
    the highest remaining seed always meets the lowest.

    Raises:
        InsufficientTeamsError: If the conference doesn't have exactly 8 seeds
        PairingError: If a round is left with an odd number of teams
    """
    with _stage("round 1"):
        bracket = ConferenceBracket(name, seeds, play_in)

    for round_number in range(1, CONFERENCE_ROUNDS + 1):
        with _stage(f"round {round_number}"):
            bracket.play_round(rng, use_luck_factor, use_home_court_advantage)

    with _stage(f"round {CONFERENCE_ROUNDS}"):
        return bracket.result()


def finals_order(champions: Sequence[RatedTeam]) -> Tuple[RatedTeam, RatedTeam]:
    """
    Order the two conference champions for the finals.

    The better regular season record holds home court; a tie goes to the
    higher weighted rating, then to the first conference listed.
    """
    first, second = champions
    if (second.win_pct, second.weighted_rating) > (first.win_pct, first.weighted_rating):
        return second, first
    return first, second


def run_playoffs(
    rated_teams: Iterable[RatedTeam],
    season: str,
    date: datetime,
    rng: RandomSource,
    weighting: Optional[WeightingConfig] = None,
    use_luck_factor: bool = False,
    use_home_court_advantage: bool = True
) -> SimulationResult:
    """
    Run the play-in, both conference brackets and the finals.

    Args:
        rated_teams: All rated teams, both conferences
        season: Season label recorded on the result (e.g. "2025-2026")
        date: Simulation date recorded on the result
        rng: Random source for this run
        weighting: The weighting that produced the ratings
        use_luck_factor: Apply the per-game luck term
        use_home_court_advantage: Apply the home court bonus

    Returns:
        The complete SimulationResult

    Raises:
        SimulationError: Any engine failure, tagged with the failing stage
    """
    if weighting is None:
        weighting = WeightingConfig()

    with _stage("play-in"):
        conferences = split_by_conference(rated_teams)
        play_ins: Dict[str, PlayInResult] = {
            conf_name: resolve_play_in(
                conferences[conf_name], rng,
                use_luck_factor=use_luck_factor,
                use_home_court_advantage=use_home_court_advantage
            )
            for conf_name in CONFERENCES
        }
    logger.debug("Stage reached: %s", Stage.PLAY_IN_RESOLVED.value)

    with _stage("round 1"):
        brackets = {
            conf_name: ConferenceBracket(conf_name, play_ins[conf_name].seeds, play_ins[conf_name])
            for conf_name in CONFERENCES
        }

    for round_number in range(1, CONFERENCE_ROUNDS + 1):
        with _stage(f"round {round_number}"):
            for conf_name in CONFERENCES:
                brackets[conf_name].play_round(rng, use_luck_factor, use_home_court_advantage)
        logger.debug("Stage reached: %s", ROUND_STAGES[round_number].value)

    with _stage(f"round {CONFERENCE_ROUNDS}"):
        conference_results = tuple(brackets[c].result() for c in CONFERENCES)

    with _stage("finals"):
        home, away = finals_order([c.champion for c in conference_results])
        finals = run_series(
            home, away, rng,
            use_luck_factor=use_luck_factor,
            use_home_court_advantage=use_home_court_advantage
        )
    logger.debug("Stage reached: %s", Stage.FINALS_DONE.value)

    logger.debug(
        "Simulated %s playoffs: %s def. %s %s",
        season, finals.winner.name, finals.loser.name, finals.score_str
    )

    return SimulationResult(
        season=season,
        date=date,
        conferences=conference_results,
        champion=finals.winner,
        weighting=weighting,
        finals=finals
    )


def run_simulation(
    stats: Iterable[TeamStatLine],
    season: str,
    date: datetime,
    rng: RandomSource,
    weighting: Optional[WeightingConfig] = None,
    use_luck_factor: bool = False,
    use_home_court_advantage: bool = True
) -> SimulationResult:
    """Rate the teams, then run the full playoffs."""
    if weighting is None:
        weighting = WeightingConfig()

    with _stage("rating computation"):
        validate_weighting(weighting)
        rated = compute_ratings(stats, weighting)
    logger.debug("Stage reached: %s", Stage.RATINGS_COMPUTED.value)

    result = run_playoffs(
        rated,
        season=season,
        date=date,
        rng=rng,
        weighting=weighting,
        use_luck_factor=use_luck_factor,
        use_home_court_advantage=use_home_court_advantage
    )
    logger.info(
        "%s playoff simulation: %s won the title %s",
        season, result.champion.name, result.finals.score_str
    )
    return result
