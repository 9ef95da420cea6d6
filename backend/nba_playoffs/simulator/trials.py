"""
Monte Carlo championship odds.

Runs many independent playoff simulations and counts how far each team gets.
Trials are spread over a process pool in chunks; every trial builds its own
generator from a seed drawn up front, so the totals for a given master seed
don't depend on the number of workers or on completion order.
"""

import logging
import multiprocessing
import os
import random
from collections import Counter
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .engine import run_playoffs
from .models import RatedTeam, SimulationResult


logger = logging.getLogger(__name__)

MIN_CHUNK_SIZE = 50

# Workers start fresh interpreters; the API calls in from a worker thread
POOL_START_METHOD = "spawn"

# Milestones counted per team, in bracket order
MILESTONES = ("playoffs", "second_round", "conference_finals", "finals", "championships")


@dataclass(frozen=True)
class TeamOdds:
    """How often a team reached each stage across all trials."""

    name: str
    conference: Optional[str]
    weighted_rating: float
    playoff_pct: float
    second_round_pct: float
    conference_finals_pct: float
    finals_pct: float
    championship_pct: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "conference": self.conference,
            "weighted_rating": self.weighted_rating,
            "playoff_pct": self.playoff_pct,
            "second_round_pct": self.second_round_pct,
            "conference_finals_pct": self.conference_finals_pct,
            "finals_pct": self.finals_pct,
            "championship_pct": self.championship_pct
        }


@dataclass(frozen=True)
class OddsResult:
    """Aggregated odds over n_trials simulations."""

    season: str
    n_trials: int
    seed: Optional[int]
    teams: Tuple[TeamOdds, ...]

    def for_team(self, name: str) -> TeamOdds:
        for team in self.teams:
            if team.name == name:
                return team
        raise KeyError(name)

    def to_dict(self) -> dict:
        return {
            "season": self.season,
            "n_trials": self.n_trials,
            "seed": self.seed,
            "teams": [t.to_dict() for t in self.teams]
        }


def tally_result(result: SimulationResult) -> Dict[str, Counter]:
    """Count the milestones each team reached in one simulation."""
    counts: Dict[str, Counter] = {m: Counter() for m in MILESTONES}
    for conf in result.conferences:
        if conf.play_in is not None:
            counts["playoffs"].update(t.name for t in conf.play_in.seeds)
        else:
            counts["playoffs"].update(s.team1.name for s in conf.rounds[0].series)
            counts["playoffs"].update(s.team2.name for s in conf.rounds[0].series)
        counts["second_round"].update(s.winner.name for s in conf.rounds[0].series)
        counts["conference_finals"].update(s.winner.name for s in conf.rounds[1].series)
        counts["finals"][conf.champion.name] += 1
    counts["championships"][result.champion.name] += 1
    return counts


def _run_chunk(
    rated_teams: Sequence[RatedTeam],
    trial_seeds: Sequence[int],
    season: str,
    date: datetime,
    use_luck_factor: bool,
    use_home_court_advantage: bool
) -> Dict[str, Counter]:
    """Run a batch of trials. Top-level so the process pool can pickle it."""
    totals: Dict[str, Counter] = {m: Counter() for m in MILESTONES}
    for trial_seed in trial_seeds:
        result = run_playoffs(
            rated_teams,
            season=season,
            date=date,
            rng=random.Random(trial_seed),
            use_luck_factor=use_luck_factor,
            use_home_court_advantage=use_home_court_advantage
        )
        for milestone, counter in tally_result(result).items():
            totals[milestone].update(counter)
    return totals


def _chunk(seeds: List[int], n_chunks: int) -> List[List[int]]:
    size = max(MIN_CHUNK_SIZE, -(-len(seeds) // max(n_chunks, 1)))
    return [seeds[i:i + size] for i in range(0, len(seeds), size)]


def estimate_championship_odds(
    rated_teams: Sequence[RatedTeam],
    n_trials: int,
    season: str,
    date: datetime,
    seed: Optional[int] = None,
    use_luck_factor: bool = False,
    use_home_court_advantage: bool = True,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[float], None]] = None
) -> OddsResult:
    """
    Estimate playoff odds by running independent simulations.

    Args:
        rated_teams: All rated teams, both conferences (never mutated)
        n_trials: Number of simulations to run
        season: Season label passed through to each run
        date: Simulation date passed through to each run
        seed: Master seed; the same seed always yields the same odds
        use_luck_factor: Apply the per-game luck term
        use_home_court_advantage: Apply the home court bonus
        max_workers: Worker processes (1 runs inline, None uses the CPU count)
        progress_callback: Optional callback for progress updates (receives percent complete)

    Returns:
        OddsResult with teams ordered by championship share
    """
    if n_trials < 1:
        raise ValueError(f"n_trials must be at least 1, got {n_trials}")

    teams = tuple(rated_teams)
    master = random.Random(seed)
    trial_seeds = [master.getrandbits(64) for _ in range(n_trials)]

    workers = max_workers or os.cpu_count() or 1
    chunks = _chunk(trial_seeds, workers)
    args = (season, date, use_luck_factor, use_home_court_advantage)

    totals: Dict[str, Counter] = {m: Counter() for m in MILESTONES}
    done = 0

    def _merge(chunk_counts: Dict[str, Counter], chunk_len: int) -> None:
        nonlocal done
        for milestone, counter in chunk_counts.items():
            totals[milestone].update(counter)
        done += chunk_len
        if progress_callback:
            progress_callback(done / n_trials * 100)

    if workers == 1 or len(chunks) == 1:
        for chunk in chunks:
            _merge(_run_chunk(teams, chunk, *args), len(chunk))
    else:
        with ProcessPoolExecutor(
            max_workers=workers,
            mp_context=multiprocessing.get_context(POOL_START_METHOD)
        ) as executor:
            futures = {
                executor.submit(_run_chunk, teams, chunk, *args): len(chunk)
                for chunk in chunks
            }
            for future in as_completed(futures):
                _merge(future.result(), futures[future])

    logger.info("Completed %d playoff simulations across %d chunk(s)", n_trials, len(chunks))

    odds = [
        TeamOdds(
            name=team.name,
            conference=team.conference,
            weighted_rating=team.weighted_rating,
            playoff_pct=totals["playoffs"][team.name] / n_trials,
            second_round_pct=totals["second_round"][team.name] / n_trials,
            conference_finals_pct=totals["conference_finals"][team.name] / n_trials,
            finals_pct=totals["finals"][team.name] / n_trials,
            championship_pct=totals["championships"][team.name] / n_trials
        )
        for team in teams
    ]
    odds.sort(key=lambda t: (-t.championship_pct, -t.finals_pct, -t.weighted_rating, t.name))

    return OddsResult(season=season, n_trials=n_trials, seed=seed, teams=tuple(odds))
