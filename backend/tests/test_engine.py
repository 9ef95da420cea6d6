"""
Tests for the bracket simulation engine.
"""

import logging
from datetime import datetime, timezone

import pytest
from nba_playoffs.simulator.engine import (
    pair_round,
    finals_order,
    simulate_conference,
    run_playoffs,
    run_simulation
)
from nba_playoffs.simulator.errors import (
    InvalidStatError,
    InvalidWeightingError,
    InsufficientTeamsError,
    PairingError
)
from nba_playoffs.simulator.models import WeightingConfig
from nba_playoffs.simulator.ratings import compute_ratings
from nba_playoffs.simulator.rng import FixedRandom, make_rng


SIM_DATE = datetime(2026, 4, 12, tzinfo=timezone.utc)


def simulate(stats, seed=42, **kwargs):
    return run_simulation(stats, season="2025-2026", date=SIM_DATE, rng=make_rng(seed), **kwargs)


class TestPairRound:
    """Tests for pair_round."""

    def test_first_round_pairs(self, make_team):
        """Test 1v8, 2v7, 3v6, 4v5."""
        seeded = [(i, make_team(f"T{i}", 1.0)) for i in range(1, 9)]

        pairs = pair_round(seeded)

        assert [(h[0], l[0]) for h, l in pairs] == [(1, 8), (2, 7), (3, 6), (4, 5)]

    def test_reseeds_survivors(self, make_team):
        """Test that survivors are re-paired highest vs lowest."""
        seeded = [(5, make_team("T5", 1.0)), (1, make_team("T1", 1.0)),
                  (7, make_team("T7", 1.0)), (3, make_team("T3", 1.0))]

        pairs = pair_round(seeded)

        assert [(h[0], l[0]) for h, l in pairs] == [(1, 7), (3, 5)]

    def test_odd_count_raises(self, make_team):
        """Test that an odd field can't be paired."""
        with pytest.raises(PairingError):
            pair_round([(i, make_team(f"T{i}", 1.0)) for i in range(1, 4)])


class TestFinalsOrder:
    """Tests for finals_order."""

    def test_better_record_hosts(self, make_team):
        """Test that the better record gets home court."""
        east = make_team("East", 2.0, wins=50, losses=32)
        west = make_team("West", 1.0, wins=60, losses=22)

        assert finals_order([east, west]) == (west, east)

    def test_record_tie_goes_to_rating(self, make_team):
        """Test that equal records fall back to the weighted rating."""
        east = make_team("East", 1.0, wins=55, losses=27)
        west = make_team("West", 2.0, wins=55, losses=27)

        assert finals_order([east, west]) == (west, east)

    def test_full_tie_keeps_order(self, make_team):
        """Test that a full tie keeps the first conference listed."""
        east, west = make_team("East", 1.0), make_team("West", 1.0)

        assert finals_order([east, west]) == (east, west)


class TestSimulateConference:
    """Tests for simulate_conference."""

    def test_three_rounds_one_champion(self, make_team):
        """Test round sizes and that the champion won the last round."""
        seeds = [make_team(f"T{i}", 2.0 - i * 0.1) for i in range(1, 9)]

        result = simulate_conference("Eastern", seeds, make_rng(3))

        assert [len(r.series) for r in result.rounds] == [4, 2, 1]
        assert result.champion == result.rounds[-1].series[0].winner

    def test_favourites_advance_with_low_draws(self, make_team):
        """Test that the top seed wins out when every draw favours team 1."""
        seeds = [make_team(f"T{i}", 2.0 - i * 0.1) for i in range(1, 9)]

        result = simulate_conference("Eastern", seeds, FixedRandom(0.1))

        assert result.champion.name == "T1"
        assert [s.team2.name for s in result.rounds[1].series] == ["T4", "T3"]

    def test_seven_seeds_raises(self, make_team):
        """Test that the bracket needs exactly eight teams."""
        seeds = [make_team(f"T{i}", 1.0) for i in range(1, 8)]

        with pytest.raises(InsufficientTeamsError) as exc_info:
            simulate_conference("Eastern", seeds, make_rng(1))

        assert exc_info.value.stage == "round 1"


class TestRunSimulation:
    """Tests for a full playoff run."""

    def test_bracket_shape(self, league_stats):
        """Test eight seeds per conference, three rounds and one champion."""
        result = simulate(league_stats)

        assert [c.name for c in result.conferences] == ["Eastern", "Western"]
        for conf in result.conferences:
            assert len(conf.play_in.seeds) == 8
            assert len(conf.play_in.games) == 3
            assert [len(r.series) for r in conf.rounds] == [4, 2, 1]
            assert all(team.conference == conf.name for team in conf.play_in.seeds)

        finalists = {result.finals.team1.name, result.finals.team2.name}
        assert finalists == {c.champion.name for c in result.conferences}
        assert result.champion == result.finals.winner

    def test_series_are_valid(self, league_stats):
        """Test that every series has a clear winner in 4-7 games."""
        result = simulate(league_stats, use_luck_factor=True)

        series = [s for c in result.conferences for r in c.rounds for s in r.series]
        series.append(result.finals)
        for s in series:
            assert 4 <= len(s.games) <= 7
            assert max(s.team1_wins, s.team2_wins) == 4

    def test_same_seed_same_result(self, league_stats):
        """Test that a seed fully determines the result tree."""
        first = simulate(league_stats, seed=2026, use_luck_factor=True)
        second = simulate(league_stats, seed=2026, use_luck_factor=True)

        assert first.to_dict() == second.to_dict()

    def test_records_inputs(self, league_stats):
        """Test that season, date and weighting are carried onto the result."""
        weighting = WeightingConfig(offensive_weight=0.5, defensive_weight=0.3, three_point_weight=0.2)

        result = simulate(league_stats, weighting=weighting)

        assert result.season == "2025-2026"
        assert result.date == SIM_DATE
        assert result.weighting == weighting

    def test_ninth_place_teams_miss_out(self, league_stats):
        """Test that teams ranked 11th and below never reach the bracket."""
        result = simulate(league_stats)

        for conf in result.conferences:
            names = {t.name for t in conf.play_in.seeds}
            assert not names & {f"{conf.name[:4]} {i:02d}" for i in range(11, 16)}

    def test_zero_defensive_rating_fails_in_ratings(self, league_stats, make_line):
        """Test that a bad stat line aborts during rating computation."""
        stats = league_stats[:-1] + [make_line("West 15", "Western", defensive_rating=0.0)]

        with pytest.raises(InvalidStatError) as exc_info:
            simulate(stats)

        assert exc_info.value.stage == "rating computation"
        assert "rating computation" in str(exc_info.value)

    def test_negative_weight_fails_in_ratings(self, league_stats):
        """Test that a negative weight aborts before any game."""
        with pytest.raises(InvalidWeightingError) as exc_info:
            simulate(league_stats, weighting=WeightingConfig(offensive_weight=-1.0))

        assert exc_info.value.stage == "rating computation"

    def test_nine_team_conference_fails_in_play_in(self, league_stats):
        """Test that a conference of nine aborts at the play-in."""
        east = [line for line in league_stats if line.conference == "Eastern"][:9]
        west = [line for line in league_stats if line.conference == "Western"]

        with pytest.raises(InsufficientTeamsError) as exc_info:
            simulate(east + west)

        assert exc_info.value.stage == "play-in"
        assert exc_info.value.to_dict()["kind"] == "InsufficientTeams"

    def test_run_playoffs_does_not_mutate(self, league_stats):
        """Test that rated teams are untouched by a run."""
        rated = compute_ratings(league_stats)
        before = list(rated)

        run_playoffs(rated, season="2025-2026", date=SIM_DATE, rng=make_rng(5))

        assert rated == before

    def test_logs_champion_once(self, league_stats, caplog):
        """Test that a full run logs its champion at INFO and nothing else."""
        with caplog.at_level(logging.INFO):
            result = simulate(league_stats)

        info = [r for r in caplog.records if r.levelno >= logging.INFO]
        assert len(info) == 1
        assert result.champion.name in info[0].getMessage()
