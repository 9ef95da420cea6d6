"""
Tests for Monte Carlo championship odds.
"""

import logging
from datetime import datetime, timezone
from concurrent.futures import ProcessPoolExecutor
from unittest.mock import patch

import pytest
from nba_playoffs.simulator import trials
from nba_playoffs.simulator.ratings import compute_ratings
from nba_playoffs.simulator.trials import estimate_championship_odds


SIM_DATE = datetime(2026, 4, 12, tzinfo=timezone.utc)


@pytest.fixture
def rated(league_stats):
    return compute_ratings(league_stats)


def estimate(rated, n_trials=40, seed=7, **kwargs):
    kwargs.setdefault("max_workers", 1)
    return estimate_championship_odds(
        rated, n_trials, season="2025-2026", date=SIM_DATE, seed=seed, **kwargs
    )


class TestEstimateChampionshipOdds:
    """Tests for estimate_championship_odds."""

    def test_shares_add_up(self, rated):
        """Test that each milestone is shared by the right number of teams."""
        odds = estimate(rated)

        def total(attr):
            return sum(getattr(t, attr) for t in odds.teams)

        assert total("playoff_pct") == pytest.approx(16)
        assert total("second_round_pct") == pytest.approx(8)
        assert total("conference_finals_pct") == pytest.approx(4)
        assert total("finals_pct") == pytest.approx(2)
        assert total("championship_pct") == pytest.approx(1)

    def test_milestones_never_increase(self, rated):
        """Test that no team goes further more often than it gets there."""
        odds = estimate(rated)

        for team in odds.teams:
            assert team.playoff_pct >= team.second_round_pct >= team.conference_finals_pct
            assert team.conference_finals_pct >= team.finals_pct >= team.championship_pct

    def test_top_six_always_qualify(self, rated):
        """Test that the six best teams per conference always make the playoffs."""
        odds = estimate(rated)

        for prefix in ("East", "West"):
            for i in range(1, 7):
                assert odds.for_team(f"{prefix} {i:02d}").playoff_pct == 1.0
            assert odds.for_team(f"{prefix} 11").playoff_pct == 0.0

    def test_ordered_by_championship_share(self, rated):
        """Test that teams are listed by championship share."""
        odds = estimate(rated)

        shares = [t.championship_pct for t in odds.teams]
        assert shares == sorted(shares, reverse=True)
        assert len(odds.teams) == 30

    def test_same_seed_same_odds(self, rated):
        """Test that a master seed fully determines the odds."""
        assert estimate(rated, seed=99).to_dict() == estimate(rated, seed=99).to_dict()

    def test_worker_count_does_not_change_odds(self, rated):
        """Test that a process pool gives the same totals as running inline."""
        inline = estimate(rated, n_trials=120, seed=3, max_workers=1)
        pooled = estimate(rated, n_trials=120, seed=3, max_workers=2)

        assert inline.to_dict() == pooled.to_dict()

    def test_progress_reaches_100(self, rated):
        """Test that progress is reported up to completion."""
        updates = []

        estimate(rated, n_trials=120, progress_callback=updates.append)

        assert updates
        assert updates == sorted(updates)
        assert updates[-1] == pytest.approx(100)

    def test_zero_trials_raises(self, rated):
        """Test that at least one trial is required."""
        with pytest.raises(ValueError, match="n_trials"):
            estimate(rated, n_trials=0)

    def test_single_info_record_per_estimate(self, rated, caplog):
        """Test that individual trials log below INFO and the batch logs one summary."""
        with caplog.at_level(logging.INFO):
            estimate(rated, n_trials=200)

        info = [r for r in caplog.records if r.levelno >= logging.INFO]
        assert len(info) == 1
        assert "200 playoff simulations" in info[0].getMessage()

    def test_pool_uses_spawned_workers(self, rated):
        """Test that worker processes are spawned rather than forked."""
        with patch.object(trials, "ProcessPoolExecutor", wraps=ProcessPoolExecutor) as pool:
            estimate(rated, n_trials=120, max_workers=2)

        context = pool.call_args.kwargs["mp_context"]
        assert context.get_start_method() == "spawn"
