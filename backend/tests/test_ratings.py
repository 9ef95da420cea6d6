"""
Tests for weighted ratings and conference seeding.
"""

import math

import pytest
from nba_playoffs.simulator.errors import InvalidStatError, InvalidWeightingError
from nba_playoffs.simulator.models import WeightingConfig
from nba_playoffs.simulator.ratings import compute_weighted_rating, compute_ratings, validate_weighting
from nba_playoffs.simulator.seeding import rank_teams, split_by_conference, build_seed_index


class TestWeightedRating:
    """Tests for compute_weighted_rating."""

    def test_default_weights(self, make_line):
        """Test the rating formula with the default 0.30 / 0.50 / 0.20 weights."""
        line = make_line("Boston", offensive_rating=110.0, defensive_rating=100.0, three_point_pct=0.36)

        rating = compute_weighted_rating(line, WeightingConfig())

        assert rating == pytest.approx(110.0 * 0.30 + (1 / 100.0) * 0.50 + 0.36 * 0.20)

    def test_custom_weights_not_normalized(self, make_line):
        """Test that weights are applied as given, even when they don't sum to 1."""
        line = make_line("Boston", offensive_rating=100.0, defensive_rating=50.0, three_point_pct=0.5)
        weighting = WeightingConfig(offensive_weight=1.0, defensive_weight=2.0, three_point_weight=4.0)

        assert compute_weighted_rating(line, weighting) == pytest.approx(100.0 + 0.04 + 2.0)

    def test_monotonic_in_offensive_rating(self, make_line):
        """Test that a better offense never lowers the rating."""
        weighting = WeightingConfig()
        ratings = [
            compute_weighted_rating(make_line("Team", offensive_rating=off), weighting)
            for off in (100.0, 105.0, 110.0, 115.0)
        ]

        assert ratings == sorted(ratings)

    def test_lower_defensive_rating_is_better(self, make_line):
        """Test that the inverted defensive term rewards a lower defensive rating."""
        weighting = WeightingConfig(offensive_weight=0.0, defensive_weight=1.0, three_point_weight=0.0)

        good_defense = compute_weighted_rating(make_line("A", defensive_rating=100.0), weighting)
        bad_defense = compute_weighted_rating(make_line("B", defensive_rating=120.0), weighting)

        assert good_defense > bad_defense

    def test_zero_defensive_rating_raises(self, make_line):
        """Test that a zero defensive rating is rejected."""
        with pytest.raises(InvalidStatError, match="defensive rating is zero"):
            compute_weighted_rating(make_line("Boston", defensive_rating=0.0), WeightingConfig())

    def test_non_finite_stat_raises(self, make_line):
        """Test that NaN stats are rejected."""
        with pytest.raises(InvalidStatError):
            compute_weighted_rating(make_line("Boston", offensive_rating=math.nan), WeightingConfig())

    def test_negative_weight_raises(self):
        """Test that a negative weight is rejected."""
        with pytest.raises(InvalidWeightingError, match="three_point_weight"):
            validate_weighting(WeightingConfig(three_point_weight=-0.1))

    def test_zero_weights_allowed(self, make_line):
        """Test that all-zero weights give a zero rating rather than an error."""
        weighting = WeightingConfig(0.0, 0.0, 0.0)
        assert compute_weighted_rating(make_line("Boston"), weighting) == 0.0


class TestComputeRatings:
    """Tests for compute_ratings."""

    def test_preserves_input_order(self, league_stats):
        """Test that rated teams come back in input order."""
        rated = compute_ratings(league_stats)

        assert [t.name for t in rated] == [line.name for line in league_stats]
        assert all(t.weighted_rating > 0 for t in rated)

    def test_inputs_not_mutated(self, league_stats):
        """Test that the stat lines are carried through unchanged."""
        rated = compute_ratings(league_stats)

        assert rated[0].stats is league_stats[0]

    def test_missing_conference_raises(self, make_line):
        """Test that a team without a conference is rejected."""
        with pytest.raises(InvalidStatError, match="Conference missing"):
            compute_ratings([make_line("Boston", conference=None)])

    def test_unknown_conference_raises(self, make_line):
        """Test that an unknown conference is rejected."""
        with pytest.raises(InvalidStatError, match="Unknown conference"):
            compute_ratings([make_line("Boston", conference="Central")])

    def test_duplicate_team_raises(self, make_line):
        """Test that two lines for the same team are rejected."""
        with pytest.raises(InvalidStatError, match="Duplicate"):
            compute_ratings([make_line("Boston"), make_line("Boston")])


class TestSeeding:
    """Tests for ranking and conference grouping."""

    def test_rank_by_rating(self, make_team):
        """Test that higher weighted ratings rank first."""
        teams = [make_team("A", 1.0), make_team("B", 3.0), make_team("C", 2.0)]

        assert [t.name for t in rank_teams(teams)] == ["B", "C", "A"]

    def test_tie_broken_by_win_pct(self, make_team):
        """Test that equal ratings are separated by record."""
        teams = [make_team("A", 2.0, wins=40, losses=42), make_team("B", 2.0, wins=50, losses=32)]

        assert [t.name for t in rank_teams(teams)] == ["B", "A"]

    def test_full_tie_broken_by_name(self, make_team):
        """Test that identical teams are ordered by name regardless of input order."""
        teams = [make_team("Zeta", 2.0), make_team("Alpha", 2.0)]

        assert [t.name for t in rank_teams(teams)] == ["Alpha", "Zeta"]
        assert [t.name for t in rank_teams(reversed(teams))] == ["Alpha", "Zeta"]

    def test_split_by_conference(self, league_stats):
        """Test grouping into two ranked conferences."""
        conferences = split_by_conference(compute_ratings(league_stats))

        assert set(conferences) == {"Eastern", "Western"}
        assert len(conferences["Eastern"]) == 15
        assert conferences["Eastern"][0].name == "East 01"
        assert conferences["Western"][-1].name == "West 15"

    def test_split_rejects_unknown_conference(self, make_team):
        """Test that a team outside both conferences is rejected."""
        with pytest.raises(InvalidStatError):
            split_by_conference([make_team("A", 1.0, conference="Central")])

    def test_seed_index_read_only(self, make_team):
        """Test that the seed lookup is 1-based and can't be modified."""
        index = build_seed_index([make_team("A", 2.0), make_team("B", 1.0)])

        assert index == {"A": 1, "B": 2}
        with pytest.raises(TypeError):
            index["C"] = 3
