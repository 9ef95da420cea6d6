"""
Tests for single game resolution.
"""

import pytest
from nba_playoffs.simulator.errors import InvalidRatingError
from nba_playoffs.simulator.games import (
    HOME_COURT_BONUS,
    LUCK_RANGE,
    draw_luck,
    win_probability,
    simulate_game
)
from nba_playoffs.simulator.rng import FixedRandom, SequenceRandom


class TestWinProbability:
    """Tests for win_probability."""

    def test_neutral_court(self, make_team):
        """Test the plain ratio of ratings on a neutral court."""
        a, b = make_team("A", 1.2), make_team("B", 1.0)

        assert win_probability(a, b) == pytest.approx(1.2 / 2.2)

    def test_home_bonus_for_team_a(self, make_team):
        """Test that the host gets the home court bonus."""
        a, b = make_team("A", 1.2), make_team("B", 1.0)

        expected = (1.2 + HOME_COURT_BONUS) / (2.2 + HOME_COURT_BONUS)
        assert win_probability(a, b, team_a_home=True) == pytest.approx(expected)

    def test_home_bonus_for_team_b(self, make_team):
        """Test that team B gets the bonus when it hosts."""
        a, b = make_team("A", 1.2), make_team("B", 1.0)

        expected = 1.2 / (2.2 + HOME_COURT_BONUS)
        assert win_probability(a, b, team_a_home=False) == pytest.approx(expected)

    def test_equal_teams_neutral_is_even(self, make_team):
        """Test that equal teams on a neutral court are a coin flip."""
        assert win_probability(make_team("A", 1.0), make_team("B", 1.0)) == pytest.approx(0.5)

    def test_luck_applies_to_both_sides(self, make_team):
        """Test that the shared luck term is added to both ratings."""
        a, b = make_team("A", 1.2), make_team("B", 1.0)

        assert win_probability(a, b, luck=0.01) == pytest.approx(1.21 / 2.22)

    def test_non_positive_sum_raises(self, make_team):
        """Test that ratings summing to zero or less are rejected."""
        with pytest.raises(InvalidRatingError):
            win_probability(make_team("A", -1.0), make_team("B", 0.5))


class TestSimulateGame:
    """Tests for simulate_game."""

    def test_low_draw_favours_team_a(self, make_team):
        """Test that a draw below p(A) goes to team A."""
        a, b = make_team("A", 1.2), make_team("B", 1.0)

        assert simulate_game(a, b, FixedRandom(0.4)) is a

    def test_high_draw_favours_team_b(self, make_team):
        """Test that a draw at or above p(A) goes to team B."""
        a, b = make_team("A", 1.2), make_team("B", 1.0)

        assert simulate_game(a, b, FixedRandom(0.9)) is b

    def test_one_draw_without_luck(self, make_team):
        """Test that only the outcome is drawn when luck is off."""
        rng = FixedRandom(0.5)
        simulate_game(make_team("A", 1.0), make_team("B", 1.0), rng)

        assert rng.draws == 1

    def test_luck_drawn_before_outcome(self, make_team):
        """Test that luck uses the first draw and the outcome the second."""
        a, b = make_team("A", 1.0), make_team("B", 1.0)
        # First draw 0.0 -> luck of -LUCK_RANGE; second draw decides the game
        rng = SequenceRandom([0.0, 0.49])

        assert simulate_game(a, b, rng, use_luck_factor=True) is a
        assert rng.draws == 2

    def test_draw_luck_range(self):
        """Test the luck term spans [-LUCK_RANGE, LUCK_RANGE)."""
        assert draw_luck(FixedRandom(0.0)) == pytest.approx(-LUCK_RANGE)
        assert draw_luck(FixedRandom(0.5)) == pytest.approx(0.0)
        assert draw_luck(FixedRandom(0.999999)) < LUCK_RANGE
