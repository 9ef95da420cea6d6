"""
Tests for play-in tournament resolution.
"""

import pytest
from nba_playoffs.simulator.errors import InsufficientTeamsError
from nba_playoffs.simulator.play_in import resolve_play_in
from nba_playoffs.simulator.rng import FixedRandom


@pytest.fixture
def ranked(make_team):
    """Ten teams ranked best-first, named by seed."""
    return [make_team(f"Seed {i}", 2.0 - i * 0.05) for i in range(1, 11)]


def higher_seed_wins(team_a, team_b, rng, team_a_home=None, use_luck_factor=False):
    return team_a


def lower_seed_wins(team_a, team_b, rng, team_a_home=None, use_luck_factor=False):
    return team_b


class TestResolvePlayIn:
    """Tests for resolve_play_in."""

    def test_favourites_hold(self, ranked):
        """Test seeds when every higher seed wins."""
        result = resolve_play_in(ranked, FixedRandom(0.5), game_fn=higher_seed_wins)

        assert [t.name for t in result.seeds] == [f"Seed {i}" for i in range(1, 9)]
        assert [t.name for t in result.eliminated] == ["Seed 10", "Seed 9"]

    def test_underdogs_win_everything(self, ranked):
        """Test seeds when every lower seed wins."""
        result = resolve_play_in(ranked, FixedRandom(0.5), game_fn=lower_seed_wins)

        assert result.seventh_seed.name == "Seed 8"
        # 7v8 loser (Seed 7) hosts the 9v10 winner (Seed 10) and loses
        assert result.eighth_seed.name == "Seed 10"
        assert [t.name for t in result.eliminated] == ["Seed 9", "Seed 7"]

    def test_mixed_results(self, ranked):
        """Test 7 beating 8, 10 upsetting 9, then 8 beating 10 in the final."""
        winners = iter(["Seed 7", "Seed 10", "Seed 8"])

        def scripted(team_a, team_b, rng, team_a_home=None, use_luck_factor=False):
            name = next(winners)
            return team_a if team_a.name == name else team_b

        result = resolve_play_in(ranked, FixedRandom(0.5), game_fn=scripted)

        assert result.seventh_seed.name == "Seed 7"
        assert result.eighth_seed.name == "Seed 8"
        assert [t.name for t in result.eliminated] == ["Seed 9", "Seed 10"]
        assert [(g.team1.name, g.team2.name) for g in result.games][2] == ("Seed 8", "Seed 10")

    def test_seeds_one_to_six_untouched(self, ranked):
        """Test that the top six qualify directly, in order."""
        result = resolve_play_in(ranked, FixedRandom(0.5), game_fn=lower_seed_wins)

        assert result.seeds[:6] == tuple(ranked[:6])
        assert len(result.seeds) == 8

    def test_game_order_and_pairings(self, ranked):
        """Test the three games, their pairings and hosts."""
        result = resolve_play_in(ranked, FixedRandom(0.5), game_fn=higher_seed_wins)

        labels = [(g.label, g.team1.name, g.team2.name) for g in result.games]
        assert labels == [
            ("7v8", "Seed 7", "Seed 8"),
            ("9v10", "Seed 9", "Seed 10"),
            ("final", "Seed 8", "Seed 9"),
        ]
        assert all(g.home_team for g in result.games)

    def test_neutral_without_home_court(self, ranked):
        """Test that no play-in game has a host when home court is off."""
        hosts = []

        def recording_game(team_a, team_b, rng, team_a_home=None, use_luck_factor=False):
            hosts.append(team_a_home)
            return team_a

        result = resolve_play_in(
            ranked, FixedRandom(0.5), use_home_court_advantage=False, game_fn=recording_game
        )

        assert hosts == [None, None, None]
        assert not any(g.home_team for g in result.games)

    def test_uses_real_games_by_default(self, ranked):
        """Test resolution with the default game resolver and a fixed draw."""
        rng = FixedRandom(0.1)
        result = resolve_play_in(ranked, rng)

        # A draw of 0.1 always goes to the first-named (higher) seed
        assert result.seventh_seed.name == "Seed 7"
        assert result.eighth_seed.name == "Seed 8"
        assert rng.draws == 3

    def test_nine_teams_raises(self, ranked):
        """Test that a conference of nine can't hold a play-in."""
        with pytest.raises(InsufficientTeamsError, match="found 9"):
            resolve_play_in(ranked[:9], FixedRandom(0.5))

    def test_extra_teams_ignored(self, ranked, make_team):
        """Test that teams ranked 11th and below play no part."""
        field = ranked + [make_team("Seed 11", 0.1)]
        result = resolve_play_in(field, FixedRandom(0.5), game_fn=higher_seed_wins)

        names = {t.name for t in result.seeds} | {t.name for t in result.eliminated}
        assert "Seed 11" not in names
