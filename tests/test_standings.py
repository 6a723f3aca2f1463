"""
Tests for the standings simulator.

All tests are module-level functions with inline test data.
"""

import pytest


def _hitter(player_id, team_id, hr, runs=60, hits=130, ab=500):
    from fantasy_trade.models import Player, PlayerStats

    return Player(
        id=player_id,
        name=f"Hitter {player_id}",
        positions=["OF"],
        fantasy_team_id=team_id,
        ros_projection=PlayerStats(
            pa=ab + 50, ab=ab, hits=hits, hr=hr, runs=runs, rbi=60, sb=5, bb=50
        ),
    )


def _pitcher(player_id, team_id, er, strikeouts=150, ip=150):
    from fantasy_trade.models import Player, PlayerStats

    return Player(
        id=player_id,
        name=f"Pitcher {player_id}",
        positions=["SP"],
        fantasy_team_id=team_id,
        ros_projection=PlayerStats(
            ip=ip, wins=10, qs=15, strikeouts=strikeouts, er=er,
            hits_allowed=140, bb_allowed=45,
        ),
    )


def _league():
    from fantasy_trade.models import FantasyTeam

    return [
        FantasyTeam(id=1, name="Aces", roster=[_hitter(11, 1, hr=30), _pitcher(12, 1, er=50)]),
        FantasyTeam(id=2, name="Bombers", roster=[_hitter(21, 2, hr=45), _pitcher(22, 2, er=80)]),
        FantasyTeam(id=3, name="Cutters", roster=[_hitter(31, 3, hr=20), _pitcher(32, 3, er=65)]),
        FantasyTeam(id=4, name="Dingers", roster=[_hitter(41, 4, hr=20), _pitcher(42, 4, er=65)]),
    ]


# =============================================================================
# CATEGORY TOTALS
# =============================================================================


def test_category_totals_recompute_rates():
    from fantasy_trade.standings import calculate_category_totals

    roster = [_hitter(1, 1, hr=30, hits=150, ab=500), _hitter(2, 1, hr=10, hits=50, ab=250)]

    totals = calculate_category_totals(roster, ["HR", "AVG", "ERA"])

    assert totals["HR"] == 40
    assert totals["AVG"] == pytest.approx(200 / 750)
    assert totals["ERA"] is None


# =============================================================================
# RANKING
# =============================================================================


def test_ranks_are_a_permutation_in_every_category():
    """Ties never collapse ranks: each category ranks 1..n exactly once."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import calculate_standings

    settings = LeagueSettings.default()
    snapshot = calculate_standings(_league(), settings)

    n = len(snapshot.team_standings)
    for cat in settings.all_categories:
        ranks = sorted(ts.category(cat.name).rank for ts in snapshot.team_standings)
        assert ranks == list(range(1, n + 1)), cat.name
    assert sorted(ts.rank for ts in snapshot.team_standings) == list(range(1, n + 1))


def test_ties_keep_input_order():
    """Cutters and Dingers are identical; Cutters was listed first."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import calculate_standings

    snapshot = calculate_standings(_league(), LeagueSettings.default())

    cutters = snapshot.for_team(3)
    dingers = snapshot.for_team(4)
    assert cutters.category("HR").rank < dingers.category("HR").rank
    assert cutters.rank < dingers.rank


def test_inverse_categories_rank_ascending_and_points_are_weighted():
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import calculate_standings

    snapshot = calculate_standings(_league(), LeagueSettings.default())

    aces = snapshot.for_team(1)
    bombers = snapshot.for_team(2)

    # Aces allow the fewest runs, Bombers hit the most homers
    assert aces.category("ERA").rank == 1
    assert aces.category("ERA").points == 4
    assert bombers.category("ERA").rank == 4
    assert bombers.category("HR").rank == 1

    # AVG weight is 0.5 in the default league
    avg = aces.category("AVG")
    assert avg.weighted_points == pytest.approx(avg.points * 0.5)

    assert aces.total_points == pytest.approx(
        round(sum(s.weighted_points for s in aces.standings), 2)
    )


def test_undefined_rate_ranks_worst():
    """A team with no pitchers ranks last in ERA and WHIP, never first."""
    from fantasy_trade.models import FantasyTeam, LeagueSettings
    from fantasy_trade.standings import calculate_standings

    teams = _league() + [FantasyTeam(id=5, name="No Arms", roster=[_hitter(51, 5, hr=25)])]
    snapshot = calculate_standings(teams, LeagueSettings.default())

    no_arms = snapshot.for_team(5)
    assert no_arms.category("ERA").value is None
    assert no_arms.category("ERA").rank == 5
    assert no_arms.category("WHIP").rank == 5


def test_empty_league():
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import calculate_standings

    assert calculate_standings([], LeagueSettings.default()).team_standings == ()


# =============================================================================
# TRADE SIMULATION
# =============================================================================


def test_apply_trade_swaps_players_without_mutating_inputs():
    from fantasy_trade.standings import apply_trade

    teams = _league()
    traded = apply_trade(teams, 1, 2, [11], [21])

    assert teams[0].player_ids() == {11, 12}
    assert traded[0].player_ids() == {12, 21}
    assert traded[1].player_ids() == {22, 11}
    assert traded[2] is teams[2]

    moved = next(p for p in traded[0].roster if p.id == 21)
    assert moved.fantasy_team_id == 1


def test_simulate_trade_standings_before_and_after():
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import simulate_trade_standings

    settings = LeagueSettings.default()
    before, after = simulate_trade_standings(_league(), settings, 1, 2, [11], [21])

    assert before.for_team(1).category("HR").value == 30
    assert after.for_team(1).category("HR").value == 45
    assert after.for_team(1).category("HR").rank == 1


def test_reverse_trade_restores_original_standings():
    """Feeding the after-state back in and reversing the trade round-trips."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import apply_trade, calculate_standings, simulate_trade_standings

    settings = LeagueSettings.default()
    teams = _league()

    before, after = simulate_trade_standings(teams, settings, 1, 3, [11, 12], [32])
    traded = apply_trade(teams, 1, 3, [11, 12], [32])
    assert calculate_standings(traded, settings) == after

    _, restored = simulate_trade_standings(traded, settings, 1, 3, [32], [11, 12])

    assert restored == before


def test_reverse_trade_round_trips_with_fractional_projections():
    """Team totals do not depend on roster order, so exact ties survive the trip."""
    from fantasy_trade.models import FantasyTeam, LeagueSettings, Player, PlayerStats
    from fantasy_trade.standings import apply_trade, simulate_trade_standings

    def hitter(player_id, team_id, hr):
        return Player(
            id=player_id,
            name=f"Hitter {player_id}",
            positions=["OF"],
            fantasy_team_id=team_id,
            ros_projection=PlayerStats(pa=10, ab=10, hits=3, hr=hr),
        )

    settings = LeagueSettings.default()
    teams = [
        FantasyTeam(id=2, name="Bombers", roster=[hitter(21, 2, 0.6)]),
        FantasyTeam(
            id=1,
            name="Aces",
            roster=[hitter(11, 1, 0.1), hitter(12, 1, 0.2), hitter(13, 1, 0.3)],
        ),
        FantasyTeam(id=3, name="Cutters", roster=[hitter(31, 3, 5.0)]),
    ]

    before, _ = simulate_trade_standings(teams, settings, 1, 3, [11], [])
    traded = apply_trade(teams, 1, 3, [11], [])
    _, restored = simulate_trade_standings(traded, settings, 3, 1, [11], [])

    assert before.for_team(1).category("HR").value == 0.6
    assert restored == before


def test_unknown_team_raises():
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import simulate_trade_standings

    with pytest.raises(ValueError, match="Unknown team id"):
        simulate_trade_standings(_league(), LeagueSettings.default(), 1, 99, [11], [])


# =============================================================================
# REPORTING
# =============================================================================


def test_apply_standings_and_frame(capsys):
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.standings import (
        apply_standings,
        calculate_standings,
        print_standings,
        standings_frame,
    )

    teams = _league()
    snapshot = calculate_standings(teams, LeagueSettings.default())

    ranked = apply_standings(teams, snapshot)
    assert ranked[0].rank == snapshot.for_team(1).rank
    assert len(ranked[0].category_standings) == 12
    assert teams[0].rank == 0

    df = standings_frame(snapshot)
    assert list(df["rank"]) == [1, 2, 3, 4]
    assert "HR_rank" in df.columns

    print_standings(snapshot)
    assert "PROJECTED STANDINGS" in capsys.readouterr().out
