"""
Tests for keeper inflation and multi-year keeper projection.

All tests are module-level functions with inline test data.
"""

import pytest


def _keeper(player_id, value, salary, team=1, is_keeper=False, years=1, status=""):
    from fantasy_trade.models import Contract, Player

    return Player(
        id=player_id,
        name=f"Keeper {player_id}",
        positions=["OF"],
        fantasy_team_id=team,
        auction_value=value,
        contract=Contract(
            salary=salary,
            years_remaining=years,
            contract_status=status,
            is_keeper=is_keeper,
        ),
    )


# =============================================================================
# LEAGUE INFLATION
# =============================================================================


def test_inflation_from_underpriced_keepers():
    """rate = (budget - keeper salary) / (budget - keeper value)"""
    from fantasy_trade.inflation import calculate_inflation
    from fantasy_trade.models import LeagueSettings

    settings = LeagueSettings.default()
    players = [
        _keeper(1, value=40, salary=10),  # implicit: value > salary
        _keeper(2, value=5, salary=15, is_keeper=True),  # explicit flag
        _keeper(3, value=5, salary=15),  # overpriced, not kept
        _keeper(4, value=30, salary=5, team=None),  # free agent
        _keeper(5, value=30, salary=0),  # no salary
    ]

    result = calculate_inflation(players, settings, num_teams=2)

    # budget 520; keeper salary 25; keeper value 45
    assert result.num_keepers == 2
    assert result.total_keeper_salary == 25.0
    assert result.total_keeper_value == 45.0
    assert result.remaining_budget == 495.0
    assert result.remaining_value == 475.0
    assert result.inflation_rate == pytest.approx(495 / 475)
    assert result.inflation_percentage == pytest.approx(4.2)
    assert result.avg_keeper_discount == 10.0


def test_inflation_defaults_to_one_when_value_exhausted():
    from fantasy_trade.inflation import calculate_inflation
    from fantasy_trade.models import LeagueSettings

    settings = LeagueSettings.from_dict({"total_budget": 50})
    players = [_keeper(1, value=60, salary=10, is_keeper=True)]

    result = calculate_inflation(players, settings, num_teams=1)

    assert result.inflation_rate == 1.0
    assert result.inflation_percentage == 0.0


def test_no_keepers_means_no_inflation():
    from fantasy_trade.inflation import calculate_inflation
    from fantasy_trade.models import LeagueSettings

    result = calculate_inflation([], LeagueSettings.default(), num_teams=12)

    assert result.inflation_rate == 1.0
    assert result.num_keepers == 0
    assert result.avg_keeper_discount == 0.0


def test_non_positive_team_count_raises():
    from fantasy_trade.inflation import calculate_inflation
    from fantasy_trade.models import LeagueSettings

    players = [_keeper(1, value=30, salary=5, is_keeper=True)]

    with pytest.raises(ValueError, match="num_teams"):
        calculate_inflation(players, LeagueSettings.default(), num_teams=0)
    with pytest.raises(ValueError, match="num_teams"):
        calculate_inflation(players, LeagueSettings.default(), num_teams=-2)


def test_apply_inflation_identity_at_rate_one():
    from fantasy_trade.inflation import apply_inflation

    for value in [1.0, 12.3, 45.6, 0.0]:
        assert apply_inflation(value, 1.0) == value
    assert apply_inflation(20.0, 1.1) == 22.0


# =============================================================================
# KEEPER PROJECTION
# =============================================================================


def test_can_extend():
    from fantasy_trade.inflation import can_extend
    from fantasy_trade.models import Contract

    assert can_extend(Contract(salary=5, contract_status="1st"))
    assert can_extend(Contract(salary=5, contract_status="2nd"))
    assert can_extend(Contract(salary=5, contract_status=""))
    assert can_extend(None)
    assert not can_extend(Contract(salary=5, contract_status="3rd"))
    assert not can_extend(Contract(salary=5, contract_status="2026"))


def test_projection_decays_value_and_adds_extension_cost():
    """Value * 0.95^year; +$5 per year past the contract term."""
    from fantasy_trade.inflation import project_keeper_value
    from fantasy_trade.models import LeagueSettings

    settings = LeagueSettings.default()
    player = _keeper(1, value=40, salary=10, years=1, status="1st")

    projection = project_keeper_value(player, settings, years_forward=3)

    assert [y.year for y in projection] == [1, 2, 3]
    assert [y.projected_value for y in projection] == [38.0, 36.1, 34.3]
    assert [y.projected_salary for y in projection] == [10, 15, 20]
    assert [y.surplus_value for y in projection] == [28.0, 21.1, 14.3]
    assert all(y.keep_recommendation for y in projection)


def test_guaranteed_contract_projection_stops_at_contract_end():
    """A guaranteed-year deal has no extension path."""
    from fantasy_trade.inflation import project_keeper_value
    from fantasy_trade.models import LeagueSettings

    settings = LeagueSettings.default()
    player = _keeper(1, value=30, salary=25, years=2, status="2027")

    projection = project_keeper_value(player, settings, years_forward=5)

    assert [y.year for y in projection] == [1, 2]
    assert all(y.projected_salary == 25 for y in projection)


def test_expiring_contract_projection_stops_at_contract_end():
    from fantasy_trade.inflation import project_keeper_value
    from fantasy_trade.models import LeagueSettings

    player = _keeper(1, value=30, salary=25, years=1, status="3rd")

    projection = project_keeper_value(player, LeagueSettings.default())

    assert len(projection) == 1
    assert projection[0].keep_recommendation  # 28.5 - 25 > 0


def test_analyze_keepers_sorted_by_inflated_surplus():
    from fantasy_trade.inflation import analyze_keepers
    from fantasy_trade.models import LeagueSettings, Player

    settings = LeagueSettings.default()
    roster = [
        _keeper(1, value=20, salary=15),
        _keeper(2, value=40, salary=10, is_keeper=True),
        _keeper(3, value=10, salary=30),
        Player(id=4, name="Unvalued", positions=["SS"]),
    ]

    candidates = analyze_keepers(roster, settings, inflation_rate=1.1)

    assert [c.player_id for c in candidates] == [2, 1, 3]
    assert candidates[0].inflated_value == 44.0
    assert candidates[0].inflated_surplus == 34.0
    assert candidates[0].surplus_value == 30.0
    assert candidates[0].keep_recommendation
    assert not candidates[2].keep_recommendation
    assert len(candidates[0].multi_year_projection) == 3
