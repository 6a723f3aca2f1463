"""
Tests for the SGP calculator.

All tests are module-level functions with inline test data.
"""

import pytest

# =============================================================================
# PER-CATEGORY FORMULAS
# =============================================================================


def test_counting_stat_sgp():
    """value / multiplier * weight"""
    from fantasy_trade.sgp import counting_stat_sgp

    assert counting_stat_sgp(36, 9.0, 1.0) == pytest.approx(4.0)
    assert counting_stat_sgp(36, 9.0, 0.5) == pytest.approx(2.0)
    assert counting_stat_sgp(36, 0.0, 1.0) == 0.0


def test_rate_stat_sgp_is_diluted_by_playing_time():
    """A part-timer's rate stat is worth a fraction of a regular's."""
    from fantasy_trade.sgp import rate_stat_sgp

    full = rate_stat_sgp(0.300, 0.260, 0.0017, 1.0, 620, 6200)
    part = rate_stat_sgp(0.300, 0.260, 0.0017, 1.0, 155, 6200)

    assert full == pytest.approx(0.04 / 0.0017 * 0.1)
    assert part == pytest.approx(full / 4)


def test_inverse_rate_stat_flips_subtraction():
    """Lower ERA than baseline is positive; higher is negative."""
    from fantasy_trade.sgp import inverse_rate_stat_sgp

    good = inverse_rate_stat_sgp(3.50, 4.50, 0.08, 1.0, 180, 1200)
    bad = inverse_rate_stat_sgp(5.50, 4.50, 0.08, 1.0, 180, 1200)

    assert good == pytest.approx(1.0 / 0.08 * 0.15)
    assert bad == pytest.approx(-good)


# =============================================================================
# FULL STAT LINES
# =============================================================================


def _hitter(hr=20, runs=70, rbi=70, sb=5, hits=156, ab=600, pa=650, bb=45):
    from fantasy_trade.models import PlayerStats

    return PlayerStats(
        pa=pa, ab=ab, hits=hits, doubles=30, triples=2, hr=hr,
        runs=runs, rbi=rbi, sb=sb, bb=bb,
    )


def _pitcher(er=70, ip=180, hits_allowed=160, bb_allowed=50):
    from fantasy_trade.models import PlayerStats

    return PlayerStats(
        ip=ip, wins=12, qs=18, strikeouts=190, er=er,
        hits_allowed=hits_allowed, bb_allowed=bb_allowed,
    )


def test_star_hitter_beats_average_hitter():
    """40 HR / 100 R / 100 RBI / 20 SB / .300 beats 20 / 70 / 70 / 5 / .260."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.sgp import calculate_sgp_value

    settings = LeagueSettings.default()
    star = _hitter(hr=40, runs=100, rbi=100, sb=20, hits=180)
    average = _hitter(hr=20, runs=70, rbi=70, sb=5, hits=156)

    star_sgp = calculate_sgp_value(star, False, settings).total_sgp
    average_sgp = calculate_sgp_value(average, False, settings).total_sgp

    assert star_sgp > average_sgp


def test_more_home_runs_never_decrease_sgp():
    """Monotonic in HR with everything else equal."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.sgp import calculate_sgp_value

    settings = LeagueSettings.default()
    totals = [
        calculate_sgp_value(_hitter(hr=hr), False, settings).total_sgp
        for hr in range(0, 45, 5)
    ]

    assert totals == sorted(totals)


def test_higher_era_never_increases_sgp():
    """Monotonic (decreasing) in earned runs with everything else equal."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.sgp import calculate_sgp_value

    settings = LeagueSettings.default()
    totals = [
        calculate_sgp_value(_pitcher(er=er), True, settings).total_sgp
        for er in range(40, 120, 10)
    ]

    assert totals == sorted(totals, reverse=True)


def test_hitters_and_pitchers_do_not_cross_contaminate():
    """Hitters only score hitting categories, pitchers only pitching ones."""
    from fantasy_trade.models import LeagueSettings
    from fantasy_trade.sgp import calculate_sgp_value

    settings = LeagueSettings.default()

    hitter = calculate_sgp_value(_hitter(), False, settings)
    pitcher = calculate_sgp_value(_pitcher(), True, settings)

    assert set(hitter.category_breakdown) == set(settings.hitting_category_names)
    assert set(pitcher.category_breakdown) == set(settings.pitching_category_names)
    assert hitter.total_sgp == pytest.approx(sum(hitter.category_breakdown.values()))


def test_zero_innings_rate_categories_contribute_zero():
    """No IP means ERA/WHIP contribute 0, not an error."""
    from fantasy_trade.models import LeagueSettings, PlayerStats
    from fantasy_trade.sgp import calculate_sgp_value

    settings = LeagueSettings.default()
    result = calculate_sgp_value(PlayerStats(saves=5), True, settings)

    assert result.category_breakdown["ERA"] == 0.0
    assert result.category_breakdown["WHIP"] == 0.0
    assert result.category_breakdown["SV"] == pytest.approx(5 / 4.4)


def test_league_multiplier_override():
    """A league override replaces the shared multiplier."""
    from fantasy_trade.models import LeagueSettings, PlayerStats
    from fantasy_trade.sgp import calculate_sgp_value

    settings = LeagueSettings.from_dict({"sgp_multipliers": {"HR": 10.0}})
    result = calculate_sgp_value(PlayerStats(hr=30), False, settings)

    assert result.category_breakdown["HR"] == pytest.approx(3.0)
