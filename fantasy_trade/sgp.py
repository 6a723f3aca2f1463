"""
SGP (Standings Gain Points) calculator.

SGP measures how many standings points a player's projected stats are worth
in a rotisserie league. Counting stats are divided by an SGP multiplier (the
amount of a stat needed to gain one standings point). Rate stats are compared
against a league-average baseline and divided by the multiplier.

Rate stat SGP is diluted by the player's share of team playing time. The
multipliers for AVG/ERA/... are team-level spreads, and one hitter only moves
the team's composite average in proportion to that hitter's share of team plate
appearances. Without the dilution a part-time player's rate stats would be
worth as much as a full-timer's.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .config import DEFAULT_SGP_MULTIPLIERS, RATE_STAT_BASELINES, layered_get
from .models import LeagueSettings, PlayerStats
from .stats import counting_stat, is_rate_category, rate_stat


@dataclass(frozen=True)
class SgpResult:
    total_sgp: float
    category_breakdown: Mapping[str, float] = field(hash=False)


# === LOOKUPS ===


def get_multiplier(settings: LeagueSettings, category: str) -> float:
    """League multiplier -> shared default -> 1."""
    return layered_get(
        category, settings.sgp_multipliers, DEFAULT_SGP_MULTIPLIERS, default=1.0
    )


def get_baseline(settings: LeagueSettings, category: str) -> float:
    """League baseline -> shared default -> 0."""
    return layered_get(
        category, settings.rate_baselines, RATE_STAT_BASELINES, default=0.0
    )


# === PER-CATEGORY SGP ===


def counting_stat_sgp(projected_value: float, multiplier: float, weight: float) -> float:
    """projected_value / multiplier * weight"""
    if multiplier == 0:
        return 0.0
    return projected_value / multiplier * weight


def rate_stat_sgp(
    projected_rate: float,
    baseline: float,
    multiplier: float,
    weight: float,
    playing_time: float,
    team_playing_time: float,
) -> float:
    """(projected_rate - baseline) / multiplier * weight * dilution"""
    if multiplier == 0 or team_playing_time <= 0:
        return 0.0
    dilution = playing_time / team_playing_time
    return (projected_rate - baseline) / multiplier * weight * dilution


def inverse_rate_stat_sgp(
    projected_rate: float,
    baseline: float,
    multiplier: float,
    weight: float,
    playing_time: float,
    team_playing_time: float,
) -> float:
    """(baseline - projected_rate) / multiplier * weight * dilution (lower is better)"""
    if multiplier == 0 or team_playing_time <= 0:
        return 0.0
    dilution = playing_time / team_playing_time
    return (baseline - projected_rate) / multiplier * weight * dilution


# === PUBLIC API ===


def calculate_sgp_value(
    stats: PlayerStats,
    is_pitcher: bool,
    settings: LeagueSettings,
) -> SgpResult:
    """
    Compute total SGP and the per-category breakdown for one stat line.

    Args:
        stats: Projected (typically rest-of-season) stats
        is_pitcher: Evaluate pitching categories (True) or hitting (False).
            A player only ever accumulates one side.
        settings: Supplies categories, weights, multipliers and baselines

    Returns:
        SgpResult with total_sgp and category_breakdown. Rate categories
        whose denominator is zero (no AB / no IP) contribute 0.
    """
    if is_pitcher:
        categories = settings.pitching_categories
        playing_time = stats.ip
        team_playing_time = settings.team_innings
    else:
        categories = settings.hitting_categories
        playing_time = stats.pa
        team_playing_time = settings.team_plate_appearances

    breakdown = {}
    total = 0.0

    for cat in categories:
        multiplier = get_multiplier(settings, cat.name)

        if not is_rate_category(cat.name):
            sgp = counting_stat_sgp(counting_stat(stats, cat.name), multiplier, cat.weight)
        else:
            projected_rate = rate_stat(stats, cat.name)
            if projected_rate is None:
                breakdown[cat.name] = 0.0
                continue

            baseline = get_baseline(settings, cat.name)
            sgp_fn = inverse_rate_stat_sgp if cat.inverse else rate_stat_sgp
            sgp = sgp_fn(
                projected_rate,
                baseline,
                multiplier,
                cat.weight,
                playing_time,
                team_playing_time,
            )

        breakdown[cat.name] = sgp
        total += sgp

    return SgpResult(total_sgp=total, category_breakdown=MappingProxyType(breakdown))
