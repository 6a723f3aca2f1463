"""
Rate stat derivation.

Rate stats are always computed from their components and never averaged
directly. Every function returns None (not 0) when the denominator is zero:
None means "no sample", which is different from a .000 average.
"""

import math
from collections.abc import Callable, Iterable

from .models import STAT_COMPONENTS, PlayerStats

# === COMPONENT FORMULAS ===


def total_bases(hits: float, doubles: float, triples: float, hr: float) -> float:
    singles = hits - doubles - triples - hr
    return singles + doubles * 2 + triples * 3 + hr * 4


def calc_avg(hits: float, ab: float) -> float | None:
    return hits / ab if ab > 0 else None


def calc_obp(hits: float, bb: float, ab: float) -> float | None:
    denom = ab + bb
    return (hits + bb) / denom if denom > 0 else None


def calc_slg(
    hits: float, doubles: float, triples: float, hr: float, ab: float
) -> float | None:
    if ab <= 0:
        return None
    return total_bases(hits, doubles, triples, hr) / ab


def calc_ops(
    hits: float, doubles: float, triples: float, hr: float, bb: float, ab: float
) -> float | None:
    obp = calc_obp(hits, bb, ab)
    slg = calc_slg(hits, doubles, triples, hr, ab)
    if obp is None or slg is None:
        return None
    return obp + slg


def calc_era(er: float, ip: float) -> float | None:
    return er * 9 / ip if ip > 0 else None


def calc_whip(hits_allowed: float, bb_allowed: float, ip: float) -> float | None:
    return (hits_allowed + bb_allowed) / ip if ip > 0 else None


# === STAT LINE WRAPPERS ===


def compute_avg(stats: PlayerStats) -> float | None:
    return calc_avg(stats.hits, stats.ab)


def compute_obp(stats: PlayerStats) -> float | None:
    return calc_obp(stats.hits, stats.bb, stats.ab)


def compute_slg(stats: PlayerStats) -> float | None:
    return calc_slg(stats.hits, stats.doubles, stats.triples, stats.hr, stats.ab)


def compute_ops(stats: PlayerStats) -> float | None:
    return calc_ops(stats.hits, stats.doubles, stats.triples, stats.hr, stats.bb, stats.ab)


def compute_era(stats: PlayerStats) -> float | None:
    return calc_era(stats.er, stats.ip)


def compute_whip(stats: PlayerStats) -> float | None:
    return calc_whip(stats.hits_allowed, stats.bb_allowed, stats.ip)


def merge_stats(lines: Iterable[PlayerStats | None]) -> PlayerStats:
    """
    Combine stat lines by summing their components.

    Missing lines (None) are skipped. Rates of the merged line are then
    recomputed from the summed components, e.g. team AVG = sum(H) / sum(AB).
    Each component is summed with math.fsum, so the total does not depend
    on the order of the lines.
    """
    present = [line for line in lines if line is not None]
    return PlayerStats(
        **{
            name: math.fsum(getattr(line, name) for line in present)
            for name in STAT_COMPONENTS
        }
    )


# === CATEGORY REGISTRY ===

# Counting categories map to the PlayerStats component they sum
COUNTING_CATEGORIES: dict[str, str] = {
    "R": "runs",
    "HR": "hr",
    "RBI": "rbi",
    "SB": "sb",
    "H": "hits",
    "BB": "bb",
    "W": "wins",
    "L": "losses",
    "QS": "qs",
    "SV": "saves",
    "HLD": "holds",
    "K": "strikeouts",
}

RATE_CATEGORIES: dict[str, Callable[[PlayerStats], float | None]] = {
    "AVG": compute_avg,
    "OBP": compute_obp,
    "SLG": compute_slg,
    "OPS": compute_ops,
    "ERA": compute_era,
    "WHIP": compute_whip,
}


def is_rate_category(category: str) -> bool:
    return category in RATE_CATEGORIES


def counting_stat(stats: PlayerStats, category: str) -> float:
    """Raw projected value for a counting category (0 for unknown names)."""
    attr = COUNTING_CATEGORIES.get(category)
    return getattr(stats, attr) if attr is not None else 0.0


def rate_stat(stats: PlayerStats, category: str) -> float | None:
    """Rate value for a rate category, recomputed from components."""
    compute = RATE_CATEGORIES.get(category)
    return compute(stats) if compute is not None else None


def category_value(stats: PlayerStats, category: str) -> float | None:
    if is_rate_category(category):
        return rate_stat(stats, category)
    return counting_stat(stats, category)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)
