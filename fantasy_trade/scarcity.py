"""
Positional scarcity.

Groups valued players by primary position, summarizes each position's value
distribution and compares it with the league-wide average:

    scarcity_multiplier = league_avg_value / position_avg_value
      > 1.2 -> scarce (few valuable players at the position)
      < 0.8 -> deep
      else  -> normal
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from .config import DEEP_THRESHOLD, MIN_AUCTION_VALUE, SCARCE_THRESHOLD
from .models import Player, primary_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionalScarcity:
    position: str
    avg_value: float
    median_value: float
    top_player_value: float
    replacement_value: float
    scarcity_multiplier: float
    player_count: int
    tier: str  # "scarce" | "normal" | "deep"


def scarcity_tier(multiplier: float) -> str:
    if multiplier > SCARCE_THRESHOLD:
        return "scarce"
    if multiplier < DEEP_THRESHOLD:
        return "deep"
    return "normal"


def calculate_positional_scarcity(players: Iterable[Player]) -> list[PositionalScarcity]:
    """
    Compute the scarcity table for all players valued above the $1 floor.

    Positions with no valued players are omitted rather than reported as
    zero rows.

    Returns:
        List of PositionalScarcity sorted by scarcity_multiplier descending
        (scarcest first).
    """
    valued = pd.DataFrame(
        [
            {"position": primary_position(p), "value": p.auction_value}
            for p in players
            if p.auction_value is not None and p.auction_value > MIN_AUCTION_VALUE
        ],
        columns=["position", "value"],
    )
    if valued.empty:
        return []

    league_avg = valued["value"].mean()

    summary = valued.groupby("position", sort=False)["value"].agg(
        ["mean", "median", "max", "min", "count"]
    )

    results = []
    for position, row in summary.iterrows():
        multiplier = league_avg / row["mean"] if row["mean"] > 0 else 1.0
        results.append(
            PositionalScarcity(
                position=position,
                avg_value=round(float(row["mean"]), 1),
                median_value=round(float(row["median"]), 1),
                top_player_value=round(float(row["max"]), 1),
                replacement_value=round(float(row["min"]), 1),
                scarcity_multiplier=round(float(multiplier), 2),
                player_count=int(row["count"]),
                tier=scarcity_tier(multiplier),
            )
        )

    results.sort(key=lambda s: s.scarcity_multiplier, reverse=True)

    scarce = [s.position for s in results if s.tier == "scarce"]
    logger.info(
        "Scarcity across %d positions (league avg $%.1f); scarce: %s",
        len(results),
        league_avg,
        ", ".join(scarce) or "none",
    )

    return results
