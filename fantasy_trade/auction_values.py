"""
Auction value calculator.

Converts a player pool's SGP into dollar values:
  1. Compute each player's SGP via the SGP calculator.
  2. Determine replacement-level SGP for each primary position.
  3. VORP (Value Over Replacement Player) = SGP - replacement SGP.
  4. Convert positive VORP into dollars that collectively sum to the
     league's total auction budget (per-team budget * number of teams).
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from .config import (
    BASELINE_LEAGUE_SIZE,
    DEFAULT_REPLACEMENT_LEVEL,
    FALLBACK_REPLACEMENT_DEPTH,
    MIN_AUCTION_VALUE,
    layered_get,
)
from .models import LeagueSettings, Player, primary_position
from .sgp import calculate_sgp_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuctionValue:
    player_id: int
    player_name: str
    position: str
    total_value: float  # dollars, one decimal
    sgp_value: float
    vorp: float
    category_values: Mapping[str, float] = field(hash=False)
    is_above_replacement: bool


# === CORE CALCULATIONS ===


def replacement_threshold(settings: LeagueSettings, position: str, num_teams: int) -> int:
    """
    Roster depth at which a position reaches replacement level.

    The configured depth is for a 12-team league and is scaled by
    num_teams / 12, then floored.
    """
    depth = layered_get(
        position,
        settings.replacement_level,
        DEFAULT_REPLACEMENT_LEVEL,
        default=FALLBACK_REPLACEMENT_DEPTH,
    )
    return int(math.floor(depth * num_teams / BASELINE_LEAGUE_SIZE))


def replacement_sgp(sorted_sgp: list[float], threshold: int) -> float:
    """
    SGP of the replacement-level player in a bucket sorted descending.

    The threshold-th best player (1-based) is replacement level. A bucket
    shallower than the threshold uses its weakest player; an empty bucket
    has a replacement level of 0.
    """
    if not sorted_sgp:
        return 0.0
    if 0 < threshold <= len(sorted_sgp):
        return sorted_sgp[threshold - 1]
    return sorted_sgp[-1]


def calculate_vorp(player_sgp: float, replacement: float) -> float:
    return player_sgp - replacement


def sgp_to_dollars(
    vorp: float,
    total_budget: float,
    total_positive_vorp: float,
    min_value: float = MIN_AUCTION_VALUE,
) -> float:
    """
    Convert VORP to dollars: max(min_value, vorp * total_budget / total_positive_vorp).

    With no positive VORP in the league every player is worth min_value.
    """
    if total_positive_vorp <= 0:
        return min_value
    dollars_per_sgp = total_budget / total_positive_vorp
    return max(min_value, vorp * dollars_per_sgp)


# === MAIN ENTRY POINT ===


def calculate_auction_values(
    players: Iterable[Player],
    settings: LeagueSettings,
    num_teams: int,
    show_progress: bool = False,
) -> list[AuctionValue]:
    """
    Calculate auction dollar values for every projected player in the pool.

    Args:
        players: Player pool; players without a ROS projection are skipped
        settings: League settings (budget, categories, replacement depths)
        num_teams: Number of teams in the league
        show_progress: Show a tqdm progress bar while computing SGP

    Returns:
        List of AuctionValue sorted by total_value descending.

    Raises:
        ValueError: If num_teams is not positive
    """
    if num_teams <= 0:
        raise ValueError(f"num_teams must be positive, got {num_teams}")

    projected = [p for p in players if p.ros_projection is not None]
    if not projected:
        logger.info("No projected players to value")
        return []

    # Step 1: SGP for every player, bucketed by primary position
    records = []
    breakdowns = {}
    for player in tqdm(projected, desc="Computing SGP", disable=not show_progress):
        result = calculate_sgp_value(player.ros_projection, player.is_pitcher, settings)
        breakdowns[player.id] = result.category_breakdown
        records.append(
            {
                "player_id": player.id,
                "name": player.name,
                "position": primary_position(player),
                "sgp": result.total_sgp,
            }
        )
    pool = pd.DataFrame(records)

    # Steps 2-3: replacement level per position bucket
    replacement_by_position = {}
    for position, bucket in pool.groupby("position", sort=False):
        sorted_sgp = bucket["sgp"].sort_values(ascending=False).tolist()
        threshold = replacement_threshold(settings, position, num_teams)
        replacement_by_position[position] = replacement_sgp(sorted_sgp, threshold)
        logger.debug(
            "Replacement %s: depth=%d of %d players, SGP=%.2f",
            position,
            threshold,
            len(sorted_sgp),
            replacement_by_position[position],
        )

    # Step 4: VORP
    pool["vorp"] = pool["sgp"] - pool["position"].map(replacement_by_position)

    # Step 5: league-wide positive VORP
    total_positive_vorp = float(pool["vorp"].clip(lower=0).sum())
    league_budget = settings.total_budget * num_teams

    # Step 6: dollars (below replacement gets exactly the floor)
    if total_positive_vorp > 0:
        raw_dollars = pool["vorp"] * (league_budget / total_positive_vorp)
    else:
        raw_dollars = pd.Series(MIN_AUCTION_VALUE, index=pool.index)
    pool["value"] = np.where(
        pool["vorp"] > 0,
        np.maximum(MIN_AUCTION_VALUE, raw_dollars),
        MIN_AUCTION_VALUE,
    )

    # Step 7: round and sort
    results = [
        AuctionValue(
            player_id=int(row.player_id),
            player_name=row.name,
            position=row.position,
            total_value=round(float(row.value), 1),
            sgp_value=round(float(row.sgp), 2),
            vorp=round(float(row.vorp), 2),
            category_values=breakdowns[int(row.player_id)],
            is_above_replacement=bool(row.vorp > 0),
        )
        for row in pool.itertuples(index=False)
    ]
    results.sort(key=lambda av: av.total_value, reverse=True)

    n_above = sum(av.is_above_replacement for av in results)
    logger.info(
        "Valued %d players (%d above replacement), league budget $%.0f, "
        "total positive VORP %.2f",
        len(results),
        n_above,
        league_budget,
        total_positive_vorp,
    )

    return results


def apply_auction_values(
    players: Iterable[Player], values: Iterable[AuctionValue]
) -> list[Player]:
    """
    Return copies of `players` carrying their computed valuation outputs.

    Players without a computed value are returned unchanged.
    """
    by_id = {av.player_id: av for av in values}
    updated = []
    for player in players:
        av = by_id.get(player.id)
        if av is None:
            updated.append(player)
            continue
        updated.append(
            replace(
                player,
                auction_value=av.total_value,
                vorp=av.vorp,
                sgp_value=av.sgp_value,
                category_values=av.category_values,
            )
        )
    return updated


def auction_values_frame(values: Iterable[AuctionValue]) -> pd.DataFrame:
    """
    Flatten auction values into a DataFrame for reporting.

    Returns:
        DataFrame with columns player_id, name, position, value, sgp, vorp,
        above_replacement, plus one sgp_<category> column per category.
    """
    records = []
    for av in values:
        record = {
            "player_id": av.player_id,
            "name": av.player_name,
            "position": av.position,
            "value": av.total_value,
            "sgp": av.sgp_value,
            "vorp": av.vorp,
            "above_replacement": av.is_above_replacement,
        }
        for cat, sgp in av.category_values.items():
            record[f"sgp_{cat}"] = sgp
        records.append(record)
    return pd.DataFrame(records)
