"""
Projection aggregation.

Blends several projection systems (Steamer, ZiPS, ATC, ...) into one
rest-of-season stat line per player. Only counting components are blended:

    blended_hits = sum(weight[src] * hits[src])
    AVG          = blended_hits / blended_ab   (recomputed later, never averaged)

Weights are renormalised over the sources that actually project a player, so
a player missing from one system is not dragged toward zero.
"""

import logging
from collections.abc import Iterable, Mapping

import pandas as pd

from .config import DEFAULT_PROJECTION_WEIGHTS
from .models import STAT_COMPONENTS, Player, PlayerStats
from .stats import merge_stats

logger = logging.getLogger(__name__)

# FanGraphs-style CSV headers -> PlayerStats components
HITTER_COLUMNS = {
    "G": "games",
    "PA": "pa",
    "AB": "ab",
    "R": "runs",
    "H": "hits",
    "2B": "doubles",
    "3B": "triples",
    "HR": "hr",
    "RBI": "rbi",
    "SB": "sb",
    "CS": "cs",
    "BB": "bb",
    "SO": "so",
}

# Pitcher exports reuse H/BB/SO for hits, walks and strikeouts allowed
PITCHER_COLUMNS = {
    "G": "games",
    "IP": "ip",
    "W": "wins",
    "L": "losses",
    "SV": "saves",
    "HLD": "holds",
    "QS": "qs",
    "ER": "er",
    "H": "hits_allowed",
    "BB": "bb_allowed",
    "SO": "strikeouts",
}


def normalise_weights(
    sources: Iterable[str], weights: Mapping[str, float] | None = None
) -> dict[str, float]:
    """
    Weights for `sources`, rescaled to sum to 1.

    Sources without a configured weight get 0. When every weight is 0 the
    sources are weighted equally.
    """
    if weights is None:
        weights = DEFAULT_PROJECTION_WEIGHTS
    sources = list(sources)
    if not sources:
        return {}
    total = sum(weights.get(src, 0.0) for src in sources)
    if total <= 0:
        return {src: 1 / len(sources) for src in sources}
    return {src: weights.get(src, 0.0) / total for src in sources}


def aggregate_projections(
    projection_sets: Mapping[str, Mapping[int, PlayerStats]],
    weights: Mapping[str, float] | None = None,
) -> dict[int, PlayerStats]:
    """
    Blend projection sources into one stat line per player.

    Args:
        projection_sets: source name -> {player_id: PlayerStats}
        weights: source name -> weight (defaults to config.json's
            projections.source_weights)

    Returns:
        player_id -> blended PlayerStats for every player in any source.
    """
    by_player: dict[int, dict[str, PlayerStats]] = {}
    for source, records in projection_sets.items():
        for player_id, stats in records.items():
            by_player.setdefault(player_id, {})[source] = stats

    blended = {}
    for player_id, sources in by_player.items():
        source_weights = normalise_weights(sources, weights)
        blended[player_id] = merge_stats(
            stats.scaled(source_weights[src]) for src, stats in sources.items()
        )

    logger.info(
        "Blended %d players from %d projection sources",
        len(blended),
        len(projection_sets),
    )
    return blended


# === DATAFRAME ADAPTERS ===


def stats_from_row(row: Mapping, player_type: str = "hitter") -> PlayerStats:
    """
    Build PlayerStats from a DataFrame row (or any mapping).

    Accepts component names ("hits", "ip", ...) or FanGraphs headers
    ("H", "IP", ...). Missing or null columns count as 0.
    """
    assert player_type in ("hitter", "pitcher"), f"Unknown player_type: {player_type}"
    aliases = HITTER_COLUMNS if player_type == "hitter" else PITCHER_COLUMNS

    components = {}
    for column, component in aliases.items():
        if column in row and pd.notna(row[column]):
            components[component] = float(row[column])
    for component in STAT_COMPONENTS:
        if component in row and pd.notna(row[component]):
            components[component] = float(row[component])
    return PlayerStats(**components)


def projections_from_frame(
    df: pd.DataFrame, player_type: str = "hitter", id_column: str = "MLBAMID"
) -> dict[int, PlayerStats]:
    """One projection source as {player_id: PlayerStats} from a CSV-style frame."""
    assert id_column in df.columns, f"Missing required column: {id_column}"
    df = df[df[id_column].notna()]

    duplicates = df[df[id_column].duplicated(keep="first")][id_column].unique()
    if len(duplicates) > 0:
        logger.warning("Dropping %d duplicate %s rows", len(duplicates), id_column)
        df = df.drop_duplicates(subset=id_column, keep="first")

    return {
        int(row[id_column]): stats_from_row(row, player_type)
        for _, row in df.iterrows()
    }


def stats_frame(players: Iterable[Player]) -> pd.DataFrame:
    """
    ROS projections of `players` as a DataFrame.

    Returns:
        DataFrame with columns player_id, name, then one column per
        PlayerStats component. Players without a projection are skipped.
    """
    records = [
        {"player_id": p.id, "name": p.name, **p.ros_projection.as_dict()}
        for p in players
        if p.ros_projection is not None
    ]
    return pd.DataFrame(records, columns=["player_id", "name", *STAT_COMPONENTS])
