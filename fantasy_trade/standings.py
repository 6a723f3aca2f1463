"""
Rotisserie standings simulator.

Simulates standings by:
  1. Computing each team's category totals from its roster's ROS projections.
     Rate categories are recomputed from the summed components.
  2. Ranking all teams in each category (ascending for inverse categories
     like ERA/WHIP, descending otherwise). Ties keep input order, so ranks
     are always a permutation of 1..num_teams.
  3. Assigning roto points = (num_teams - rank + 1) * category weight.
  4. Summing points across categories and ranking teams by the total.

Trade simulations swap players between two teams and recompute with the
identical algorithm, returning before and after snapshots.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

import numpy as np
import pandas as pd
from scipy.stats import rankdata

from .models import CategoryStanding, FantasyTeam, LeagueSettings, Player
from .stats import COUNTING_CATEGORIES, RATE_CATEGORIES, category_value, merge_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamStanding:
    team_id: int
    team_name: str
    standings: tuple[CategoryStanding, ...]
    total_points: float
    rank: int

    def category(self, name: str) -> CategoryStanding | None:
        for standing in self.standings:
            if standing.category == name:
                return standing
        return None


@dataclass(frozen=True)
class StandingsSnapshot:
    team_standings: tuple[TeamStanding, ...]  # ordered by overall rank

    def for_team(self, team_id: int) -> TeamStanding:
        for ts in self.team_standings:
            if ts.team_id == team_id:
                return ts
        raise KeyError(f"Team {team_id} not in standings")


# === CATEGORY TOTALS ===


def calculate_category_totals(
    roster: Iterable[Player],
    categories: Iterable[str] | None = None,
) -> dict[str, float | None]:
    """
    Season totals for a roster from its players' ROS projections.

    Players without a projection contribute nothing. Rate categories are
    computed from the merged components and are None when undefined.

    Args:
        roster: Players on the team
        categories: Category names to compute (defaults to every known one)
    """
    if categories is None:
        categories = list(COUNTING_CATEGORIES) + list(RATE_CATEGORIES)
    merged = merge_stats(p.ros_projection for p in roster)
    return {cat: category_value(merged, cat) for cat in categories}


def _ranking_values(values: Sequence[float | None], inverse: bool) -> np.ndarray:
    """
    Map category values to sort keys where smaller is better.

    An undefined value ranks worst regardless of direction.
    """
    if inverse:
        return np.array([math.inf if v is None else v for v in values], dtype=float)
    return np.array([math.inf if v is None else -v for v in values], dtype=float)


# === STANDINGS ===


def calculate_standings(
    teams: Sequence[FantasyTeam],
    settings: LeagueSettings,
) -> StandingsSnapshot:
    """
    Calculate full rotisserie standings for all teams.

    Args:
        teams: Every fantasy team in the league with rosters populated
        settings: Categories and weights

    Returns:
        StandingsSnapshot with team standings ordered by overall rank.
    """
    num_teams = len(teams)
    if num_teams == 0:
        return StandingsSnapshot(team_standings=())

    category_names = [c.name for c in settings.all_categories]
    totals = [calculate_category_totals(team.roster, category_names) for team in teams]

    per_team = [[] for _ in teams]
    team_points = np.zeros(num_teams)

    for cat in settings.all_categories:
        values = [t[cat.name] for t in totals]
        # "ordinal" breaks ties by input order: ranks stay a permutation
        ranks = rankdata(_ranking_values(values, cat.inverse), method="ordinal")

        for i, rank in enumerate(ranks):
            points = num_teams - int(rank) + 1
            weighted = points * cat.weight
            per_team[i].append(
                CategoryStanding(
                    category=cat.name,
                    value=values[i],
                    rank=int(rank),
                    points=points,
                    weighted_points=weighted,
                )
            )
            team_points[i] += weighted

    team_points = np.round(team_points, 2)
    overall = rankdata(-team_points, method="ordinal")

    standings = [
        TeamStanding(
            team_id=team.id,
            team_name=team.name,
            standings=tuple(per_team[i]),
            total_points=float(team_points[i]),
            rank=int(overall[i]),
        )
        for i, team in enumerate(teams)
    ]
    standings.sort(key=lambda ts: ts.rank)

    logger.debug(
        "Standings for %d teams across %d categories; leader %s (%.2f)",
        num_teams,
        len(category_names),
        standings[0].team_name,
        standings[0].total_points,
    )

    return StandingsSnapshot(team_standings=tuple(standings))


def apply_standings(
    teams: Sequence[FantasyTeam], snapshot: StandingsSnapshot
) -> list[FantasyTeam]:
    """Return copies of `teams` carrying their derived standings fields."""
    updated = []
    for team in teams:
        ts = snapshot.for_team(team.id)
        updated.append(
            replace(
                team,
                category_standings=ts.standings,
                total_points=ts.total_points,
                rank=ts.rank,
            )
        )
    return updated


# === TRADE SIMULATION ===


def apply_trade(
    teams: Sequence[FantasyTeam],
    team_a_id: int,
    team_b_id: int,
    team_a_gives: Iterable[int],
    team_b_gives: Iterable[int],
) -> list[FantasyTeam]:
    """
    Swap players between two teams.

    Args:
        teams: Every team in the league
        team_a_id, team_b_id: The trading teams
        team_a_gives: Player ids team A sends to team B
        team_b_gives: Player ids team B sends to team A

    Returns:
        New list of teams. Traded players are re-owned by their new team;
        the input teams and players are not modified.

    Raises:
        ValueError: If either team id is not in the league
    """
    by_id = {team.id: team for team in teams}
    for team_id in (team_a_id, team_b_id):
        if team_id not in by_id:
            raise ValueError(f"Unknown team id: {team_id}")

    a_ids = set(team_a_gives)
    b_ids = set(team_b_gives)

    to_b = [replace(p, fantasy_team_id=team_b_id) for p in by_id[team_a_id].roster if p.id in a_ids]
    to_a = [replace(p, fantasy_team_id=team_a_id) for p in by_id[team_b_id].roster if p.id in b_ids]

    updated = []
    for team in teams:
        if team.id == team_a_id:
            roster = [p for p in team.roster if p.id not in a_ids] + to_a
            updated.append(replace(team, roster=tuple(roster)))
        elif team.id == team_b_id:
            roster = [p for p in team.roster if p.id not in b_ids] + to_b
            updated.append(replace(team, roster=tuple(roster)))
        else:
            updated.append(team)
    return updated


def simulate_trade_standings(
    teams: Sequence[FantasyTeam],
    settings: LeagueSettings,
    team_a_id: int,
    team_b_id: int,
    team_a_gives: Iterable[int],
    team_b_gives: Iterable[int],
) -> tuple[StandingsSnapshot, StandingsSnapshot]:
    """
    Standings before and after a trade.

    Returns:
        (before, after) snapshots computed with the same ranking algorithm.
    """
    before = calculate_standings(teams, settings)
    traded = apply_trade(teams, team_a_id, team_b_id, team_a_gives, team_b_gives)
    after = calculate_standings(traded, settings)
    return before, after


# === REPORTING ===


def standings_frame(snapshot: StandingsSnapshot) -> pd.DataFrame:
    """
    One row per team with overall rank, total points and each category's
    value and rank.
    """
    records = []
    for ts in snapshot.team_standings:
        record = {
            "rank": ts.rank,
            "team_id": ts.team_id,
            "team": ts.team_name,
            "points": ts.total_points,
        }
        for standing in ts.standings:
            record[standing.category] = standing.value
            record[f"{standing.category}_rank"] = standing.rank
        records.append(record)
    return pd.DataFrame(records)


def _format_value(category: str, value: float | None) -> str:
    if value is None:
        return "-"
    if category in RATE_CATEGORIES:
        return f"{value:.3f}"
    return f"{value:.0f}"


def print_standings(snapshot: StandingsSnapshot) -> None:
    """
    Print a formatted standings table.
    """
    if not snapshot.team_standings:
        print("No teams in standings.")
        return

    categories = [s.category for s in snapshot.team_standings[0].standings]

    print("\n" + "=" * 70)
    print("PROJECTED STANDINGS")
    print("=" * 70)

    header = f"{'Rk':<4} {'Team':<20} {'Pts':>7}"
    for cat in categories:
        header += f" {cat:>7}"
    print(header)
    print("-" * len(header))

    for ts in snapshot.team_standings:
        line = f"{ts.rank:<4} {ts.team_name[:20]:<20} {ts.total_points:>7.1f}"
        for standing in ts.standings:
            line += f" {_format_value(standing.category, standing.value):>7}"
        print(line)

    print("=" * 70)
