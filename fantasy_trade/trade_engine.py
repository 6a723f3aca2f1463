"""
Trade analyzer.

Orchestrates the valuation, standings and roster-fit components into one
TradeAnalysis for a proposed trade:

  1. Dollar values for every player involved (auction values over the
     league's rosters unless precomputed values are supplied).
  2. Standings before and after the trade, and the per-category impact on
     both teams.
  3. Roster fit for both sides.
  4. Fairness score, warnings and a recommendation.

    fairness = clamp(50 + (A.value_in - A.value_out) / (A.value_in + A.value_out) * 50, 0, 100)

50 is perfectly fair; above 50 favors side A.
"""

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from .auction_values import calculate_auction_values
from .config import (
    FAIR_BAND_HIGH,
    FAIR_BAND_LOW,
    MIN_AUCTION_VALUE,
    SALARY_GAP_WARNING,
    STRONG_FIT_SCORE,
    VALUE_GAP_WARNING,
)
from .models import (
    CategoryImpact,
    FantasyTeam,
    LeagueSettings,
    Player,
    RosterFitResult,
    TradeAnalysis,
    TradeProposal,
    TradeSide,
)
from .roster_fit import evaluate_roster_fit
from .standings import StandingsSnapshot, simulate_trade_standings
from .stats import RATE_CATEGORIES, clamp

logger = logging.getLogger(__name__)


# === VALIDATION ===


def _resolve_proposal(
    proposal: TradeProposal, teams: Sequence[FantasyTeam]
) -> tuple[FantasyTeam, FantasyTeam, list[Player], list[Player]]:
    """
    Look up both teams and the players each sends.

    Raises:
        ValueError: Same team on both sides, unknown team id, a player id
            listed twice, or a player id not on the giving team's roster
    """
    if proposal.team_a_id == proposal.team_b_id:
        raise ValueError(f"A team cannot trade with itself: {proposal.team_a_id}")

    by_id = {team.id: team for team in teams}
    for team_id in (proposal.team_a_id, proposal.team_b_id):
        if team_id not in by_id:
            raise ValueError(f"Unknown team id: {team_id}")

    team_a = by_id[proposal.team_a_id]
    team_b = by_id[proposal.team_b_id]

    def players_sent(team: FantasyTeam, player_ids: Sequence[int]) -> list[Player]:
        if len(set(player_ids)) != len(player_ids):
            raise ValueError(f"Duplicate player ids in {team.name}'s side: {list(player_ids)}")
        roster = {p.id: p for p in team.roster}
        missing = [pid for pid in player_ids if pid not in roster]
        if missing:
            raise ValueError(f"Players {missing} are not on {team.name}'s roster")
        return [roster[pid] for pid in player_ids]

    return (
        team_a,
        team_b,
        players_sent(team_a, proposal.team_a_gives),
        players_sent(team_b, proposal.team_b_gives),
    )


# === VALUES ===


def league_values(teams: Sequence[FantasyTeam], settings: LeagueSettings) -> dict[int, float]:
    """Auction dollar values for every rostered player in the league."""
    pool = [p for team in teams for p in team.roster]
    return {
        av.player_id: av.total_value
        for av in calculate_auction_values(pool, settings, len(teams))
    }


def player_value(player: Player, values: Mapping[int, float]) -> float:
    """Computed value, then the player's stored auction value, then the $1 floor."""
    if player.id in values:
        return values[player.id]
    if player.auction_value is not None:
        return player.auction_value
    return MIN_AUCTION_VALUE


# === SIDES ===


def build_category_impacts(
    team_id: int, before: StandingsSnapshot, after: StandingsSnapshot
) -> tuple[CategoryImpact, ...]:
    """Before/after value and rank in every category for one team."""
    before_team = before.for_team(team_id)
    after_team = after.for_team(team_id)

    impacts = []
    for b in before_team.standings:
        a = after_team.category(b.category)
        if a is None:
            continue
        if a.value is None or b.value is None:
            change = None
        else:
            change = round(a.value - b.value, 3)
        impacts.append(
            CategoryImpact(
                category=b.category,
                before=b.value,
                after=a.value,
                change=change,
                rank_before=b.rank,
                rank_after=a.rank,
                # positive = improved (lower rank number is better)
                rank_change=b.rank - a.rank,
            )
        )
    return tuple(impacts)


def build_trade_side(
    team: FantasyTeam,
    players_out: Sequence[Player],
    players_in: Sequence[Player],
    category_impacts: tuple[CategoryImpact, ...],
    values: Mapping[int, float],
) -> TradeSide:
    return TradeSide(
        team_id=team.id,
        team_name=team.name,
        players_out=tuple(players_out),
        players_in=tuple(players_in),
        salary_out=sum(p.salary for p in players_out),
        salary_in=sum(p.salary for p in players_in),
        value_out=round(sum(player_value(p, values) for p in players_out), 1),
        value_in=round(sum(player_value(p, values) for p in players_in), 1),
        category_impacts=category_impacts,
    )


# === VERDICT ===


def calculate_fairness_score(value_in: float, value_out: float) -> float:
    """
    Fairness from side A's point of view, one decimal.

    Returns exactly 50 when no value changes hands.
    """
    total = value_in + value_out
    if total == 0:
        return 50.0
    raw = 50 + (value_in - value_out) / total * 50
    return round(clamp(raw, 0, 100), 1)


def generate_warnings(side_a: TradeSide, side_b: TradeSide, value_difference: float) -> list[str]:
    warnings = []

    if abs(value_difference) > VALUE_GAP_WARNING:
        winner = side_a.team_name if value_difference > 0 else side_b.team_name
        warnings.append(
            f"Significant value imbalance: ${abs(value_difference):.1f} in favour of {winner}"
        )

    for side in (side_a, side_b):
        for p in side.players_out:
            if p.contract is not None and p.contract.is_keeper:
                warnings.append(
                    f"{side.team_name} is trading away keeper {p.name} "
                    f"(${p.contract.salary:g}, {p.contract.years_remaining}yr remaining)"
                )

    salary_gap = abs(side_a.salary_out - side_b.salary_out)
    if salary_gap > SALARY_GAP_WARNING:
        warnings.append(
            f"Large salary differential: ${salary_gap:.0f} between the two sides"
        )

    return warnings


def generate_recommendation(
    side_a: TradeSide,
    side_b: TradeSide,
    fairness_score: float,
    roster_fit_a: RosterFitResult,
    roster_fit_b: RosterFitResult,
) -> str:
    parts = []

    if FAIR_BAND_LOW <= fairness_score <= FAIR_BAND_HIGH:
        parts.append("This trade is approximately fair in terms of player value.")
    else:
        winner = side_a if fairness_score > FAIR_BAND_HIGH else side_b
        gain = abs(round(winner.value_in - winner.value_out))
        parts.append(
            f"{winner.team_name} receives approximately ${gain} more value in this trade."
        )

    strong_a = roster_fit_a.score >= STRONG_FIT_SCORE
    strong_b = roster_fit_b.score >= STRONG_FIT_SCORE
    if strong_a and strong_b:
        parts.append("Both teams improve their roster construction.")
    elif strong_a:
        parts.append(
            f"{side_a.team_name} significantly improves roster fit (score: {roster_fit_a.score})."
        )
    elif strong_b:
        parts.append(
            f"{side_b.team_name} significantly improves roster fit (score: {roster_fit_b.score})."
        )

    for side, fit in ((side_a, roster_fit_a), (side_b, roster_fit_b)):
        if fit.unfilled_slots:
            parts.append(
                f"{side.team_name} will have unfilled slots: {', '.join(fit.unfilled_slots)}."
            )

    return " ".join(parts)


# === MAIN ENTRY POINT ===


def analyze_trade(
    proposal: TradeProposal,
    teams: Sequence[FantasyTeam],
    settings: LeagueSettings,
    values: Mapping[int, float] | None = None,
    exact_fit: bool = False,
) -> TradeAnalysis:
    """
    Perform a complete analysis of a proposed trade.

    Args:
        proposal: Both team ids and the player ids each side sends
        teams: Every team in the league (standings context)
        settings: League settings
        values: Precomputed dollar values by player id. When omitted,
            auction values are computed over every league roster.
        exact_fit: Use the exact MILP slot assignment for roster fit

    Returns:
        Immutable TradeAnalysis. No team or player is modified.

    Raises:
        ValueError: If the proposal references unknown teams or players
    """
    team_a, team_b, a_gives, b_gives = _resolve_proposal(proposal, teams)

    # Step 1: values
    if values is None:
        values = league_values(teams, settings)

    # Step 2: standings simulation
    before, after = simulate_trade_standings(
        teams,
        settings,
        team_a.id,
        team_b.id,
        [p.id for p in a_gives],
        [p.id for p in b_gives],
    )
    impacts_a = build_category_impacts(team_a.id, before, after)
    impacts_b = build_category_impacts(team_b.id, before, after)

    # Step 3: sides (A gives a_gives and receives b_gives)
    side_a = build_trade_side(team_a, a_gives, b_gives, impacts_a, values)
    side_b = build_trade_side(team_b, b_gives, a_gives, impacts_b, values)

    # Step 4: value difference and fairness
    value_difference = round(side_a.value_in - side_a.value_out, 1)
    fairness_score = calculate_fairness_score(side_a.value_in, side_a.value_out)

    # Step 5: category summary
    impacts_b_by_cat = {impact.category: impact for impact in impacts_b}
    category_summary = MappingProxyType(
        {
            impact.category: MappingProxyType(
                {"team_a": impact, "team_b": impacts_b_by_cat[impact.category]}
            )
            for impact in impacts_a
            if impact.category in impacts_b_by_cat
        }
    )

    # Step 6: roster fit
    roster_fit_a = evaluate_roster_fit(team_a.roster, b_gives, a_gives, settings, exact=exact_fit)
    roster_fit_b = evaluate_roster_fit(team_b.roster, a_gives, b_gives, settings, exact=exact_fit)

    # Step 7: warnings and recommendation
    warnings = generate_warnings(side_a, side_b, value_difference)
    recommendation = generate_recommendation(
        side_a, side_b, fairness_score, roster_fit_a, roster_fit_b
    )

    logger.info(
        "Trade %s <-> %s: fairness %.1f, value diff %+.1f, %d warnings",
        team_a.name,
        team_b.name,
        fairness_score,
        value_difference,
        len(warnings),
    )

    return TradeAnalysis(
        side_a=side_a,
        side_b=side_b,
        value_difference=value_difference,
        fairness_score=fairness_score,
        category_summary=category_summary,
        roster_fit_a=roster_fit_a,
        roster_fit_b=roster_fit_b,
        warnings=tuple(warnings),
        recommendation=recommendation,
    )


# === REPORTING ===


def _format_stat(category: str, value: float | None) -> str:
    if value is None:
        return "-"
    if category in RATE_CATEGORIES:
        return f"{value:.3f}"
    return f"{value:.0f}"


def print_trade_report(analysis: TradeAnalysis) -> None:
    """
    Print a formatted trade analysis report.
    """
    side_a, side_b = analysis.side_a, analysis.side_b

    print("\n" + "=" * 70)
    print(f"TRADE: {side_a.team_name} <-> {side_b.team_name}")
    print("=" * 70)

    for side in (side_a, side_b):
        send_str = ", ".join(p.name for p in side.players_out)
        receive_str = ", ".join(p.name for p in side.players_in)
        print(f"\n{side.team_name}:")
        print(f"    Send:    [{send_str}]  ${side.value_out:.1f} value, ${side.salary_out:g} salary")
        print(f"    Receive: [{receive_str}]  ${side.value_in:.1f} value, ${side.salary_in:g} salary")

    print(f"\nFairness: {analysis.fairness_score:.1f}/100 (value diff {analysis.value_difference:+.1f})")

    print("\nCATEGORY IMPACT:\n")
    print(
        f"{'Category':<10} {'A Before':>9} {'A After':>9} {'A Rk':>6} "
        f"{'B Before':>9} {'B After':>9} {'B Rk':>6}"
    )
    print("-" * 64)
    for cat, impacts in analysis.category_summary.items():
        a, b = impacts["team_a"], impacts["team_b"]
        print(
            f"{cat:<10} {_format_stat(cat, a.before):>9} {_format_stat(cat, a.after):>9} "
            f"{a.rank_change:>+6d} "
            f"{_format_stat(cat, b.before):>9} {_format_stat(cat, b.after):>9} "
            f"{b.rank_change:>+6d}"
        )

    print("\nROSTER FIT:")
    for side, fit in ((side_a, analysis.roster_fit_a), (side_b, analysis.roster_fit_b)):
        print(f"  {side.team_name}: {fit.score}/100")
        for note in fit.notes:
            print(f"    - {note}")

    if analysis.warnings:
        print("\nWARNINGS:")
        for warning in analysis.warnings:
            print(f"  ! {warning}")

    print(f"\nRecommendation: {analysis.recommendation}")
    print("=" * 70)
