"""
Inflation calculator and keeper analysis.

In a keeper league, players kept below their auction value take more value
out of the draft pool than salary out of the league budget. The money left
chases less value, so every remaining player costs more than its base value:

    inflation_rate = remaining_budget / remaining_value

    remaining_budget = league_budget - total_keeper_salary
    remaining_value  = league_budget - total_keeper_value
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .config import KEEPER_VALUE_DECAY, KEEPER_YEARS_FORWARD
from .models import Contract, LeagueSettings, Player, primary_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InflationResult:
    inflation_rate: float
    inflation_percentage: float
    total_keeper_salary: float
    total_keeper_value: float
    remaining_budget: float
    remaining_value: float
    num_keepers: int
    avg_keeper_discount: float


@dataclass(frozen=True)
class YearProjection:
    year: int
    projected_salary: float
    projected_value: float
    surplus_value: float
    keep_recommendation: bool


@dataclass(frozen=True)
class KeeperCandidate:
    player_id: int
    player_name: str
    position: str
    salary: float
    auction_value: float
    vorp: float
    inflated_value: float
    surplus_value: float
    inflated_surplus: float
    years_remaining: int
    contract_status: str
    keep_recommendation: bool
    multi_year_projection: tuple[YearProjection, ...]


# === LEAGUE INFLATION ===


def is_likely_keeper(player: Player) -> bool:
    """
    Rostered, under contract at a positive salary, valued, and either marked
    as a keeper or worth more than the salary.
    """
    if player.fantasy_team_id is None or player.contract is None:
        return False
    if player.contract.salary <= 0 or player.auction_value is None:
        return False
    return player.contract.is_keeper or player.auction_value > player.contract.salary


def calculate_inflation(
    players: Iterable[Player],
    settings: LeagueSettings,
    num_teams: int,
) -> InflationResult:
    """
    Compute league-wide auction inflation caused by keepers.

    Args:
        players: Every player in the league (rostered and free agents)
        settings: Supplies the per-team budget
        num_teams: Number of teams; league budget = total_budget * num_teams

    Returns:
        InflationResult. The rate is exactly 1.0 when the keepers' value
        consumes the entire league budget (remaining_value <= 0).

    Raises:
        ValueError: If num_teams is not positive
    """
    if num_teams <= 0:
        raise ValueError(f"num_teams must be positive, got {num_teams}")

    league_budget = settings.total_budget * num_teams
    keepers = [p for p in players if is_likely_keeper(p)]

    total_keeper_salary = sum(p.contract.salary for p in keepers)
    total_keeper_value = sum(p.auction_value for p in keepers)

    remaining_budget = league_budget - total_keeper_salary
    remaining_value = league_budget - total_keeper_value

    inflation_rate = remaining_budget / remaining_value if remaining_value > 0 else 1.0

    if keepers:
        avg_keeper_discount = (total_keeper_value - total_keeper_salary) / len(keepers)
    else:
        avg_keeper_discount = 0.0

    logger.info(
        "Inflation %.3f from %d keepers (salary $%.0f, value $%.0f)",
        inflation_rate,
        len(keepers),
        total_keeper_salary,
        total_keeper_value,
    )

    return InflationResult(
        inflation_rate=inflation_rate,
        inflation_percentage=round((inflation_rate - 1) * 100, 1),
        total_keeper_salary=round(total_keeper_salary, 1),
        total_keeper_value=round(total_keeper_value, 1),
        remaining_budget=round(remaining_budget, 1),
        remaining_value=round(remaining_value, 1),
        num_keepers=len(keepers),
        avg_keeper_discount=round(avg_keeper_discount, 1),
    )


def apply_inflation(base_value: float, inflation_rate: float) -> float:
    return round(base_value * inflation_rate, 1)


# === KEEPER PROJECTION ===


def can_extend(contract: Contract | None) -> bool:
    """
    Whether a contract can be extended past its current term.

        "1st" / "2nd" -> yes (regular cycle)
        "3rd"         -> no, expiring
        "2027" etc.   -> no, guaranteed through that year
        "" / missing  -> yes (legacy data without a status)
    """
    if contract is None:
        return True
    return contract.extendable


def project_keeper_value(
    player: Player,
    settings: LeagueSettings,
    years_forward: int = KEEPER_YEARS_FORWARD,
) -> list[YearProjection]:
    """
    Project a keeper's value, salary and surplus over the next few years.

    Value decays by KEEPER_VALUE_DECAY per year. Within the contract term the
    salary is unchanged; each year beyond it adds extension_cost_per_year per
    extension year. Contracts that cannot be extended stop after their term.
    """
    base_salary = player.salary
    base_value = player.auction_value or 0.0
    contract_years = player.contract.years_remaining if player.contract else 1
    extensible = can_extend(player.contract)

    projections = []
    for year in range(1, years_forward + 1):
        if year > contract_years and not extensible:
            break

        projected_value = round(base_value * KEEPER_VALUE_DECAY**year, 1)

        if year <= contract_years:
            projected_salary = base_salary
        else:
            extensions = year - contract_years
            projected_salary = base_salary + settings.extension_cost_per_year * extensions

        surplus = round(projected_value - projected_salary, 1)
        projections.append(
            YearProjection(
                year=year,
                projected_salary=projected_salary,
                projected_value=projected_value,
                surplus_value=surplus,
                keep_recommendation=surplus > 0,
            )
        )

    return projections


def analyze_keepers(
    team_players: Iterable[Player],
    settings: LeagueSettings,
    inflation_rate: float,
) -> list[KeeperCandidate]:
    """
    Evaluate every contracted, valued player as a keeper candidate.

    Args:
        team_players: Typically one fantasy team's roster
        settings: Supplies the extension cost
        inflation_rate: From calculate_inflation()

    Returns:
        KeeperCandidates sorted by inflated surplus descending.
    """
    candidates = []
    for player in team_players:
        if player.contract is None or player.contract.salary <= 0:
            continue
        if player.auction_value is None:
            continue

        salary = player.contract.salary
        inflated_value = apply_inflation(player.auction_value, inflation_rate)
        inflated_surplus = round(inflated_value - salary, 1)

        candidates.append(
            KeeperCandidate(
                player_id=player.id,
                player_name=player.name,
                position=primary_position(player),
                salary=salary,
                auction_value=player.auction_value,
                vorp=player.vorp or 0.0,
                inflated_value=inflated_value,
                surplus_value=round(player.auction_value - salary, 1),
                inflated_surplus=inflated_surplus,
                years_remaining=player.contract.years_remaining,
                contract_status=player.contract.contract_status,
                keep_recommendation=inflated_surplus > 0,
                multi_year_projection=tuple(project_keeper_value(player, settings)),
            )
        )

    candidates.sort(key=lambda c: c.inflated_surplus, reverse=True)
    return candidates
