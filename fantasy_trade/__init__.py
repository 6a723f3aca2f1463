# Fantasy Trade Analyzer
#
# Valuation and trade simulation for rotisserie keeper leagues:
# - stats / sgp: rate stat derivation and standings gain points
# - auction_values: replacement level, VORP and dollar values
# - scarcity / inflation: positional tiers, keeper inflation and projections
# - standings: roto standings and trade simulation
# - roster_fit: positional slot fit of incoming players
# - trade_engine: full trade analysis and report

from .auction_values import (
    AuctionValue,
    apply_auction_values,
    auction_values_frame,
    calculate_auction_values,
)
from .config import layered_get, load_config
from .inflation import (
    InflationResult,
    KeeperCandidate,
    YearProjection,
    analyze_keepers,
    apply_inflation,
    calculate_inflation,
    can_extend,
    project_keeper_value,
)
from .logging_config import setup_logging
from .models import (
    CategoryConfig,
    CategoryImpact,
    CategoryStanding,
    Contract,
    FantasyTeam,
    LeagueSettings,
    Player,
    PlayerStats,
    RosterFitResult,
    TradeAnalysis,
    TradeProposal,
    TradeSide,
    primary_position,
)
from .projections import (
    aggregate_projections,
    projections_from_frame,
    stats_frame,
    stats_from_row,
)
from .roster_fit import (
    assign_players_to_slots,
    assign_players_to_slots_exact,
    evaluate_roster_fit,
)
from .scarcity import PositionalScarcity, calculate_positional_scarcity
from .sgp import SgpResult, calculate_sgp_value
from .standings import (
    StandingsSnapshot,
    TeamStanding,
    apply_standings,
    apply_trade,
    calculate_category_totals,
    calculate_standings,
    print_standings,
    simulate_trade_standings,
    standings_frame,
)
from .trade_engine import analyze_trade, print_trade_report
