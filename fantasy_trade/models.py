"""
Data model for the valuation and trade-simulation engine.

Inputs (players, teams, league settings) are frozen dataclasses: no component
of the engine mutates them. Derived values (auction values, standings, trade
results) are always produced as new records, typically via
dataclasses.replace().
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType

from .config import (
    DEFAULT_BENCH_SLOTS,
    DEFAULT_EXTENSION_COST_PER_YEAR,
    DEFAULT_HITTING_CATEGORIES,
    DEFAULT_INITIAL_CONTRACT_YEARS,
    DEFAULT_LEAGUE_NAME,
    DEFAULT_PITCHING_CATEGORIES,
    DEFAULT_POSITION_SLOTS,
    DEFAULT_REPLACEMENT_LEVEL,
    DEFAULT_ROSTER_SPOTS,
    DEFAULT_SGP_MULTIPLIERS,
    DEFAULT_TOTAL_BUDGET,
    RATE_STAT_BASELINES,
    SLOT_ELIGIBILITY,
    TEAM_INNINGS,
    TEAM_PLATE_APPEARANCES,
)

# === POSITIONS ===

C = "C"
FIRST_BASE = "1B"
SECOND_BASE = "2B"
THIRD_BASE = "3B"
SS = "SS"
OF = "OF"
DH = "DH"
SP = "SP"
RP = "RP"
UTIL = "UTIL"

HITTING_POSITIONS = (C, FIRST_BASE, SECOND_BASE, THIRD_BASE, SS, OF, DH, UTIL)
PITCHING_POSITIONS = (SP, RP)

# First match wins when resolving a player's primary position
PRIMARY_POSITION_PRIORITY = (
    C,
    SS,
    SECOND_BASE,
    THIRD_BASE,
    FIRST_BASE,
    OF,
    SP,
    RP,
    DH,
    UTIL,
)


# === PLAYER ===


@dataclass(frozen=True)
class PlayerStats:
    """
    Counting totals for one stat line (season to date or rest of season).

    Rate stats (AVG, OPS, ERA, WHIP) are deliberately absent; they are always
    derived from these components by the functions in stats.py.
    """

    # Hitting
    games: float = 0
    pa: float = 0
    ab: float = 0
    runs: float = 0
    hits: float = 0
    doubles: float = 0
    triples: float = 0
    hr: float = 0
    rbi: float = 0
    sb: float = 0
    cs: float = 0
    bb: float = 0
    so: float = 0

    # Pitching
    ip: float = 0
    wins: float = 0
    losses: float = 0
    saves: float = 0
    holds: float = 0
    qs: float = 0
    er: float = 0
    hits_allowed: float = 0
    bb_allowed: float = 0
    strikeouts: float = 0

    def __post_init__(self):
        negative = [f.name for f in fields(self) if getattr(self, f.name) < 0]
        if negative:
            raise ValueError(f"Stat components must be >= 0, got negative: {negative}")

    def __add__(self, other: "PlayerStats") -> "PlayerStats":
        if not isinstance(other, PlayerStats):
            return NotImplemented
        return PlayerStats(
            **{
                f.name: getattr(self, f.name) + getattr(other, f.name)
                for f in fields(self)
            }
        )

    def scaled(self, weight: float) -> "PlayerStats":
        """Multiply every component by `weight` (used for projection blending)."""
        if weight < 0:
            raise ValueError(f"Weight must be >= 0, got {weight}")
        return PlayerStats(**{f.name: getattr(self, f.name) * weight for f in fields(self)})

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


STAT_COMPONENTS = tuple(f.name for f in fields(PlayerStats))


@dataclass(frozen=True)
class Contract:
    """
    A keeper-league contract.

    contract_status is "1st", "2nd" or "3rd" for the regular contract cycle,
    a 4-digit year ("2027") for a guaranteed deal, or "" for legacy data.
    """

    salary: float
    years_remaining: int = 1
    contract_status: str = ""
    is_keeper: bool = False
    extension_year: int = 0
    guaranteed: bool = True
    droppable: bool = True

    @property
    def extendable(self) -> bool:
        status = (self.contract_status or "").strip()
        if not status:
            return True
        if len(status) == 4 and status.isdigit():
            return False
        return "3rd" not in status.lower()


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    positions: tuple[str, ...]
    team: str = "FA"
    fantasy_team_id: int | None = None
    contract: Contract | None = None
    current_stats: PlayerStats | None = None
    ros_projection: PlayerStats | None = None

    # Computed outputs
    auction_value: float | None = None
    inflated_value: float | None = None
    vorp: float | None = None
    sgp_value: float | None = None
    category_values: Mapping[str, float] | None = field(default=None, hash=False)

    def __post_init__(self):
        # Accept any iterable of position tags
        object.__setattr__(self, "positions", tuple(self.positions))
        if self.category_values is not None:
            object.__setattr__(
                self, "category_values", MappingProxyType(dict(self.category_values))
            )

    @property
    def is_pitcher(self) -> bool:
        return any(p in PITCHING_POSITIONS for p in self.positions)

    @property
    def is_hitter(self) -> bool:
        return any(p not in PITCHING_POSITIONS for p in self.positions)

    @property
    def salary(self) -> float:
        return self.contract.salary if self.contract is not None else 0.0

    @property
    def surplus_value(self) -> float | None:
        """Auction value minus salary, or None without both."""
        if self.auction_value is None or self.contract is None:
            return None
        return self.auction_value - self.contract.salary


def primary_position(player: Player) -> str:
    """
    Resolve a player's primary position.

    Walks PRIMARY_POSITION_PRIORITY and returns the first tag the player is
    eligible at. Falls back to the first listed position, then UTIL.
    """
    for position in PRIMARY_POSITION_PRIORITY:
        if position in player.positions:
            return position
    return player.positions[0] if player.positions else UTIL


# === LEAGUE SETTINGS ===


@dataclass(frozen=True)
class CategoryConfig:
    name: str
    weight: float = 1.0
    inverse: bool = False


def _categories(raw) -> tuple[CategoryConfig, ...]:
    return tuple(c if isinstance(c, CategoryConfig) else CategoryConfig(**c) for c in raw)


@dataclass(frozen=True)
class LeagueSettings:
    """
    League-configurable knobs.

    Mapping fields hold only the league's explicit overrides or full tables;
    lookups go through config.layered_get() so that a missing key falls back
    to the shared defaults in config.json and then to a hard-coded default.
    """

    name: str = DEFAULT_LEAGUE_NAME
    total_budget: float = DEFAULT_TOTAL_BUDGET
    roster_spots: int = DEFAULT_ROSTER_SPOTS
    hitting_categories: tuple[CategoryConfig, ...] = field(
        default_factory=lambda: _categories(DEFAULT_HITTING_CATEGORIES)
    )
    pitching_categories: tuple[CategoryConfig, ...] = field(
        default_factory=lambda: _categories(DEFAULT_PITCHING_CATEGORIES)
    )
    initial_contract_years: int = DEFAULT_INITIAL_CONTRACT_YEARS
    extension_cost_per_year: float = DEFAULT_EXTENSION_COST_PER_YEAR
    position_slots: Mapping[str, int] = field(
        default_factory=lambda: dict(DEFAULT_POSITION_SLOTS), hash=False
    )
    slot_eligibility: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: dict(SLOT_ELIGIBILITY), hash=False
    )
    bench_slots: int = DEFAULT_BENCH_SLOTS
    replacement_level: Mapping[str, float] = field(
        default_factory=lambda: dict(DEFAULT_REPLACEMENT_LEVEL), hash=False
    )
    sgp_multipliers: Mapping[str, float] = field(
        default_factory=lambda: dict(DEFAULT_SGP_MULTIPLIERS), hash=False
    )
    rate_baselines: Mapping[str, float] = field(
        default_factory=lambda: dict(RATE_STAT_BASELINES), hash=False
    )
    team_plate_appearances: float = TEAM_PLATE_APPEARANCES
    team_innings: float = TEAM_INNINGS

    def __post_init__(self):
        # Avoid circular import (stats.py builds on PlayerStats)
        from .stats import COUNTING_CATEGORIES, RATE_CATEGORIES

        object.__setattr__(self, "hitting_categories", _categories(self.hitting_categories))
        object.__setattr__(self, "pitching_categories", _categories(self.pitching_categories))
        object.__setattr__(
            self,
            "slot_eligibility",
            MappingProxyType({k: frozenset(v) for k, v in self.slot_eligibility.items()}),
        )
        # Read-only tables; they are left out of the hash
        for table_name in [
            "position_slots",
            "replacement_level",
            "sgp_multipliers",
            "rate_baselines",
        ]:
            table = MappingProxyType(dict(getattr(self, table_name)))
            object.__setattr__(self, table_name, table)

        known = set(COUNTING_CATEGORIES) | set(RATE_CATEGORIES)
        names = [c.name for c in self.all_categories]
        unknown = [n for n in names if n not in known]
        if unknown:
            raise ValueError(f"Unknown scoring categories: {unknown}")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate scoring categories: {names}")
        if self.total_budget <= 0:
            raise ValueError(f"total_budget must be positive, got {self.total_budget}")
        if self.team_plate_appearances <= 0 or self.team_innings <= 0:
            raise ValueError("Team playing-time constants must be positive")
        if self.bench_slots < 0:
            raise ValueError(f"bench_slots must be >= 0, got {self.bench_slots}")
        for table_name in ["position_slots", "replacement_level"]:
            table = getattr(self, table_name)
            bad = {k: v for k, v in table.items() if v < 0}
            if bad:
                raise ValueError(f"{table_name} values must be >= 0, got {bad}")

    @classmethod
    def default(cls) -> "LeagueSettings":
        return cls()

    @classmethod
    def from_dict(cls, overrides: dict) -> "LeagueSettings":
        """
        Overlay a partial settings mapping onto the shared defaults.

        Mapping-valued tables (sgp_multipliers, replacement_level, ...) are
        merged key by key so a league can override a single multiplier.
        Category lists and position_slots replace the defaults wholesale.
        """
        base = cls()
        valid = {f.name for f in fields(cls)}
        unknown = set(overrides) - valid
        if unknown:
            raise ValueError(f"Unknown league settings: {sorted(unknown)}")

        merged = {}
        for key, value in overrides.items():
            if key in ("sgp_multipliers", "replacement_level", "rate_baselines", "slot_eligibility"):
                merged[key] = {**getattr(base, key), **value}
            else:
                merged[key] = value
        return replace(base, **merged)

    @property
    def all_categories(self) -> tuple[CategoryConfig, ...]:
        return self.hitting_categories + self.pitching_categories

    @property
    def hitting_category_names(self) -> list[str]:
        return [c.name for c in self.hitting_categories]

    @property
    def pitching_category_names(self) -> list[str]:
        return [c.name for c in self.pitching_categories]

    def category(self, name: str) -> CategoryConfig | None:
        for cat in self.all_categories:
            if cat.name == name:
                return cat
        return None

    def category_weight(self, name: str) -> float:
        cat = self.category(name)
        return cat.weight if cat is not None else 1.0

    def is_inverse(self, name: str) -> bool:
        cat = self.category(name)
        return cat.inverse if cat is not None else False

    @property
    def total_category_weight(self) -> float:
        return sum(c.weight for c in self.all_categories)


# === TEAMS AND STANDINGS ===


@dataclass(frozen=True)
class CategoryStanding:
    category: str
    value: float | None  # None = rate stat undefined for this roster
    rank: int
    points: int
    weighted_points: float


@dataclass(frozen=True)
class FantasyTeam:
    """
    A fantasy team and its roster.

    category_standings, total_points and rank are derived by the standings
    simulator (standings.apply_standings); they are never set by hand.
    """

    id: int
    name: str
    roster: tuple[Player, ...] = ()
    owner: str = ""
    total_budget: float = DEFAULT_TOTAL_BUDGET
    spent: float = 0.0
    category_standings: tuple[CategoryStanding, ...] = ()
    total_points: float = 0.0
    rank: int = 0

    def __post_init__(self):
        object.__setattr__(self, "roster", tuple(self.roster))

    @property
    def remaining_budget(self) -> float:
        return self.total_budget - self.spent

    @property
    def keepers(self) -> list[Player]:
        return [p for p in self.roster if p.contract is not None and p.contract.is_keeper]

    @property
    def hitters(self) -> list[Player]:
        return [p for p in self.roster if p.is_hitter]

    @property
    def pitchers(self) -> list[Player]:
        return [p for p in self.roster if p.is_pitcher]

    def player_ids(self) -> set[int]:
        return {p.id for p in self.roster}


# === TRADES ===


@dataclass(frozen=True)
class TradeProposal:
    team_a_id: int
    team_b_id: int
    team_a_gives: tuple[int, ...]
    team_b_gives: tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "team_a_gives", tuple(self.team_a_gives))
        object.__setattr__(self, "team_b_gives", tuple(self.team_b_gives))


@dataclass(frozen=True)
class CategoryImpact:
    category: str
    before: float | None
    after: float | None
    change: float | None
    rank_before: int
    rank_after: int
    rank_change: int  # positive = improved


@dataclass(frozen=True)
class TradeSide:
    team_id: int
    team_name: str
    players_out: tuple[Player, ...]
    players_in: tuple[Player, ...]
    salary_out: float
    salary_in: float
    value_out: float
    value_in: float
    category_impacts: tuple[CategoryImpact, ...]


@dataclass(frozen=True)
class RosterFitResult:
    score: int  # 0-100
    positions_filled: tuple[str, ...]
    positions_lost: tuple[str, ...]
    multi_eligibility_bonus: float
    unfilled_slots: tuple[str, ...]
    notes: tuple[str, ...]
    positional_need_score: float = 0.0
    slot_coverage_score: float = 0.0
    bench_score: float = 0.0


@dataclass(frozen=True)
class TradeAnalysis:
    side_a: TradeSide
    side_b: TradeSide
    value_difference: float  # positive = side A gains value
    fairness_score: float  # 0-100, 50 = perfectly fair
    category_summary: MappingProxyType
    roster_fit_a: RosterFitResult
    roster_fit_b: RosterFitResult
    warnings: tuple[str, ...]
    recommendation: str
