"""
Configuration loading and validation.

Loads the shared league defaults from config.json and exposes them as
module-level constants. League-specific settings are layered on top of these
defaults by LeagueSettings (see models.py) through layered_get().
"""

import json
from collections.abc import Mapping
from pathlib import Path

_CONFIG_PATH = Path(__file__).parent / "config.json"

_MISSING = object()


def load_config(config_path: Path | str | None = None) -> dict:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to config.json file (defaults to the packaged file)

    Returns:
        Dict containing all configuration values

    Raises:
        AssertionError: If the file is missing or the config is invalid
    """
    if config_path is None:
        config_path = _CONFIG_PATH
    else:
        config_path = Path(config_path)

    assert config_path.exists(), f"Config file not found: {config_path}"

    with open(config_path) as f:
        config = json.load(f)

    # Validate required sections
    for section in [
        "league",
        "sgp",
        "auction",
        "keepers",
        "scarcity",
        "roster_fit",
        "trade_engine",
        "projections",
    ]:
        assert section in config, f"Config must have '{section}' section"

    assert config["league"]["total_budget"] > 0, "league.total_budget must be positive"
    assert config["sgp"]["team_plate_appearances"] > 0, (
        "sgp.team_plate_appearances must be positive"
    )
    assert config["sgp"]["team_innings"] > 0, "sgp.team_innings must be positive"
    assert 0 < config["keepers"]["value_decay"] <= 1, (
        "keepers.value_decay must be in (0, 1]"
    )

    fair_low, fair_high = config["trade_engine"]["fair_band"]
    assert fair_low <= 50 <= fair_high, "trade_engine.fair_band must contain 50"

    return config


def layered_get(key: str, *layers: Mapping | None, default=_MISSING):
    """
    Resolve a setting through an ordered chain of lookup layers.

    The first layer that defines `key` wins. Layers that are None are skipped,
    so an unset league override falls through to the shared defaults.

    Example:
        layered_get("HR", settings.sgp_multipliers, DEFAULT_SGP_MULTIPLIERS, default=1.0)

    Raises:
        KeyError: If no layer defines the key and no default is given
    """
    for layer in layers:
        if layer is not None and key in layer:
            return layer[key]
    if default is _MISSING:
        raise KeyError(key)
    return default


# Load config at module level
_CONFIG = load_config()

# Expose config sections
LEAGUE = _CONFIG["league"]
SGP_CONFIG = _CONFIG["sgp"]
AUCTION_CONFIG = _CONFIG["auction"]
KEEPER_CONFIG = _CONFIG["keepers"]
SCARCITY_CONFIG = _CONFIG["scarcity"]
ROSTER_FIT_CONFIG = _CONFIG["roster_fit"]
TRADE_ENGINE_CONFIG = _CONFIG["trade_engine"]
PROJECTIONS_CONFIG = _CONFIG["projections"]

# League defaults
DEFAULT_LEAGUE_NAME = LEAGUE["name"]
DEFAULT_TOTAL_BUDGET = LEAGUE["total_budget"]
DEFAULT_ROSTER_SPOTS = LEAGUE["roster_spots"]
DEFAULT_INITIAL_CONTRACT_YEARS = LEAGUE["initial_contract_years"]
DEFAULT_EXTENSION_COST_PER_YEAR = LEAGUE["extension_cost_per_year"]
DEFAULT_HITTING_CATEGORIES = LEAGUE["hitting_categories"]
DEFAULT_PITCHING_CATEGORIES = LEAGUE["pitching_categories"]
DEFAULT_POSITION_SLOTS = LEAGUE["position_slots"]
SLOT_ELIGIBILITY = {k: frozenset(v) for k, v in LEAGUE["slot_eligibility"].items()}
DEFAULT_BENCH_SLOTS = LEAGUE["bench_slots"]

# SGP constants
DEFAULT_SGP_MULTIPLIERS = SGP_CONFIG["multipliers"]
RATE_STAT_BASELINES = SGP_CONFIG["rate_baselines"]
# 13 hitting slots x ~480 PA and 9 pitching slots x ~135 IP
TEAM_PLATE_APPEARANCES = SGP_CONFIG["team_plate_appearances"]
TEAM_INNINGS = SGP_CONFIG["team_innings"]

# Auction constants
MIN_AUCTION_VALUE = AUCTION_CONFIG["min_value"]
BASELINE_LEAGUE_SIZE = AUCTION_CONFIG["baseline_league_size"]
DEFAULT_REPLACEMENT_LEVEL = AUCTION_CONFIG["replacement_level"]
FALLBACK_REPLACEMENT_DEPTH = 12

# Keeper constants
KEEPER_VALUE_DECAY = KEEPER_CONFIG["value_decay"]
KEEPER_YEARS_FORWARD = KEEPER_CONFIG["years_forward"]

# Scarcity tiers
SCARCE_THRESHOLD = SCARCITY_CONFIG["scarce_threshold"]
DEEP_THRESHOLD = SCARCITY_CONFIG["deep_threshold"]

# Roster fit scoring
POSITIONAL_NEED_POINTS = ROSTER_FIT_CONFIG["positional_need_points"]
MULTI_ELIGIBILITY_POINTS = ROSTER_FIT_CONFIG["multi_eligibility_points"]
SLOT_COVERAGE_POINTS = ROSTER_FIT_CONFIG["slot_coverage_points"]
BENCH_POINTS = ROSTER_FIT_CONFIG["bench_points"]
MULTI_ELIGIBILITY_BONUS = {
    int(k): v for k, v in ROSTER_FIT_CONFIG["multi_eligibility_bonus"].items()
}
STRONG_FIT_SCORE = ROSTER_FIT_CONFIG["strong_fit_score"]

# Trade engine constants
VALUE_GAP_WARNING = TRADE_ENGINE_CONFIG["value_gap_warning"]
SALARY_GAP_WARNING = TRADE_ENGINE_CONFIG["salary_gap_warning"]
FAIR_BAND_LOW, FAIR_BAND_HIGH = TRADE_ENGINE_CONFIG["fair_band"]

# Projection blending
DEFAULT_PROJECTION_WEIGHTS = PROJECTIONS_CONFIG["source_weights"]

# Validation assertions
assert (
    POSITIONAL_NEED_POINTS
    + MULTI_ELIGIBILITY_POINTS
    + SLOT_COVERAGE_POINTS
    + BENCH_POINTS
    == 100
), "Roster fit components must sum to 100"
assert set(DEFAULT_POSITION_SLOTS) <= set(SLOT_ELIGIBILITY), (
    "Every default position slot needs a slot_eligibility entry"
)
