"""
Tests for configuration loading and layered lookups.
"""

import json

import pytest


def test_config_constants_loaded():
    """Module-level constants come from the packaged config.json."""
    from fantasy_trade.config import (
        BASELINE_LEAGUE_SIZE,
        DEFAULT_SGP_MULTIPLIERS,
        KEEPER_VALUE_DECAY,
        MIN_AUCTION_VALUE,
        MULTI_ELIGIBILITY_BONUS,
        SALARY_GAP_WARNING,
        TEAM_INNINGS,
        TEAM_PLATE_APPEARANCES,
        VALUE_GAP_WARNING,
    )

    assert TEAM_PLATE_APPEARANCES == 6200
    assert TEAM_INNINGS == 1200
    assert MIN_AUCTION_VALUE == 1
    assert BASELINE_LEAGUE_SIZE == 12
    assert KEEPER_VALUE_DECAY == 0.95
    assert VALUE_GAP_WARNING == 20
    assert SALARY_GAP_WARNING == 30
    assert MULTI_ELIGIBILITY_BONUS == {2: 3, 3: 5, 4: 8}
    assert DEFAULT_SGP_MULTIPLIERS["HR"] == 9


def test_layered_get_first_layer_wins():
    """The first layer defining the key wins; None layers are skipped."""
    from fantasy_trade.config import layered_get

    league = {"HR": 10.0}
    shared = {"HR": 9.0, "R": 19.2}

    assert layered_get("HR", league, shared, default=1.0) == 10.0
    assert layered_get("R", league, shared, default=1.0) == 19.2
    assert layered_get("R", None, shared) == 19.2
    assert layered_get("XBH", league, shared, default=1.0) == 1.0


def test_layered_get_missing_without_default():
    """No layer and no default raises KeyError."""
    from fantasy_trade.config import layered_get

    with pytest.raises(KeyError):
        layered_get("XBH", {"HR": 1}, None)


def test_load_config_validates(tmp_path):
    """A config missing a section fails with an assertion message."""
    from fantasy_trade.config import load_config

    bad = tmp_path / "config.json"
    bad.write_text(json.dumps({"league": {"total_budget": 260}}))

    with pytest.raises(AssertionError, match="sgp"):
        load_config(bad)

    with pytest.raises(AssertionError, match="Config file not found"):
        load_config(tmp_path / "missing.json")


def test_setup_logging_is_idempotent(tmp_path):
    """Console plus rotating file handler; a second call adds nothing."""
    import logging
    import logging.handlers

    from fantasy_trade.logging_config import setup_logging

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        setup_logging("DEBUG", log_file=tmp_path / "logs" / "trade.log")

        assert root.level == logging.DEBUG
        assert any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers
        )
        assert (tmp_path / "logs").is_dir()

        n_handlers = len(root.handlers)
        setup_logging("INFO")
        assert len(root.handlers) == n_handlers
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
