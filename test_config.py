import json

import pytest
from pydantic import ValidationError

from breakthrough.config import (
    BenchmarkSettings,
    BreakthroughConfig,
    EngineSettings,
    LoggingSettings,
    get_config,
    get_engine_settings,
    load_config_from_file,
)


def test_defaults():
    config = BreakthroughConfig()
    assert config.engine.board_size == 8
    assert config.engine.minimax_move_budget == 10_000
    assert config.engine.pvs_max_depth == 4
    assert config.engine.mcts_move_budget == 1000
    assert config.engine.mcts_exploration == 2.0
    assert config.engine.default_strategy == "mine"
    assert config.benchmark.min_opening_moves <= config.benchmark.max_opening_moves
    assert config.logging.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BREAKTHROUGH_PVS_DEPTH", "2")
    monkeypatch.setenv("BREAKTHROUGH_MCTS_BUDGET", "250")
    monkeypatch.setenv("BREAKTHROUGH_STRATEGY", "MCTS")
    monkeypatch.setenv("BREAKTHROUGH_SEED", "17")
    monkeypatch.setenv("BREAKTHROUGH_LOG_LEVEL", "debug")
    config = get_config()
    assert config.engine.pvs_max_depth == 2
    assert config.engine.mcts_move_budget == 250
    assert config.engine.default_strategy == "mcts"
    assert config.engine.seed == 17
    assert config.logging.log_level == "DEBUG"
    assert get_engine_settings() is config.engine


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        LoggingSettings(log_level="LOUD")
    with pytest.raises(ValidationError):
        EngineSettings(pvs_max_depth=-1)
    with pytest.raises(ValidationError):
        EngineSettings(board_size=1)
    with pytest.raises(ValidationError):
        BenchmarkSettings(min_opening_moves=10, max_opening_moves=2)


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "config.json"
    config = BreakthroughConfig(engine=EngineSettings(pvs_max_depth=3, seed=5))
    config.save_to_file(str(path))

    data = json.loads(path.read_text())
    assert data["engine"]["pvs_max_depth"] == 3
    assert data["config_file"] == str(path)

    loaded = load_config_from_file(str(path))
    assert loaded.engine.pvs_max_depth == 3
    assert loaded.engine.seed == 5
    assert get_config() is loaded
