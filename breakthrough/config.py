"""
Central configuration for search tunables, the benchmark and logging.
Pydantic models give type-safe settings that can come from the environment
or a JSON file.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

ConfigDict = Dict[str, Any]


class EngineSettings(BaseModel):
    """Search strategy configuration settings."""

    board_size: int = Field(default=8, ge=2, le=26, description="Default board size")
    minimax_move_budget: int = Field(default=10_000, ge=0, description="Move applications per minimax decision")
    minimax_max_depth: int = Field(default=100, ge=1, description="Iterative deepening depth cap for minimax")
    pvs_max_depth: int = Field(default=4, ge=0, le=12, description="Iterative deepening depth for the PVS searcher")
    mcts_move_budget: int = Field(default=1000, ge=0, description="Simulated move applications per MCTS decision")
    mcts_exploration: float = Field(default=2.0, gt=0, description="UCB1 exploration constant")
    default_strategy: str = Field(default="mine", description="Strategy used when a request names none")
    seed: Optional[int] = Field(default=None, description="Seed for strategy random generators")

    @field_validator('default_strategy', mode='before')
    @classmethod
    def validate_strategy_name(cls, v):
        return str(v).strip().lower()


class BenchmarkSettings(BaseModel):
    """Strategy benchmark configuration."""

    total_games: int = Field(default=100, ge=1, description="Total number of games across all pairings")
    min_opening_moves: int = Field(default=4, ge=0, description="Minimum random opening plies")
    max_opening_moves: int = Field(default=12, ge=0, description="Maximum random opening plies")
    max_moves: int = Field(default=200, ge=1, description="Ply cap per game after the opening")
    workers: int = Field(default=1, ge=1, description="Parallel worker processes")
    results_dir: str = Field(default="logs", description="Directory for saved benchmark results")

    @model_validator(mode='after')
    def validate_opening_range(self) -> 'BenchmarkSettings':
        if self.min_opening_moves > self.max_opening_moves:
            raise ValueError("min_opening_moves must not exceed max_opening_moves")
        return self


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="breakthrough.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class BreakthroughConfig(BaseModel):
    """Main configuration model."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    benchmark: BenchmarkSettings = Field(default_factory=BenchmarkSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'BreakthroughConfig':
        """Create configuration from environment variables."""
        seed = os.getenv('BREAKTHROUGH_SEED')
        return cls(
            engine=EngineSettings(
                board_size=int(os.getenv('BREAKTHROUGH_BOARD_SIZE', '8')),
                minimax_move_budget=int(os.getenv('BREAKTHROUGH_MINIMAX_BUDGET', '10000')),
                pvs_max_depth=int(os.getenv('BREAKTHROUGH_PVS_DEPTH', '4')),
                mcts_move_budget=int(os.getenv('BREAKTHROUGH_MCTS_BUDGET', '1000')),
                default_strategy=os.getenv('BREAKTHROUGH_STRATEGY', 'mine'),
                seed=int(seed) if seed else None,
            ),
            benchmark=BenchmarkSettings(
                total_games=int(os.getenv('BREAKTHROUGH_BENCH_GAMES', '100')),
                workers=int(os.getenv('BREAKTHROUGH_BENCH_WORKERS', '1')),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('BREAKTHROUGH_LOG_LEVEL', 'INFO'),
                log_to_file=os.getenv('BREAKTHROUGH_LOG_FILE', 'false').lower() == 'true',
            ),
        )

    def to_dict(self) -> ConfigDict:
        return self.model_dump()

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath
        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'BreakthroughConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(
            engine=EngineSettings(**data.get('engine', {})),
            benchmark=BenchmarkSettings(**data.get('benchmark', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )


# Global configuration instance
_config: Optional[BreakthroughConfig] = None


def get_config() -> BreakthroughConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = BreakthroughConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> BreakthroughConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = BreakthroughConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_engine_settings() -> EngineSettings:
    return get_config().engine


def get_benchmark_settings() -> BenchmarkSettings:
    return get_config().benchmark


def get_logging_settings() -> LoggingSettings:
    return get_config().logging


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure root logging once, controlled by ``LoggingSettings``."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = settings or get_logging_settings()
    level: int = getattr(logging, settings.log_level, logging.INFO)
    handlers = [logging.StreamHandler()]
    if settings.log_to_file:
        handlers.append(logging.FileHandler(settings.log_file_path))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
