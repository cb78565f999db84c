"""
Line balancing configuration dataclasses and YAML loader.

All run parameters live here as typed, frozen dataclasses.
Load from YAML with `load_config()` or construct directly for tests.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml


@dataclass(frozen=True)
class LineConfig:
    """Target tact of the line."""

    cycle_time: float = 60.0
    adjust_pacing: bool = True  # Raise cycle time to the longest task instead of failing


@dataclass(frozen=True)
class BalancingConfig:
    """Heuristic and algorithm selection."""

    heuristic: str = "longest_duration"
    algorithm: Literal["station_id", "shortest_station"] = "station_id"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging output."""

    level: str = "INFO"


@dataclass(frozen=True)
class BalancerConfig:
    """Top-level configuration aggregating all sub-configs."""

    line: LineConfig = field(default_factory=LineConfig)
    balancing: BalancingConfig = field(default_factory=BalancingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> BalancerConfig:
    """Load a BalancerConfig from a YAML file.

    Args:
        path: Path to a YAML config file. Missing sections use defaults.

    Returns:
        Fully constructed BalancerConfig with all sub-configs.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return BalancerConfig(
        line=LineConfig(**raw.get("line", {})),
        balancing=BalancingConfig(**raw.get("balancing", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
    )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the package root logger once and set its level."""
    logger = logging.getLogger("src")
    logger.setLevel(level.upper())

    # Prevent duplicate handlers if called more than once
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    return logger
