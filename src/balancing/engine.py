"""
Balancing engine: the top-level orchestrator.

Wires together the parser, the line, pre-balance validation, the constraint
set, the heuristic registry and the measurements into a single run.

Usage:
    config = load_config("config/default_line.yaml")
    result = LineBalancer(config).run("data/example.in2")
    print(format_report(result.metrics))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.analysis.metrics import LineMetrics, compute_line_metrics
from src.assembly.config import BalancerConfig
from src.assembly.constraints import default_constraints
from src.assembly.line import Line
from src.assembly.validation import validate_line
from src.balancing.heuristics import get_heuristic
from src.parsing.in2 import load_in2, parse_in2

logger = logging.getLogger(__name__)


@dataclass
class BalanceResult:
    """Outcome of one balancing run."""

    line: Line
    cycle_time: float  # effective, after pacing adjustment
    metrics: LineMetrics
    heuristic: str
    algorithm: str


def balance_line(
    line: Line,
    cycle_time: float,
    heuristic: str = "longest_duration",
    algorithm: str = "station_id",
    adjust_pacing: bool = True,
) -> BalanceResult:
    """Validate, constrain and balance an already built line.

    Any constraints already on the line are replaced by the standard set
    for the effective cycle time.

    Raises:
        InfeasibleLineError: If validation rejects the line.
        UnknownHeuristicError: If the heuristic name is not registered.
        CyclicPrecedenceError: If a successor-weighted heuristic meets a cycle.
        BalanceStalledError: If the shortest-station algorithm cannot place
            the remaining tasks.
    """
    effective = validate_line(line, cycle_time, adjust_pacing=adjust_pacing)
    fn = get_heuristic(heuristic, line.tasks)

    line.remove_constraints()
    line.add_constraints(
        default_constraints(effective, gate_active_stations=algorithm == "shortest_station")
    )
    line.balance(fn, algorithm)

    metrics = compute_line_metrics(line, effective)
    logger.info(
        "Balanced %s: %d task(s) on %d station(s), efficiency %.1f%%, %d free",
        line.name,
        len(line.assigned_tasks),
        metrics.n_active_stations,
        metrics.efficiency_pct,
        len(metrics.free_task_ids),
    )
    return BalanceResult(
        line=line,
        cycle_time=effective,
        metrics=metrics,
        heuristic=heuristic,
        algorithm=algorithm,
    )


def _make_line(name: str, tasks, stations) -> Line:
    line = Line(name)
    line.add_tasks(tasks)
    line.add_stations(stations)
    return line


class LineBalancer:
    """Runs a configured balance over ``.in2`` input.

    Args:
        config: Full balancer configuration.
    """

    def __init__(self, config: BalancerConfig | None = None) -> None:
        self.config = config or BalancerConfig()

    def build_line(self, path: str | Path, name: str | None = None) -> Line:
        """Parse a `.in2` file into a Line named after the file by default."""
        tasks, stations = load_in2(path)
        return _make_line(name or str(path), tasks, stations)

    def build_line_from_text(self, text: str, name: str = "line") -> Line:
        tasks, stations = parse_in2(text)
        return _make_line(name, tasks, stations)

    def run(self, path: str | Path, name: str | None = None) -> BalanceResult:
        """Parse, validate and balance one `.in2` file with the configured settings."""
        return self.balance(self.build_line(path, name))

    def run_text(self, text: str, name: str = "line") -> BalanceResult:
        return self.balance(self.build_line_from_text(text, name))

    def balance(self, line: Line) -> BalanceResult:
        """Validate and balance a built line with the configured settings."""
        return balance_line(
            line,
            self.config.line.cycle_time,
            heuristic=self.config.balancing.heuristic,
            algorithm=self.config.balancing.algorithm,
            adjust_pacing=self.config.line.adjust_pacing,
        )
