"""
Line measurements and the text report.

After balancing, the reporter reads the line's final task/station state:

KPIs:
- Theoretical minimum stations: ceil(total task time / cycle time)
- Line efficiency: total task time / (cycle time × active stations) × 100
- Smoothness index: sqrt(Σ (cycle time − station time)²) over active stations
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from src.assembly.line import Line


@dataclass
class StationSummary:
    """An active station with its tasks in assignment order."""

    id: int
    task_ids: list[int]
    time: float


@dataclass
class LineMetrics:
    """Final balancing measurements for one line."""

    line_name: str
    cycle_time: float
    total_task_time: float
    n_active_stations: int
    theoretical_min_stations: int
    efficiency_pct: float
    smoothness_index: float
    free_task_ids: list[int] = field(default_factory=list)
    stations: list[StationSummary] = field(default_factory=list)
    task_vector: list[int] = field(default_factory=list)  # station id per assigned task, task-id order


def efficiency(line: Line, cycle_time: float) -> float:
    """Line efficiency in percent. 0.0 when no station is active."""
    n_active = line.n_active_stations
    if n_active == 0:
        return 0.0
    return line.task_time() / (cycle_time * n_active) * 100


def smoothness_index(line: Line, cycle_time: float) -> float:
    """RMS-style imbalance of active station times against the cycle time."""
    times = np.array([s.time() for s in line.active_stations], dtype=np.float64)
    if times.size == 0:
        return 0.0
    return float(np.sqrt(np.sum((cycle_time - times) ** 2)))


def compute_line_metrics(line: Line, cycle_time: float) -> LineMetrics:
    """Snapshot the measurements of a balanced line.

    Args:
        line: The balanced line.
        cycle_time: Effective cycle time the line was balanced with.
    """
    total = line.task_time()
    return LineMetrics(
        line_name=line.name,
        cycle_time=cycle_time,
        total_task_time=total,
        n_active_stations=line.n_active_stations,
        theoretical_min_stations=math.ceil(total / cycle_time),
        efficiency_pct=efficiency(line, cycle_time),
        smoothness_index=smoothness_index(line, cycle_time),
        free_task_ids=[t.id for t in line.free_tasks],
        stations=[
            StationSummary(id=s.id, task_ids=s.task_ids, time=s.time())
            for s in line.active_stations
        ],
        task_vector=[t.assignment.id for t in line.assigned_tasks],
    )


def format_report(metrics: LineMetrics) -> str:
    """Render the measurements as the plain-text balancing report."""
    out = [
        metrics.line_name,
        f"cycle_time={metrics.cycle_time:.2f}",
        f"theoretical_min={metrics.theoretical_min_stations}",
        f"measured_min={metrics.n_active_stations}",
        f"line_efficiency={metrics.efficiency_pct:.1f}%",
        f"smoothness_index={metrics.smoothness_index:.1f}",
        "free_tasks=" + "".join(f"{tid} " for tid in metrics.free_task_ids),
    ]
    for s in metrics.stations:
        tasks = "".join(f"{tid} " for tid in s.task_ids)
        out.append(f"Station {s.id}:\tTaskTime {s.time:.2f}\tTasks {tasks}")
    out.append("".join(f"{sid} " for sid in metrics.task_vector))
    return "\n".join(out)
