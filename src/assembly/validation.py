"""
Pre-balance validation of a line against a cycle time.

The balancing algorithms assume a feasible problem: no task longer than the
cycle time (a paced line) and enough total station capacity for the total
work. ``validate_line`` checks both before any task is placed and returns
the cycle time balancing should actually use.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from src.assembly.errors import InfeasibleLineError
from src.assembly.precedence import PrecedenceGraph

if TYPE_CHECKING:
    from src.assembly.line import Line

logger = logging.getLogger(__name__)


def validate_line(line: Line, cycle_time: float, adjust_pacing: bool = True) -> float:
    """Validate a line and return the effective cycle time.

    A task longer than the cycle time makes the line unpaced. With
    ``adjust_pacing`` the cycle time is raised to that task's duration and
    a warning is logged; otherwise the line is rejected.

    Args:
        line: Line with its tasks and stations registered.
        cycle_time: Requested cycle time.
        adjust_pacing: Raise the cycle time instead of failing on long tasks.

    Returns:
        The effective cycle time (>= ``cycle_time``).

    Raises:
        ValueError: If ``cycle_time`` is not a positive finite number.
        InfeasibleLineError: If a task exceeds the cycle time and pacing
            adjustment is off, or if total task time exceeds the total
            station capacity.
    """
    if not math.isfinite(cycle_time) or cycle_time <= 0:
        raise ValueError(f"cycle time must be a positive finite number, got {cycle_time}")

    effective = float(cycle_time)
    for task in line.tasks:
        if task.duration <= effective:
            continue
        if not adjust_pacing:
            raise InfeasibleLineError(
                f"task {task.id} takes {task.duration:g} which exceeds cycle time {effective:g}"
            )
        logger.warning(
            "Cycle time is being bumped to task_time (task=%d task_time=%g cycle_time=%g)",
            task.id,
            task.duration,
            effective,
        )
        effective = task.duration

    n_stations = len(line.stations)
    total = line.task_time()
    capacity = n_stations * effective
    if total > capacity:
        raise InfeasibleLineError(
            f"total task time {total:g} exceeds capacity {capacity:g} "
            f"({n_stations} stations x cycle time {effective:g})"
        )

    cycle = PrecedenceGraph.from_tasks(line.tasks).find_cycle()
    if cycle:
        logger.warning("Precedence cycle among tasks %s; they can never be assigned", cycle)

    return effective
