"""Tests for pre-balance validation and line measurements.

Run with: pytest tests/test_validation_metrics.py -v
"""

import logging
import math

import pytest

from src.analysis.metrics import (
    StationSummary,
    compute_line_metrics,
    efficiency,
    format_report,
    smoothness_index,
)
from src.assembly.constraints import default_constraints
from src.assembly.errors import InfeasibleLineError
from src.assembly.line import Line
from src.assembly.station import Station
from src.assembly.task import Task
from src.assembly.validation import validate_line
from src.balancing.heuristics import longest_duration


def _line(durations: list[float], n_stations: int, name: str = "test") -> Line:
    line = Line(name)
    line.add_tasks(Task(i, d) for i, d in enumerate(durations, start=1))
    line.add_stations(Station(i) for i in range(1, n_stations + 1))
    return line


@pytest.fixture
def balanced_line() -> Line:
    """Three 5s on three stations at cycle 10, balanced sequentially."""
    line = _line([5, 5, 5], n_stations=3, name="scenario")
    line.add_constraints(default_constraints(10.0))
    line.balance_by_station_id(longest_duration)
    return line


class TestValidateLine:
    """Pacing adjustment and global capacity checks."""

    def test_feasible_line_keeps_cycle_time(self):
        assert validate_line(_line([4, 6], n_stations=2), 10.0) == 10.0

    def test_global_capacity_exceeded(self):
        """31 units of work on 3 stations at cycle 10 (capacity 30) is rejected."""
        line = _line([10, 10, 6, 5], n_stations=3)
        assert line.task_time() == 31
        with pytest.raises(InfeasibleLineError):
            validate_line(line, 10.0)

    def test_capacity_exactly_met(self):
        assert validate_line(_line([10, 10, 10], n_stations=3), 10.0) == 10.0

    def test_long_task_rejected_without_pacing_adjustment(self):
        with pytest.raises(InfeasibleLineError):
            validate_line(_line([15], n_stations=2), 10.0, adjust_pacing=False)

    def test_long_task_raises_cycle_time(self, caplog):
        line = _line([15, 3], n_stations=2)
        with caplog.at_level(logging.WARNING, logger="src.assembly.validation"):
            effective = validate_line(line, 10.0)

        assert effective == 15.0
        assert any("bumped" in r.getMessage() for r in caplog.records)

        line.add_constraints(default_constraints(effective))
        line.balance_by_station_id(longest_duration)
        assert line.free_tasks == []
        assert line.station(1).task_ids == [1]

    def test_long_task_stuck_without_adjustment(self):
        """At the requested cycle time the long task can never be placed."""
        line = _line([15, 3], n_stations=2)
        line.add_constraints(default_constraints(10.0))
        line.balance_by_station_id(longest_duration)
        assert [t.id for t in line.free_tasks] == [1]

    def test_cycle_time_must_be_positive(self):
        with pytest.raises(ValueError):
            validate_line(_line([1], n_stations=1), 0.0)

    @pytest.mark.parametrize("cycle_time", [float("nan"), float("inf")])
    def test_cycle_time_must_be_finite(self, cycle_time):
        with pytest.raises(ValueError):
            validate_line(_line([1], n_stations=1), cycle_time)

    def test_cycle_is_warned_not_fatal(self, caplog):
        """A two-task cycle passes validation with a warning; both tasks stay free."""
        line = _line([1, 1], n_stations=2)
        line.task(1).add_predecessor(line.task(2))
        line.task(2).add_predecessor(line.task(1))
        with caplog.at_level(logging.WARNING, logger="src.assembly.validation"):
            assert validate_line(line, 10.0) == 10.0

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("Precedence cycle" in r.getMessage() for r in warnings)

        line.add_constraints(default_constraints(10.0))
        line.balance_by_station_id(longest_duration)
        assert [t.id for t in line.free_tasks] == [1, 2]
        assert line.n_active_stations == 0


class TestLineMetrics:
    """Measurements read from a balanced line."""

    def test_scenario_metrics(self, balanced_line):
        m = compute_line_metrics(balanced_line, 10.0)
        assert m.line_name == "scenario"
        assert m.total_task_time == pytest.approx(15.0)
        assert m.n_active_stations == 2
        assert m.theoretical_min_stations == 2
        assert m.efficiency_pct == pytest.approx(75.0)
        assert m.smoothness_index == pytest.approx(5.0)
        assert m.free_task_ids == []
        assert m.stations == [
            StationSummary(id=1, task_ids=[1, 2], time=10.0),
            StationSummary(id=2, task_ids=[3], time=5.0),
        ]
        assert m.task_vector == [1, 1, 2]

    def test_smoothness_only_counts_active_stations(self, balanced_line):
        # station 3 is inactive and would add 10² if counted
        assert smoothness_index(balanced_line, 10.0) == pytest.approx(5.0)
        assert smoothness_index(balanced_line, 12.0) == pytest.approx(math.sqrt(2**2 + 7**2))

    def test_no_active_stations(self):
        line = _line([4], n_stations=1)
        assert efficiency(line, 10.0) == 0.0
        assert smoothness_index(line, 10.0) == 0.0
        m = compute_line_metrics(line, 10.0)
        assert m.free_task_ids == [1]
        assert m.stations == []
        assert m.task_vector == []

    def test_time_sums_match(self, balanced_line):
        m = compute_line_metrics(balanced_line, 10.0)
        assigned = sum(t.duration for t in balanced_line.assigned_tasks)
        assert sum(s.time for s in m.stations) == pytest.approx(assigned)


class TestFormatReport:
    """Plain-text report layout."""

    def test_report(self, balanced_line):
        report = format_report(compute_line_metrics(balanced_line, 10.0))
        assert report.splitlines() == [
            "scenario",
            "cycle_time=10.00",
            "theoretical_min=2",
            "measured_min=2",
            "line_efficiency=75.0%",
            "smoothness_index=5.0",
            "free_tasks=",
            "Station 1:\tTaskTime 10.00\tTasks 1 2 ",
            "Station 2:\tTaskTime 5.00\tTasks 3 ",
            "1 1 2 ",
        ]

    def test_station_lines_match_station_str(self, balanced_line):
        report = format_report(compute_line_metrics(balanced_line, 10.0))
        for station in balanced_line.active_stations:
            assert str(station) in report.splitlines()

    def test_free_tasks_listed(self):
        line = _line([15, 5], n_stations=2, name="stuck")
        line.add_constraints(default_constraints(10.0))
        line.balance_by_station_id(longest_duration)
        report = format_report(compute_line_metrics(line, 10.0))
        assert "free_tasks=1 " in report.splitlines()
