"""Tests for the Line aggregate: registries, constraints and validity queries.

Run with: pytest tests/test_line.py -v
"""

import pytest

from src.assembly.constraints import (
    ConstraintKind,
    OnlyActiveStations,
    PredecessorsStartToStart,
    RestrictedStationTime,
    SingleTaskAssignment,
    default_constraints,
)
from src.assembly.errors import ConstraintNotFoundError, DuplicateRegistrationError
from src.assembly.line import Line
from src.assembly.station import Station
from src.assembly.task import Task


@pytest.fixture
def line() -> Line:
    """Three tasks (2 depends on 1) and two stations, standard constraints at cycle 10."""
    line = Line("fixture")
    t1, t2, t3 = Task(1, 6.0), Task(2, 4.0), Task(3, 5.0)
    t2.add_predecessor(t1)
    line.add_tasks([t3, t1, t2])
    line.add_stations([Station(2), Station(1)])
    line.add_constraints(default_constraints(10.0))
    return line


class TestConstraints:
    """Each constraint variant in isolation."""

    def test_only_active_stations(self):
        task, station = Task(1, 1.0), Station(1)
        c = OnlyActiveStations()
        assert not c.valid(task, station)
        station.activate()
        assert c.valid(task, station)

    def test_single_task_assignment(self):
        task = Task(1, 1.0)
        c = SingleTaskAssignment()
        assert c.valid(task, Station(2))
        Station(1).assign_task(task)
        assert not c.valid(task, Station(2))

    def test_restricted_station_time_is_inclusive(self):
        station = Station(1)
        station.assign_task(Task(1, 6.0))
        c = RestrictedStationTime(capacity=10.0)
        assert c.valid(Task(2, 4.0), station)
        assert not c.valid(Task(3, 4.5), station)

    def test_predecessors_start_to_start(self):
        pred, task = Task(1, 1.0), Task(2, 1.0)
        task.add_predecessor(pred)
        c = PredecessorsStartToStart()
        assert not c.valid(task, Station(2))
        Station(1).assign_task(pred)  # any station counts
        assert c.valid(task, Station(2))

    def test_default_constraints(self):
        kinds = [c.kind for c in default_constraints(10.0)]
        assert kinds == [
            ConstraintKind.SINGLE_TASK_ASSIGNMENT,
            ConstraintKind.RESTRICTED_STATION_TIME,
            ConstraintKind.PREDECESSORS_START_TO_START,
        ]
        gated = default_constraints(10.0, gate_active_stations=True)
        assert gated[-1].kind == ConstraintKind.ONLY_ACTIVE_STATIONS


class TestRegistries:
    """Task and station registration and ordered access."""

    def test_tasks_sorted_by_id(self, line):
        assert [t.id for t in line.tasks] == [1, 2, 3]

    def test_stations_sorted_by_id(self, line):
        assert [s.id for s in line.stations] == [1, 2]

    def test_lookup(self, line):
        assert line.task(2).duration == 4.0
        assert line.task(99) is None
        assert line.station(1).id == 1
        assert line.station(99) is None

    def test_duplicate_task_rejected(self, line):
        with pytest.raises(DuplicateRegistrationError):
            line.add_task(Task(1, 1.0))

    def test_duplicate_station_rejected(self, line):
        with pytest.raises(DuplicateRegistrationError):
            line.add_station(Station(2))

    def test_empty_line(self):
        line = Line("empty")
        assert line.tasks == []
        assert line.stations == []
        assert line.task_time() == 0.0

    def test_free_and_assigned_tasks(self, line):
        line.station(1).assign_task(line.task(3))
        assert [t.id for t in line.free_tasks] == [1, 2]
        assert [t.id for t in line.assigned_tasks] == [3]

    def test_time_totals(self, line):
        line.station(1).assign_task(line.task(1))
        line.station(2).assign_task(line.task(3))
        assert line.task_time() == pytest.approx(15.0)
        assert line.station_time() == pytest.approx(11.0)

    def test_active_stations(self, line):
        line.station(2).activate()
        assert [s.id for s in line.active_stations] == [2]
        assert line.n_active_stations == 1

    def test_reset(self, line):
        line.station(1).assign_task(line.task(1))
        line.station(1).activate()
        line.reset()
        assert line.assigned_tasks == []
        assert line.n_active_stations == 0

    def test_unassign_tasks_keeps_activation(self, line):
        line.station(1).assign_task(line.task(1))
        line.station(1).activate()
        line.unassign_tasks()
        assert line.assigned_tasks == []
        assert line.station(1).active


class TestConstraintManagement:
    """Replacing and clearing the line's constraint set."""

    def test_replace_by_kind(self, line):
        line.replace_constraint(RestrictedStationTime(capacity=20.0))
        capacities = [c.capacity for c in line.constraints if c.kind == ConstraintKind.RESTRICTED_STATION_TIME]
        assert capacities == [20.0]
        assert len(line.constraints) == 3

    def test_replace_missing_kind_fails(self, line):
        with pytest.raises(ConstraintNotFoundError):
            line.replace_constraint(OnlyActiveStations())

    def test_remove_constraints(self, line):
        line.remove_constraints()
        assert line.constraints == []
        # Without constraints everything is valid, even blocked task 2
        assert line.valid_assignment(2, 1)


class TestValidity:
    """Validity queries against the constraint conjunction."""

    def test_unknown_ids_are_invalid(self, line):
        assert not line.valid_assignment(99, 1)
        assert not line.valid_assignment(1, 99)
        assert line.valid_assignments(99) == []

    def test_predecessor_blocks_candidate(self, line):
        assert [t.id for t in line.valid_assignments(1)] == [1, 3]
        line.station(1).assign_task(line.task(1))
        assert [t.id for t in line.valid_assignments(1)] == [2]

    def test_capacity_blocks_candidate(self, line):
        line.station(1).assign_task(line.task(3))
        # station 1 has 5.0; task 1 (6.0) no longer fits
        assert line.valid_assignments(1) == []
        assert [t.id for t in line.valid_assignments(2)] == [1]
