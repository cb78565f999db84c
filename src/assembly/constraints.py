"""
Assignment constraints.

A constraint is a side-effect-free predicate ``valid(task, station)``. A
line evaluates its constraint list as a strict conjunction, stopping at the
first failing constraint. Each variant carries a ``ConstraintKind`` tag so a
line can replace a constraint by kind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from src.assembly.station import Station
    from src.assembly.task import Task


class ConstraintKind(Enum):
    """Valid constraint kinds"""

    ONLY_ACTIVE_STATIONS = auto()
    SINGLE_TASK_ASSIGNMENT = auto()
    RESTRICTED_STATION_TIME = auto()
    PREDECESSORS_START_TO_START = auto()


class Constraint(ABC):
    """Predicate deciding whether a task may go on a station right now."""

    kind: ClassVar[ConstraintKind]

    @abstractmethod
    def valid(self, task: Task, station: Station) -> bool:
        """Return True if assigning ``task`` to ``station`` is allowed."""


@dataclass(frozen=True)
class OnlyActiveStations(Constraint):
    """Only stations already opened by the algorithm accept tasks."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.ONLY_ACTIVE_STATIONS

    def valid(self, task: Task, station: Station) -> bool:
        return station.active


@dataclass(frozen=True)
class SingleTaskAssignment(Constraint):
    """A task sits on at most one station."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.SINGLE_TASK_ASSIGNMENT

    def valid(self, task: Task, station: Station) -> bool:
        return not task.is_assigned


@dataclass(frozen=True)
class RestrictedStationTime(Constraint):
    """Station time after the assignment may not exceed ``capacity``.

    Attributes:
        capacity: Maximum station time, normally the cycle time.
    """

    capacity: float
    kind: ClassVar[ConstraintKind] = ConstraintKind.RESTRICTED_STATION_TIME

    def valid(self, task: Task, station: Station) -> bool:
        return task.duration + station.time() <= self.capacity


@dataclass(frozen=True)
class PredecessorsStartToStart(Constraint):
    """Every predecessor must be assigned (to any station) first."""

    kind: ClassVar[ConstraintKind] = ConstraintKind.PREDECESSORS_START_TO_START

    def valid(self, task: Task, station: Station) -> bool:
        return all(pred.is_assigned for pred in task.predecessors)


def default_constraints(cycle_time: float, gate_active_stations: bool = False) -> list[Constraint]:
    """Standard constraint set for balancing at a given cycle time.

    Args:
        cycle_time: Station capacity.
        gate_active_stations: Also require stations to be active. Used by
            the shortest-station algorithm, which opens stations one by one.
    """
    constraints: list[Constraint] = [
        SingleTaskAssignment(),
        RestrictedStationTime(capacity=cycle_time),
        PredecessorsStartToStart(),
    ]
    if gate_active_stations:
        constraints.append(OnlyActiveStations())
    return constraints
