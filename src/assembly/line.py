"""
Assembly line aggregate and the two greedy balancing algorithms.

The Line owns the task and station registries and the active constraint
set. Balancing repeatedly asks "which free tasks may legally go on this
station now?" and lets a heuristic pick one of them.

Determinism: every traversal of tasks, stations and candidate sets is
sorted by ascending id. Registries are plain dicts and are never iterated
directly by the algorithms.

Algorithms
──────────
  station_id        Sequential first-fit: fill station 1 until nothing fits,
                    then station 2, and so on.
  shortest_station  Round-based: always feed the active station with the
                    least accumulated time; open one more station only when
                    a full round makes no progress.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from src.assembly.constraints import Constraint
from src.assembly.errors import (
    BalanceStalledError,
    ConstraintNotFoundError,
    DuplicateRegistrationError,
)

if TYPE_CHECKING:
    from src.assembly.station import Station
    from src.assembly.task import Task
    from src.balancing.heuristics import Heuristic

logger = logging.getLogger(__name__)

ALGORITHMS = ("station_id", "shortest_station")


class Line:
    """An assembly line with stations, tasks and assignment constraints.

    Not thread-safe: one caller drives a balance run to completion.
    Independent Line instances share no state.

    Attributes:
        name: Identifying label.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._tasks: dict[int, Task] = {}
        self._stations: dict[int, Station] = {}
        self._constraints: list[Constraint] = []

    def __repr__(self) -> str:
        return (
            f"Line(name={self.name!r}, tasks={len(self._tasks)}, "
            f"stations={len(self._stations)}, constraints={len(self._constraints)})"
        )

    # ── Constraint management ────────────────────────────────────────

    @property
    def constraints(self) -> list[Constraint]:
        return list(self._constraints)

    def add_constraint(self, constraint: Constraint) -> None:
        self._constraints.append(constraint)

    def add_constraints(self, constraints: Iterable[Constraint]) -> None:
        self._constraints.extend(constraints)

    def replace_constraint(self, constraint: Constraint) -> None:
        """Replace the first constraint of the same kind.

        Raises:
            ConstraintNotFoundError: If no constraint of that kind is present.
        """
        for i, existing in enumerate(self._constraints):
            if existing.kind == constraint.kind:
                self._constraints[i] = constraint
                return
        raise ConstraintNotFoundError(
            f"no existing constraint of kind {constraint.kind.name} found to replace"
        )

    def remove_constraints(self) -> None:
        """Clear the constraint list."""
        self._constraints = []

    # ── Station registry ─────────────────────────────────────────────

    def station(self, station_id: int) -> Station | None:
        return self._stations.get(station_id)

    @property
    def stations(self) -> list[Station]:
        """All stations sorted by id."""
        return [self._stations[k] for k in sorted(self._stations)]

    def add_station(self, station: Station) -> None:
        """Register a station.

        Raises:
            DuplicateRegistrationError: If the id is already registered.
        """
        if station.id in self._stations:
            raise DuplicateRegistrationError(f"line already has station {station.id}")
        self._stations[station.id] = station

    def add_stations(self, stations: Iterable[Station]) -> None:
        for station in stations:
            self.add_station(station)

    @property
    def active_stations(self) -> list[Station]:
        """Active stations sorted by id."""
        return [station for station in self.stations if station.active]

    @property
    def n_active_stations(self) -> int:
        return sum(1 for station in self._stations.values() if station.active)

    # ── Task registry ────────────────────────────────────────────────

    def task(self, task_id: int) -> Task | None:
        return self._tasks.get(task_id)

    @property
    def tasks(self) -> list[Task]:
        """All tasks sorted by id."""
        return [self._tasks[k] for k in sorted(self._tasks)]

    def add_task(self, task: Task) -> None:
        """Register a task.

        Raises:
            DuplicateRegistrationError: If the id is already registered.
        """
        if task.id in self._tasks:
            raise DuplicateRegistrationError(f"line already has task {task.id}")
        self._tasks[task.id] = task

    def add_tasks(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            self.add_task(task)

    @property
    def free_tasks(self) -> list[Task]:
        """Tasks without a station, sorted by id."""
        return [task for task in self.tasks if not task.is_assigned]

    @property
    def assigned_tasks(self) -> list[Task]:
        """Tasks with a station, sorted by id."""
        return [task for task in self.tasks if task.is_assigned]

    # ── Aggregates ───────────────────────────────────────────────────

    def task_time(self) -> float:
        """Total duration over all tasks on the line."""
        return sum(task.duration for task in self.tasks)

    def station_time(self) -> float:
        """Total station time over all stations on the line."""
        return sum(station.time() for station in self.stations)

    def unassign_tasks(self) -> None:
        """Withdraw every task from every station."""
        for station in self.stations:
            station.withdraw_all()

    def reset(self) -> None:
        """Withdraw every task and disable every station."""
        self.unassign_tasks()
        for station in self.stations:
            station.disable()

    # ── Validity ─────────────────────────────────────────────────────

    def valid_assignment(self, task_id: int, station_id: int) -> bool:
        """Check a task/station pair against every constraint on the line.

        Unknown ids are never valid.
        """
        task = self.task(task_id)
        station = self.station(station_id)
        if task is None or station is None:
            return False
        return self._satisfies(task, station)

    def valid_assignments(self, station_id: int) -> list[Task]:
        """All tasks that may go on the station now, sorted by id."""
        station = self.station(station_id)
        if station is None:
            return []
        return [task for task in self.tasks if self._satisfies(task, station)]

    def _satisfies(self, task: Task, station: Station) -> bool:
        return all(constraint.valid(task, station) for constraint in self._constraints)

    # ── Balancing ────────────────────────────────────────────────────

    def balance(self, heuristic: Heuristic, algorithm: str = "station_id") -> None:
        """Run the named balancing algorithm.

        Raises:
            ValueError: If the algorithm name is unknown.
        """
        if algorithm == "station_id":
            self.balance_by_station_id(heuristic)
        elif algorithm == "shortest_station":
            self.balance_by_shortest_station(heuristic)
        else:
            raise ValueError(f"Unknown balancing algorithm {algorithm!r}; expected one of {ALGORITHMS}")

    def balance_by_station_id(self, heuristic: Heuristic) -> None:
        """Fill stations one at a time in ascending id order.

        Each station takes the heuristic's pick from its valid candidates
        until none remain, and is activated if it received any task. Tasks
        that fit nowhere stay free; that is not an error here.
        """
        for station in self.stations:
            candidates = self.valid_assignments(station.id)
            while candidates:
                best = heuristic(candidates)
                station.assign_task(best)
                logger.debug("Assigned task %d to station %d", best.id, station.id)
                candidates = self.valid_assignments(station.id)

            if station.n_tasks > 0 and not station.active:
                station.activate()
                logger.debug("Activated station %d (time %.2f)", station.id, station.time())

    def balance_by_shortest_station(self, heuristic: Heuristic) -> None:
        """Feed the least-loaded active station, opening stations as needed.

        A round repeatedly picks the non-excluded active station with the
        smallest time (ties go to the lower id). A station with no
        candidates is excluded until the round ends. When a round ends
        without any assignment, the inactive station with the lowest id is
        activated. If every station is already active, the run stops.

        Correctness assumes the caller validated the line beforehand (see
        ``validate_line``).

        Raises:
            BalanceStalledError: If free tasks remain, every station is
                active and a full round placed nothing.
        """
        rounds = 0
        while True:
            rounds += 1
            progress = self._shortest_station_round(heuristic)
            logger.debug("Round %d placed %d task(s)", rounds, progress)

            free = self.free_tasks
            if not free:
                return
            if progress:
                continue

            inactive = [station for station in self.stations if not station.active]
            if not inactive:
                raise BalanceStalledError([task.id for task in free])

            inactive[0].activate()
            logger.debug("Activated station %d", inactive[0].id)

    def _shortest_station_round(self, heuristic: Heuristic) -> int:
        """Run one round over the active stations. Returns the number of assignments."""
        excluded: set[int] = set()
        assigned = 0
        while True:
            open_stations = [s for s in self.active_stations if s.id not in excluded]
            if not open_stations:
                return assigned

            # min() keeps the first of equal keys, i.e. the lowest id
            station = min(open_stations, key=lambda s: s.time())
            candidates = self.valid_assignments(station.id)
            if not candidates:
                excluded.add(station.id)
                continue

            best = heuristic(candidates)
            station.assign_task(best)
            assigned += 1
            logger.debug("Assigned task %d to station %d", best.id, station.id)
