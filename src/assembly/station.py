"""
Station model: an ordered bucket of tasks on the assembly line.

Stations are ordered by id. Each station records its tasks in the order
they were accepted and carries an explicit ``active`` flag. Activation is a
decision taken by the balancing algorithm, not a property derived from
occupancy: the shortest-station algorithm opens stations before they
receive any work.

A simpler model that treats "active" as "holds at least one task" works
with the sequential algorithm only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.assembly.errors import DuplicateTaskError, LineBalancingError, TaskNotFoundError

if TYPE_CHECKING:
    from src.assembly.task import Task


class Station:
    """A place on the line where tasks are performed.

    Attributes:
        id: Unique identifier; defines station order.
    """

    def __init__(self, station_id: int) -> None:
        self.id = station_id
        self._tasks: list[Task] = []
        self._active = False

    def __repr__(self) -> str:
        return f"Station(id={self.id}, tasks={self.task_ids}, active={self._active})"

    def __str__(self) -> str:
        tasks = "".join(f"{task_id} " for task_id in self.task_ids)
        return f"Station {self.id}:\tTaskTime {self.time():.2f}\tTasks {tasks}"

    # ── Activation ───────────────────────────────────────────────────

    @property
    def active(self) -> bool:
        """Whether the station is in use."""
        return self._active

    def activate(self) -> None:
        self._active = True

    def disable(self) -> None:
        self._active = False

    # ── Task access ──────────────────────────────────────────────────

    def task(self, task_id: int) -> Task | None:
        """Return the assigned task with the given id, or None."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    @property
    def tasks(self) -> list[Task]:
        """Assigned tasks in the order they were accepted."""
        return list(self._tasks)

    @property
    def task_ids(self) -> list[int]:
        return [task.id for task in self._tasks]

    @property
    def n_tasks(self) -> int:
        return len(self._tasks)

    # ── Assignment ───────────────────────────────────────────────────

    def assign_task(self, task: Task) -> None:
        """Append a task and set its back-reference.

        If the task is already assigned elsewhere the append is rolled back,
        so no half-applied assignment is ever visible.

        Raises:
            DuplicateTaskError: If this station already holds the task id.
            AlreadyAssignedError: If the task sits on another station.
        """
        if self.task(task.id) is not None:
            raise DuplicateTaskError(f"station {self.id} already assigned task {task.id}")

        self._tasks.append(task)
        try:
            task.assign(self)
        except LineBalancingError:
            self._tasks.pop()
            raise

    def withdraw_task(self, task_id: int) -> None:
        """Remove a task from the station and clear its back-reference.

        Raises:
            TaskNotFoundError: If the station does not hold the task id.
        """
        task = self.task(task_id)
        if task is None:
            raise TaskNotFoundError(f"station {self.id} has no task {task_id}")

        task.withdraw()
        self._tasks.remove(task)

    def withdraw_all(self) -> None:
        """Withdraw every task.

        The station always ends up empty with every back-reference cleared.
        If an individual withdrawal fails, the first failure is re-raised
        after the rest have been processed.
        """
        first_error: LineBalancingError | None = None
        for task in self._tasks:
            try:
                task.withdraw()
            except LineBalancingError as exc:
                if first_error is None:
                    first_error = exc
        self._tasks = []

        if first_error is not None:
            raise first_error

    # ── Time ─────────────────────────────────────────────────────────

    def time(self) -> float:
        """Station time: total duration of the assigned tasks."""
        return sum(task.duration for task in self._tasks)

    def idle_time(self, cycle_time: float) -> float:
        """Absolute difference between the cycle time and the station time."""
        return abs(cycle_time - self.time())
