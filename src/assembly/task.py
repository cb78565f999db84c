"""
Task model: a schedulable unit of work on the assembly line.

A Task knows its duration, its predecessors and the station it currently
sits on. The station link is a non-owning back-reference; tasks are owned
by the Line registry. Callers go through ``Station.assign_task`` so that the
station list and the back-reference stay consistent.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.assembly.errors import AlreadyAssignedError, NotAssignedError

if TYPE_CHECKING:
    from src.assembly.station import Station


class Task:
    """A physical task performed at one station of the line.

    Attributes:
        id: Unique identifier within a line.
    """

    def __init__(self, task_id: int, duration: float) -> None:
        if not math.isfinite(duration):
            raise ValueError(f"Task {task_id} has non-finite duration {duration}")
        if duration < 0:
            raise ValueError(f"Task {task_id} has negative duration {duration}")

        self.id = task_id
        self._duration = float(duration)
        self._predecessors: dict[int, Task] = {}
        self._assignment: Station | None = None

    def __repr__(self) -> str:
        station = self._assignment.id if self._assignment is not None else None
        return f"Task(id={self.id}, duration={self._duration}, station={station})"

    @property
    def duration(self) -> float:
        """Completion time of the task."""
        return self._duration

    # ── Precedence ───────────────────────────────────────────────────

    def predecessor(self, task_id: int) -> Task | None:
        """Return the predecessor with the given id, or None."""
        return self._predecessors.get(task_id)

    @property
    def predecessors(self) -> list[Task]:
        """Predecessor tasks sorted by ascending id."""
        return [self._predecessors[k] for k in sorted(self._predecessors)]

    @property
    def predecessor_ids(self) -> list[int]:
        return sorted(self._predecessors)

    def add_predecessor(self, task: Task) -> None:
        """Add a predecessor. Adding the same id twice is a no-op."""
        if task.id not in self._predecessors:
            self._predecessors[task.id] = task

    # ── Assignment ───────────────────────────────────────────────────

    @property
    def is_assigned(self) -> bool:
        return self._assignment is not None

    @property
    def assignment(self) -> Station | None:
        """The station this task currently sits on."""
        return self._assignment

    def assign(self, station: Station) -> None:
        """Record the station back-reference.

        Raises:
            AlreadyAssignedError: If the task already has a station.
        """
        if self._assignment is not None:
            raise AlreadyAssignedError(
                f"task {self.id} already assigned to station {self._assignment.id}"
            )
        self._assignment = station

    def withdraw(self) -> None:
        """Clear the station back-reference.

        Raises:
            NotAssignedError: If the task has no station.
        """
        if self._assignment is None:
            raise NotAssignedError(f"task {self.id} not currently assigned to a station")
        self._assignment = None
