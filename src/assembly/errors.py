"""Typed errors raised by the line-balancing core.

All errors are synchronous and non-retryable. A failure during balancing
aborts the run and leaves the line in its partial-assignment state.
"""

from __future__ import annotations


class LineBalancingError(Exception):
    """Base class for every error raised by this package."""


class DuplicateRegistrationError(LineBalancingError):
    """Raised when a task or station id is already registered on a line."""


class AlreadyAssignedError(LineBalancingError):
    """Raised when assigning a task that already sits on a station."""


class NotAssignedError(LineBalancingError):
    """Raised when withdrawing a task that has no station."""


class DuplicateTaskError(LineBalancingError):
    """Raised when a station already holds a task with the same id."""


class TaskNotFoundError(LineBalancingError):
    """Raised when withdrawing a task id a station does not hold."""


class ConstraintNotFoundError(LineBalancingError):
    """Raised when replacing a constraint kind the line does not carry."""


class ParseError(LineBalancingError):
    """Raised for malformed line-definition input."""

    def __init__(self, message: str, line_no: int | None = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(f"parse: {message}")


class InfeasibleLineError(LineBalancingError):
    """Raised when the line cannot hold its work at the given cycle time."""


class UnknownHeuristicError(LineBalancingError):
    """Raised when a heuristic name has no registered implementation."""


class CyclicPrecedenceError(LineBalancingError):
    """Raised when the predecessor graph contains a cycle."""

    def __init__(self, cycle: list[int]) -> None:
        self.cycle = cycle
        path = " -> ".join(str(task_id) for task_id in cycle + cycle[:1])
        super().__init__(f"cyclic precedence: {path}")


class BalanceStalledError(LineBalancingError):
    """Raised when every station is active and free tasks still cannot be placed."""

    def __init__(self, free_task_ids: list[int]) -> None:
        self.free_task_ids = free_task_ids
        super().__init__(
            f"balancing stalled with all stations active; "
            f"{len(free_task_ids)} free task(s): {free_task_ids}"
        )
