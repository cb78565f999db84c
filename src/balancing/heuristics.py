"""
Task selection heuristics.

A heuristic picks one task out of a non-empty candidate sequence. The
balancing algorithms always pass candidates in ascending task-id order, and
every policy here keeps the first-encountered task on ties, so the lowest id
wins a tie.

Policy menu
───────────
  longest_duration         Longest task first                  ← DEFAULT
  shortest_duration        Shortest task first
  most_successors          Most recursive successors first     (experimental)
  least_successors         Fewest recursive successors first   (experimental)
  longest_successor_time   Largest recursive successor time    (experimental)
  shortest_successor_time  Smallest recursive successor time   (experimental)

The successor-weighted policies rank tasks by what depends on them across
the whole task set, so they are built against that set with
``get_heuristic(name, tasks)``. A cyclic precedence graph makes the ranking
undefined and raises CyclicPrecedenceError up front.
"""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Callable, Iterable, Literal, Sequence

from src.assembly.errors import UnknownHeuristicError
from src.assembly.precedence import PrecedenceGraph

if TYPE_CHECKING:
    from src.assembly.task import Task


Heuristic = Callable[[Sequence["Task"]], "Task"]

DEFAULT_HEURISTIC = "longest_duration"


def _first_best(candidates: Sequence[Task], key: Callable[[Task], float], better) -> Task:
    """Linear scan keeping the first task whose key is strictly better."""
    if not candidates:
        raise ValueError("heuristic needs at least one candidate task")

    best = candidates[0]
    best_key = key(best)
    for task in candidates[1:]:
        k = key(task)
        if better(k, best_key):
            best, best_key = task, k
    return best


def shortest_duration(candidates: Sequence[Task]) -> Task:
    """Pick the task with the smallest duration."""
    return _first_best(candidates, lambda t: t.duration, operator.lt)


def longest_duration(candidates: Sequence[Task]) -> Task:
    """Pick the task with the largest duration.

    The preferred policy: placing long tasks first packs stations tighter.
    """
    return _first_best(candidates, lambda t: t.duration, operator.gt)


class SuccessorWeightedHeuristic:
    """Rank candidates by a recursive aggregate over their successors.

    Experimental. Scores are computed once, at construction, over the full
    task set.

    Args:
        tasks: Every task of the line (not only the candidates).
        metric: "count" for recursive successor count, "time" for recursive
            successor time (task duration included).
        prefer: "max" or "min".

    Raises:
        CyclicPrecedenceError: If the predecessor graph has a cycle.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        metric: Literal["count", "time"],
        prefer: Literal["max", "min"],
    ) -> None:
        graph = PrecedenceGraph.from_tasks(tasks)
        graph.check_acyclic()

        if metric == "count":
            self.scores: dict[int, float] = dict(graph.successor_counts())
        elif metric == "time":
            self.scores = dict(graph.successor_times())
        else:
            raise ValueError(f"Unknown successor metric {metric!r}")

        if prefer not in ("max", "min"):
            raise ValueError(f"prefer must be 'max' or 'min', got {prefer!r}")

        self.metric = metric
        self.prefer = prefer
        self._better = operator.gt if prefer == "max" else operator.lt

    def __repr__(self) -> str:
        return f"SuccessorWeightedHeuristic(metric={self.metric!r}, prefer={self.prefer!r})"

    def score(self, task: Task) -> float:
        return self.scores[task.id]

    def __call__(self, candidates: Sequence[Task]) -> Task:
        return _first_best(candidates, self.score, self._better)


HeuristicFactory = Callable[[Sequence["Task"]], Heuristic]

# name → (metric, prefer)
_SUCCESSOR_POLICIES: dict[str, tuple[str, str]] = {
    "most_successors": ("count", "max"),
    "least_successors": ("count", "min"),
    "longest_successor_time": ("time", "max"),
    "shortest_successor_time": ("time", "min"),
}


def _successor_factory(metric: str, prefer: str) -> HeuristicFactory:
    def build(tasks: Sequence[Task]) -> Heuristic:
        return SuccessorWeightedHeuristic(tasks, metric, prefer)  # type: ignore[arg-type]

    return build


# Every entry builds a ready policy from the line's full task set
HEURISTICS: dict[str, HeuristicFactory] = {
    "longest_duration": lambda _tasks: longest_duration,
    "shortest_duration": lambda _tasks: shortest_duration,
    **{name: _successor_factory(*policy) for name, policy in _SUCCESSOR_POLICIES.items()},
}


def heuristic_names() -> list[str]:
    """Registered heuristic names, default first."""
    return [DEFAULT_HEURISTIC] + sorted(n for n in HEURISTICS if n != DEFAULT_HEURISTIC)


def get_heuristic(name: str, tasks: Iterable[Task] | None = None) -> Heuristic:
    """Look up a heuristic by name.

    Args:
        name: Registered heuristic name.
        tasks: Full task set; required by the successor-weighted policies.

    Raises:
        UnknownHeuristicError: If the name is not registered, or a
            successor-weighted policy is requested without a task set.
        CyclicPrecedenceError: If a successor-weighted policy is built over
            a cyclic task set.
    """
    if name not in HEURISTICS:
        raise UnknownHeuristicError(
            f"unknown heuristic {name!r}; expected one of {heuristic_names()}"
        )

    if tasks is None:
        if name in _SUCCESSOR_POLICIES:
            raise UnknownHeuristicError(f"heuristic {name!r} needs the line's task set")
        tasks = []
    return HEURISTICS[name](list(tasks))
