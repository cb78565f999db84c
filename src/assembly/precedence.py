"""Precedence graph representation.

The predecessor relation of a task set is modeled as a directed graph where:
- Nodes are task ids (with a ``duration`` attribute)
- An edge ``p -> t`` means task ``p`` must be assigned before task ``t``

Used for cycle detection and for the successor-weighted heuristics, which
rank a task by what depends on it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import networkx as nx

from src.assembly.errors import CyclicPrecedenceError

if TYPE_CHECKING:
    from src.assembly.task import Task


class PrecedenceGraph:
    """Directed acyclic (hopefully) graph of task precedence.

    Wraps a NetworkX DiGraph so the raw graph stays available for ad-hoc
    analysis.

    Attributes:
        graph: The underlying NetworkX DiGraph.
    """

    def __init__(self) -> None:
        self.graph = nx.DiGraph()

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> PrecedenceGraph:
        """Build the graph from tasks and their predecessor links.

        Predecessors outside ``tasks`` are added as nodes too, so the graph
        always reflects every link it was given.
        """
        pg = cls()
        for task in tasks:
            pg.graph.add_node(task.id, duration=task.duration)
            for pred in task.predecessors:
                if pred.id not in pg.graph:
                    pg.graph.add_node(pred.id, duration=pred.duration)
                pg.graph.add_edge(pred.id, task.id)
        return pg

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def n_tasks(self) -> int:
        return self.graph.number_of_nodes()

    def successors(self, task_id: int) -> list[int]:
        """Direct successors (tasks listing this one as predecessor), sorted."""
        return sorted(self.graph.successors(task_id))

    def predecessors(self, task_id: int) -> list[int]:
        return sorted(self.graph.predecessors(task_id))

    @property
    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self.graph)

    def find_cycle(self) -> list[int]:
        """Return the task ids of one cycle, or an empty list if there is none."""
        try:
            edges = nx.find_cycle(self.graph)
        except nx.NetworkXNoCycle:
            return []
        return [u for u, _ in edges]

    def check_acyclic(self) -> None:
        """Raises CyclicPrecedenceError if the graph has a cycle."""
        cycle = self.find_cycle()
        if cycle:
            raise CyclicPrecedenceError(cycle)

    def topological_order(self) -> list[int]:
        """Task ids in precedence order, smallest id first among ready tasks."""
        self.check_acyclic()
        return list(nx.lexicographical_topological_sort(self.graph))

    # ── Successor aggregates ─────────────────────────────────────────

    def successor_counts(self) -> dict[int, int]:
        """Recursive successor count per task.

        ``count(t) = 1 + sum(count(s) for s in direct successors of t)``.
        A successor reachable along several paths is counted once per path.
        """
        return self._aggregate(lambda _task_id: 1.0, int)

    def successor_times(self) -> dict[int, float]:
        """Recursive successor time per task.

        ``time(t) = duration(t) + sum(time(s) for s in direct successors of t)``.
        """
        return self._aggregate(lambda task_id: self.graph.nodes[task_id]["duration"], float)

    def _aggregate(self, weight, cast) -> dict:
        # Reverse topological order: successors are finished before their predecessors
        totals: dict[int, float] = {}
        for task_id in reversed(self.topological_order()):
            totals[task_id] = weight(task_id) + sum(
                totals[s] for s in self.graph.successors(task_id)
            )
        return {task_id: cast(value) for task_id, value in totals.items()}
