"""
Balancing result visualization.

Renders a balanced line as:
- Station load bars against the cycle-time reference line
- The precedence graph, laid out left to right by precedence depth, with
  each task colored by the station it was assigned to

Usage:
    from src.balancing.engine import LineBalancer
    from src.analysis.visualizations import plot_station_loads

    result = LineBalancer(config).run("data/example.in2")
    fig = plot_station_loads(result.line, result.cycle_time)
    fig.savefig("station_loads.png", dpi=150, bbox_inches="tight")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from src.assembly.precedence import PrecedenceGraph

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from src.assembly.line import Line


# ── Styling constants ────────────────────────────────────────────

BAR_COLOR = "#6baed6"
OVERLOAD_COLOR = "#e6550d"
CYCLE_LINE_COLOR = "#31a354"
FREE_TASK_COLOR = "#bdbdbd"
STATION_CMAP = "tab20"


def plot_station_loads(
    line: Line,
    cycle_time: float,
    title: str | None = None,
    figsize: tuple[float, float] = (10, 5),
) -> Figure:
    """Bar chart of active station times with the cycle time as reference.

    Args:
        line: A balanced line.
        cycle_time: Effective cycle time.
        title: Plot title. Defaults to the line name.
        figsize: Figure size in inches.

    Returns:
        matplotlib Figure object.
    """
    stations = line.active_stations
    times = np.array([s.time() for s in stations], dtype=np.float64)
    labels = [str(s.id) for s in stations]
    colors = [OVERLOAD_COLOR if t > cycle_time else BAR_COLOR for t in times]

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.bar(labels, times, color=colors, edgecolor="white")
    ax.axhline(cycle_time, color=CYCLE_LINE_COLOR, linestyle="--", linewidth=1.5, label="cycle time")

    for i, s in enumerate(stations):
        ax.annotate(
            " ".join(str(tid) for tid in s.task_ids),
            (i, times[i]),
            textcoords="offset points",
            xytext=(0, 3),
            ha="center",
            fontsize=7,
        )

    ax.set_title(title or line.name, fontsize=14, fontweight="bold", pad=12)
    ax.set_xlabel("Station", fontsize=10)
    ax.set_ylabel("Station time", fontsize=10)
    ax.set_ylim(0, max([cycle_time, *times]) * 1.15)
    ax.legend(loc="upper right", fontsize=8)
    ax.grid(True, axis="y", alpha=0.2, linestyle="--")
    fig.tight_layout()
    return fig


def plot_precedence(line: Line, title: str | None = None) -> Figure:
    """Draw the precedence graph colored by station assignment.

    Tasks are placed in columns by precedence depth. Free tasks are grey.
    Requires an acyclic precedence graph.
    """
    pg = PrecedenceGraph.from_tasks(line.tasks)
    pg.check_acyclic()
    g = pg.graph

    # ── Layout: one column per topological generation ────────────
    positions: dict[int, tuple[float, float]] = {}
    for depth, generation in enumerate(nx.topological_generations(g)):
        for row, task_id in enumerate(sorted(generation)):
            positions[task_id] = (float(depth), -float(row))

    cmap = plt.get_cmap(STATION_CMAP)
    node_colors = []
    for task_id in g.nodes:
        task = line.task(task_id)
        if task is None or task.assignment is None:
            node_colors.append(FREE_TASK_COLOR)
        else:
            node_colors.append(cmap(task.assignment.id % cmap.N))

    n_cols = max((p[0] for p in positions.values()), default=0) + 1
    fig, ax = plt.subplots(1, 1, figsize=(max(6, n_cols * 1.5), 6))
    nx.draw_networkx(
        g,
        pos=positions,
        ax=ax,
        node_color=node_colors,
        node_size=400,
        font_size=8,
        arrows=True,
        edge_color="#969696",
    )
    ax.set_title(title or f"{line.name} precedence", fontsize=14, fontweight="bold", pad=12)
    ax.set_axis_off()
    fig.tight_layout()
    return fig
