"""
Task selection heuristics and the end-to-end balancing engine.

Quick start:
    from src.balancing.engine import LineBalancer
    result = LineBalancer().run("data/example.in2")
"""

from src.balancing.heuristics import (
    Heuristic,
    HEURISTICS,
    HeuristicFactory,
    SuccessorWeightedHeuristic,
    get_heuristic,
    longest_duration,
    shortest_duration,
)
from src.balancing.engine import BalanceResult, LineBalancer, balance_line

__all__ = [
    "Heuristic",
    "HEURISTICS",
    "HeuristicFactory",
    "SuccessorWeightedHeuristic",
    "get_heuristic",
    "longest_duration",
    "shortest_duration",
    "BalanceResult",
    "LineBalancer",
    "balance_line",
]
