from src.assembly.task import Task
from src.assembly.station import Station
from src.assembly.line import Line
from src.assembly.constraints import (
    Constraint,
    ConstraintKind,
    OnlyActiveStations,
    SingleTaskAssignment,
    RestrictedStationTime,
    PredecessorsStartToStart,
    default_constraints,
)
from src.assembly.precedence import PrecedenceGraph
from src.assembly.validation import validate_line

__all__ = [
    "Task",
    "Station",
    "Line",
    "Constraint",
    "ConstraintKind",
    "OnlyActiveStations",
    "SingleTaskAssignment",
    "RestrictedStationTime",
    "PredecessorsStartToStart",
    "default_constraints",
    "PrecedenceGraph",
    "validate_line",
]
