"""
Parser for the ``.in2`` line-definition format.

Format:
    <n>                       number of tasks
    <id>,<duration>           n task lines; a bare <duration> means the id
    ...                       is the 1-based line position in this block
    <pred_id>,<task_id>       precedence pairs until end of input;
    ...                       the pair -1,-1 means "no relation" and is skipped

Blank lines are ignored. One station is created per task (ids 1..n), the
naive upper bound on the number of stations a line can need.

Usage:
    tasks, stations = load_in2("data/example.in2")
"""

from __future__ import annotations

import math
from pathlib import Path

from src.assembly.errors import ParseError
from src.assembly.station import Station
from src.assembly.task import Task

NO_PREDECESSOR = (-1, -1)


def _int(value: str, what: str, line_no: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ParseError(f"{what}: invalid integer {value.strip()!r}", line_no) from None


def _float(value: str, what: str, line_no: int) -> float:
    try:
        number = float(value.strip())
    except ValueError:
        raise ParseError(f"{what}: invalid number {value.strip()!r}", line_no) from None
    if not math.isfinite(number):
        raise ParseError(f"{what}: number must be finite, got {value.strip()!r}", line_no)
    return number


def parse_in2(text: str) -> tuple[list[Task], list[Station]]:
    """Parse ``.in2`` content into tasks (with predecessors) and stations.

    Returns:
        Tuple of (tasks in input order, stations with ids 1..n).

    Raises:
        ParseError: On a malformed count, task or precedence line, a
            duplicate task id, or a reference to an unknown task id.
    """
    # (1-based source line number, stripped content)
    lines = [(i, raw.strip()) for i, raw in enumerate(text.splitlines(), start=1) if raw.strip()]
    if not lines:
        raise ParseError("file is empty")

    count_line_no, count_text = lines[0]
    n_tasks = _int(count_text, "number of tasks", count_line_no)
    if n_tasks < 0:
        raise ParseError(f"number of tasks: must be non-negative, got {n_tasks}", count_line_no)
    if len(lines) - 1 < n_tasks:
        raise ParseError(f"expected {n_tasks} task lines, found {len(lines) - 1}")

    tasks: list[Task] = []
    by_id: dict[int, Task] = {}
    for position, (line_no, content) in enumerate(lines[1 : n_tasks + 1], start=1):
        parts = content.split(",")
        if len(parts) == 2:
            task_id = _int(parts[0], "task id", line_no)
            duration = _float(parts[1], "task time", line_no)
        elif len(parts) == 1:
            task_id = position
            duration = _float(parts[0], "task time", line_no)
        else:
            raise ParseError(f"task: expected 'id,time' or 'time', got {content!r}", line_no)

        if task_id in by_id:
            raise ParseError(f"task: duplicate task id {task_id}", line_no)
        if duration < 0:
            raise ParseError(f"task time: negative duration {duration:g}", line_no)

        task = Task(task_id, duration)
        tasks.append(task)
        by_id[task_id] = task

    for line_no, content in lines[n_tasks + 1 :]:
        parts = content.split(",")
        if len(parts) != 2:
            raise ParseError(f"preds: expected 'pred_id,task_id', got {content!r}", line_no)

        pred_id = _int(parts[0], "pred", line_no)
        task_id = _int(parts[1], "pred", line_no)
        if (pred_id, task_id) == NO_PREDECESSOR:
            continue

        pred = by_id.get(pred_id)
        if pred is None:
            raise ParseError(f"pred: attempting to assign an unknown task {pred_id}", line_no)
        task = by_id.get(task_id)
        if task is None:
            raise ParseError(f"pred: attempting to assign pred to unknown task {task_id}", line_no)

        task.add_predecessor(pred)

    stations = [Station(i) for i in range(1, n_tasks + 1)]
    return tasks, stations


def load_in2(path: str | Path) -> tuple[list[Task], list[Station]]:
    """Read and parse an ``.in2`` file."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        return parse_in2(f.read())
