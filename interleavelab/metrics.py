from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from interleavelab.model import ExecutionModel, SimOptions, Task
from interleavelab.sim import simulate
from interleavelab.types import EventKind, Timeline

_OPENERS = {EventKind.BLOCK_START, EventKind.YIELD_START}
_CLOSERS = {EventKind.BLOCK_END, EventKind.YIELD_END}


def _percentile_sorted(values_sorted: list[float], p: int) -> float:
    if not values_sorted:
        return math.nan
    if p <= 0:
        return float(values_sorted[0])
    if p >= 100:
        return float(values_sorted[-1])

    # Linear interpolation between closest ranks.
    n = len(values_sorted)
    pos = (p / 100.0) * (n - 1)
    lo = int(math.floor(pos))
    hi = int(math.ceil(pos))
    if lo == hi:
        return float(values_sorted[lo])
    frac = pos - lo
    return float(values_sorted[lo] * (1.0 - frac) + values_sorted[hi] * frac)


def _percentiles(values: list[float], ps: list[int]) -> dict[str, float]:
    if not values:
        return {f"p{p}": math.nan for p in ps}
    values_sorted = sorted(float(x) for x in values)
    return {f"p{p}": _percentile_sorted(values_sorted, p) for p in ps}


def work_done(timeline: Timeline, task_id: str) -> float:
    """Time the task spent inside its segments, including a cut-off one."""

    total = 0.0
    opened: float | None = None
    for ev in timeline.for_task(task_id):
        if ev.event in _OPENERS:
            opened = ev.timestamp
        elif opened is not None and (
            ev.event in _CLOSERS or ev.event is EventKind.ABORTED
        ):
            total += ev.timestamp - opened
            opened = None
    return total


def summarize(
    *, tasks: Sequence[Task], timeline: Timeline, total_elapsed: float
) -> dict[str, Any]:
    per_task: dict[str, Any] = {}
    for task in tasks:
        tid = task.task_id
        per_task[tid] = {
            "start": timeline.start_time(tid),
            "finish": timeline.finish_time(tid),
            "aborted_at": timeline.aborted_at(tid),
            "work_done": work_done(timeline, tid),
        }

    return {
        "model": timeline.model.value,
        "total_elapsed": float(total_elapsed),
        "tasks_total": len(tasks),
        "tasks_aborted": sum(1 for v in per_task.values() if v["aborted_at"] is not None),
        "tasks": per_task,
    }


def _speedup(sync_total: float, other_total: float) -> float | None:
    if other_total <= 0:
        return None
    return sync_total / other_total


def compare_models(
    *, tasks: Sequence[Task], options: SimOptions | None = None
) -> dict[str, Any]:
    """Run the same task set under every model.

    Join/daemon options are only passed to the concurrent model.
    """

    options = options if options is not None else SimOptions()
    totals: dict[str, float] = {}
    for model in ExecutionModel:
        run_opts = options if model is ExecutionModel.CONCURRENT else SimOptions()
        _, total = simulate(tasks, model, run_opts)
        totals[model.value] = total

    return {
        "totals": totals,
        "cooperative_speedup": _speedup(
            totals[ExecutionModel.SYNC.value], totals[ExecutionModel.COOPERATIVE.value]
        ),
    }


def aggregate_sweep(results: list[dict[str, Any]]) -> dict[str, Any]:
    """Percentiles over many `compare_models` results."""

    ps = [50, 90, 95, 99]
    by_model: dict[str, list[float]] = {m.value: [] for m in ExecutionModel}
    speedups: list[float] = []
    for r in results:
        for name, total in r["totals"].items():
            by_model[name].append(total)
        if r["cooperative_speedup"] is not None:
            speedups.append(r["cooperative_speedup"])

    return {
        "runs": len(results),
        "total_elapsed": {name: _percentiles(v, ps) for name, v in by_model.items()},
        "cooperative_speedup": _percentiles(speedups, ps),
    }
