from __future__ import annotations

import math

from interleavelab.metrics import (
    _percentile_sorted,
    aggregate_sweep,
    compare_models,
    summarize,
    work_done,
)
from interleavelab.model import ExecutionModel, Segment, SimOptions, Task
from interleavelab.sim import simulate


def _daemon_tasks() -> list[Task]:
    return [
        Task("worker", [Segment.blocking(3)]),
        Task("heartbeat", [Segment.yielding(1), Segment.blocking(1), Segment.yielding(8)]),
    ]


def test_summarize_reports_aborted_daemon_and_partial_work() -> None:
    tasks = _daemon_tasks()
    opts = SimOptions(join_set=frozenset({"worker"}), daemon_set=frozenset({"heartbeat"}))
    timeline, total = simulate(tasks, ExecutionModel.CONCURRENT, opts)

    summary = summarize(tasks=tasks, timeline=timeline, total_elapsed=total)

    assert summary["model"] == "concurrent"
    assert summary["total_elapsed"] == 3.0
    assert summary["tasks_total"] == 2
    assert summary["tasks_aborted"] == 1
    assert summary["tasks"]["heartbeat"] == {
        "start": 0.0,
        "finish": None,
        "aborted_at": 3.0,
        "work_done": 3.0,
    }
    assert summary["tasks"]["worker"]["finish"] == 3.0


def test_work_done_for_aborted_task_with_no_progress_is_zero() -> None:
    tasks = [Task("d", [Segment.blocking(10)])]
    timeline, _ = simulate(
        tasks, ExecutionModel.CONCURRENT, SimOptions(daemon_set=frozenset({"d"}))
    )
    assert work_done(timeline, "d") == 0.0


def test_work_done_in_sync_equals_task_duration() -> None:
    tasks = [Task("a", [Segment.blocking(2), Segment.yielding(1.5)])]
    timeline, _ = simulate(tasks, ExecutionModel.SYNC)
    assert work_done(timeline, "a") == 3.5


def test_compare_models_applies_options_to_concurrent_only() -> None:
    tasks = _daemon_tasks()
    opts = SimOptions(join_set=frozenset({"worker"}), daemon_set=frozenset({"heartbeat"}))

    result = compare_models(tasks=tasks, options=opts)

    # heartbeat's blocking second segment lands after worker's block, so the
    # final yield starts at t=5 and nothing is saved over sync.
    assert result["totals"] == {"sync": 13.0, "cooperative": 13.0, "concurrent": 3.0}
    assert result["cooperative_speedup"] == 1.0


def test_compare_models_speedup_is_none_when_cooperative_is_instant() -> None:
    result = compare_models(tasks=[Task("idle", [])])
    assert result["totals"]["cooperative"] == 0.0
    assert result["cooperative_speedup"] is None


def test_percentile_edges_p0_p100_and_singleton() -> None:
    assert math.isnan(_percentile_sorted([], 50))
    vals = [1.0, 2.0, 3.0]
    assert _percentile_sorted(vals, 0) == 1.0
    assert _percentile_sorted(vals, 100) == 3.0
    assert _percentile_sorted(vals, 50) == 2.0
    assert _percentile_sorted([1.0, 2.0], 50) == 1.5
    assert _percentile_sorted([5.0], 50) == 5.0


def test_aggregate_sweep_with_no_runs_is_nan() -> None:
    summary = aggregate_sweep([])
    assert summary["runs"] == 0
    assert math.isnan(summary["total_elapsed"]["sync"]["p50"])
    assert math.isnan(summary["cooperative_speedup"]["p99"])


def test_aggregate_sweep_skips_missing_speedups() -> None:
    results = [
        {"totals": {"sync": 4.0, "cooperative": 2.0, "concurrent": 0.0}, "cooperative_speedup": 2.0},
        {"totals": {"sync": 0.0, "cooperative": 0.0, "concurrent": 0.0}, "cooperative_speedup": None},
    ]
    summary = aggregate_sweep(results)
    assert summary["total_elapsed"]["sync"]["p50"] == 2.0
    assert summary["cooperative_speedup"]["p50"] == 2.0
