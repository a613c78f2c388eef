from __future__ import annotations

import numpy as np
import pytest

from interleavelab.model import ExecutionModel, Segment, SimOptions, Task
from interleavelab.sim import simulate
from interleavelab.types import EventKind
from interleavelab.workload import generate_workload, sweep_workloads


def _random_task_sets(runs: int = 200) -> list[tuple[Task, ...]]:
    return list(
        sweep_workloads(seed=123, runs=runs, n_tasks=4, max_segments=5, max_duration=7)
    )


@pytest.mark.parametrize("model", list(ExecutionModel))
def test_simulation_is_idempotent(model: ExecutionModel) -> None:
    tasks = [
        Task("A", [Segment.blocking(3), Segment.yielding(1)]),
        Task("B", [Segment.yielding(2), Segment.blocking(0.5)]),
        Task("C", [Segment.yielding(1)]),
    ]
    opts = (
        SimOptions(join_set=frozenset({"B"}), daemon_set=frozenset({"A"}))
        if model is ExecutionModel.CONCURRENT
        else None
    )
    first = simulate(tasks, model, opts)
    second = simulate(tasks, model, opts)
    assert first == second


def test_sync_total_is_sum_of_all_durations() -> None:
    for tasks in _random_task_sets():
        _, total = simulate(tasks, ExecutionModel.SYNC)
        assert total == sum(s.duration for t in tasks for s in t.segments)


def test_cooperative_never_slower_than_sync() -> None:
    for tasks in _random_task_sets():
        _, sync_total = simulate(tasks, ExecutionModel.SYNC)
        _, coop_total = simulate(tasks, ExecutionModel.COOPERATIVE)
        assert coop_total <= sync_total


def test_cooperative_total_is_last_finish() -> None:
    for tasks in _random_task_sets(50):
        timeline, total = simulate(tasks, ExecutionModel.COOPERATIVE)
        finishes = [e.timestamp for e in timeline if e.event is EventKind.FINISH]
        assert len(finishes) == len(tasks)
        assert total == max(finishes)


def test_cooperative_never_overlaps_blocking_segments() -> None:
    for tasks in _random_task_sets():
        timeline, _ = simulate(tasks, ExecutionModel.COOPERATIVE)
        open_blocks = 0
        for ev in timeline:
            if ev.event is EventKind.BLOCK_START:
                open_blocks += 1
                assert open_blocks == 1
            elif ev.event is EventKind.BLOCK_END:
                open_blocks -= 1


def test_segments_of_one_task_are_sequential() -> None:
    starts = {EventKind.BLOCK_START, EventKind.YIELD_START}
    ends = {EventKind.BLOCK_END, EventKind.YIELD_END}
    for tasks in _random_task_sets(50):
        for model in ExecutionModel:
            timeline, _ = simulate(tasks, model)
            for task in tasks:
                kinds = [e.event for e in timeline.for_task(task.task_id)]
                seg_events = [k for k in kinds if k in starts or k in ends]
                # Strict alternation start/end, one pair per segment.
                assert len(seg_events) == 2 * len(task.segments)
                assert all(k in starts for k in seg_events[0::2])
                assert all(k in ends for k in seg_events[1::2])


def test_concurrent_total_covers_every_joined_task() -> None:
    rng = np.random.default_rng(7)
    for tasks in _random_task_sets(50):
        ids = [t.task_id for t in tasks]
        joined = frozenset(i for i in ids if rng.random() < 0.5)
        daemon = frozenset(i for i in ids if i not in joined and rng.random() < 0.5)
        timeline, total = simulate(
            tasks,
            ExecutionModel.CONCURRENT,
            SimOptions(join_set=joined, daemon_set=daemon),
        )
        for t in tasks:
            if t.task_id in joined:
                assert total >= t.total_duration
            aborted = timeline.aborted_at(t.task_id)
            if aborted is not None:
                assert t.task_id in daemon
                assert aborted == total
        if not joined:
            assert total == 0.0


def test_generated_workloads_are_reproducible_per_seed() -> None:
    a = generate_workload(np.random.default_rng(99), n_tasks=5)
    b = generate_workload(np.random.default_rng(99), n_tasks=5)
    assert a == b
    assert [t.task_id for t in a] == ["t0", "t1", "t2", "t3", "t4"]
