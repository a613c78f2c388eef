from __future__ import annotations

"""Seeded random task sets (NumPy-backed).

Kept apart from the simulator modules so the core never needs NumPy; only
sweeps and property tests pull this in.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING

import numpy as np

from interleavelab.errors import ConfigurationError
from interleavelab.model import Segment, SegmentKind, Task

if TYPE_CHECKING:  # pragma: no cover
    from numpy.random import Generator


def _splitmix64(x: int) -> int:
    x = (x + 0x9E3779B97F4A7C15) & 0xFFFFFFFFFFFFFFFF
    z = x
    z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & 0xFFFFFFFFFFFFFFFF
    z = (z ^ (z >> 27)) * 0x94D049BB133111EB & 0xFFFFFFFFFFFFFFFF
    return z ^ (z >> 31)


def seed_for_run(base_seed: int, run_id: int) -> int:
    return _splitmix64((base_seed & 0xFFFFFFFFFFFFFFFF) ^ (run_id & 0xFFFFFFFFFFFFFFFF))


def generate_workload(
    rng: "Generator",
    *,
    n_tasks: int = 3,
    max_segments: int = 4,
    max_duration: int = 6,
    yield_fraction: float = 0.5,
) -> tuple[Task, ...]:
    """Draw a task set with integer-valued durations in ``[0, max_duration]``.

    A task may get zero segments, which exercises the instant-finish path.
    """

    if n_tasks < 1:
        raise ConfigurationError(f"n_tasks must be >= 1 (got {n_tasks})")
    if max_segments < 0 or max_duration < 0:
        raise ConfigurationError("max_segments and max_duration must be >= 0")
    if not 0.0 <= yield_fraction <= 1.0:
        raise ConfigurationError(
            f"yield_fraction must be within [0, 1] (got {yield_fraction})"
        )

    tasks: list[Task] = []
    for i in range(n_tasks):
        n_segments = int(rng.integers(0, max_segments + 1))
        durations = rng.integers(0, max_duration + 1, size=n_segments)
        yields = rng.random(size=n_segments) < yield_fraction
        segments = tuple(
            Segment(
                kind=SegmentKind.YIELDING if y else SegmentKind.BLOCKING,
                duration=float(d),
            )
            for d, y in zip(durations, yields)
        )
        tasks.append(Task(task_id=f"t{i}", segments=segments))
    return tuple(tasks)


def sweep_workloads(
    *,
    seed: int,
    runs: int,
    n_tasks: int = 3,
    max_segments: int = 4,
    max_duration: int = 6,
    yield_fraction: float = 0.5,
) -> Iterator[tuple[Task, ...]]:
    if runs < 0:
        raise ConfigurationError(f"runs must be >= 0 (got {runs})")
    for run_id in range(runs):
        rng = np.random.default_rng(seed_for_run(seed, run_id))
        yield generate_workload(
            rng,
            n_tasks=n_tasks,
            max_segments=max_segments,
            max_duration=max_duration,
            yield_fraction=yield_fraction,
        )
