from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from interleavelab.model import ExecutionModel, SimOptions, Task
from interleavelab.types import Timeline


class ModelExecutor(Protocol):
    def execute(
        self, *, tasks: Sequence[Task], options: SimOptions
    ) -> tuple[Timeline, float]:
        raise NotImplementedError


@dataclass(frozen=True)
class SyncExecutor:
    def execute(
        self, *, tasks: Sequence[Task], options: SimOptions
    ) -> tuple[Timeline, float]:
        from interleavelab.sim_sync import simulate_sync

        return simulate_sync(tasks)


@dataclass(frozen=True)
class CooperativeExecutor:
    def execute(
        self, *, tasks: Sequence[Task], options: SimOptions
    ) -> tuple[Timeline, float]:
        from interleavelab.sim_cooperative import simulate_cooperative

        return simulate_cooperative(tasks)


@dataclass(frozen=True)
class ConcurrentExecutor:
    def execute(
        self, *, tasks: Sequence[Task], options: SimOptions
    ) -> tuple[Timeline, float]:
        from interleavelab.sim_concurrent import simulate_concurrent

        return simulate_concurrent(tasks, options)


def default_executor_for_model(model: ExecutionModel) -> ModelExecutor:
    if model is ExecutionModel.SYNC:
        return SyncExecutor()
    if model is ExecutionModel.COOPERATIVE:
        return CooperativeExecutor()
    if model is ExecutionModel.CONCURRENT:
        return ConcurrentExecutor()
    raise ValueError(f"Unsupported execution model: {model!r}")
