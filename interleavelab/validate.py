from __future__ import annotations

import math
import numbers
from collections.abc import Sequence

from interleavelab.errors import ConfigurationError
from interleavelab.model import ExecutionModel, SimOptions, Task

__all__ = ["ConfigurationError", "validate_run"]


def validate_run(
    tasks: Sequence[Task], model: ExecutionModel, options: SimOptions
) -> None:
    if not tasks:
        raise ConfigurationError("tasks must be non-empty")

    seen: set[str] = set()
    for task in tasks:
        if not isinstance(task, Task):
            raise ConfigurationError(f"expected Task, got {type(task).__name__}")
        if not isinstance(task.task_id, str) or not task.task_id:
            raise ConfigurationError("task id must be a non-empty string")
        if task.task_id in seen:
            raise ConfigurationError(f"duplicate task id '{task.task_id}'")
        seen.add(task.task_id)

        for i, seg in enumerate(task.segments):
            d = seg.duration
            if isinstance(d, bool) or not isinstance(d, numbers.Real):
                raise ConfigurationError(
                    f"task '{task.task_id}' segment {i} duration must be a number"
                )
            if math.isnan(d) or math.isinf(d):
                raise ConfigurationError(
                    f"task '{task.task_id}' segment {i} duration must be finite"
                )
            if d < 0:
                raise ConfigurationError(
                    f"task '{task.task_id}' segment {i} duration must be >= 0 "
                    f"(got {d})"
                )

    for name, ids in (("join_set", options.join_set), ("daemon_set", options.daemon_set)):
        unknown = sorted(ids - seen)
        if unknown:
            raise ConfigurationError(
                f"{name} references unknown task ids: {', '.join(unknown)}"
            )

    both = sorted(options.join_set & options.daemon_set)
    if both:
        raise ConfigurationError(
            f"task ids cannot be both joined and daemon: {', '.join(both)}"
        )

    if model is not ExecutionModel.CONCURRENT and not options.is_empty:
        raise ConfigurationError(
            f"join_set/daemon_set only apply to the concurrent model "
            f"(got model '{model.value}')"
        )
