from __future__ import annotations

# Public simulation entrypoint.
#
# Validates the whole request up front, then hands it to the executor for the
# chosen model. No simulator keeps state between calls.

import logging
from collections.abc import Sequence

from interleavelab.executors import default_executor_for_model
from interleavelab.model import ExecutionModel, SimOptions, Task
from interleavelab.types import Timeline
from interleavelab.validate import validate_run

logger = logging.getLogger(__name__)


def simulate(
    tasks: Sequence[Task],
    model: ExecutionModel | str,
    options: SimOptions | None = None,
) -> tuple[Timeline, float]:
    model = ExecutionModel.parse(model)
    options = options if options is not None else SimOptions()
    tasks = tuple(tasks)
    validate_run(tasks, model, options)

    executor = default_executor_for_model(model)
    logger.debug("simulating %d task(s) with %s", len(tasks), type(executor).__name__)
    return executor.execute(tasks=tasks, options=options)
