from __future__ import annotations

# Fully sequential execution: one task after another on a single clock, every
# segment occupying the worker whatever its declared kind.

import logging
from collections.abc import Sequence

from interleavelab.model import ExecutionModel, Task
from interleavelab.types import EventKind, Timeline, TimelineEvent

logger = logging.getLogger(__name__)


def simulate_sync(tasks: Sequence[Task]) -> tuple[Timeline, float]:
    events: list[TimelineEvent] = []
    t = 0.0

    for task in tasks:
        events.append(TimelineEvent(t, task.task_id, EventKind.START))
        for seg in task.segments:
            events.append(TimelineEvent(t, task.task_id, EventKind.BLOCK_START))
            t += float(seg.duration)
            events.append(TimelineEvent(t, task.task_id, EventKind.BLOCK_END))
        events.append(TimelineEvent(t, task.task_id, EventKind.FINISH))

    logger.debug("sync run: tasks=%d total=%s", len(tasks), t)
    return Timeline(model=ExecutionModel.SYNC, events=tuple(events)), t
