from __future__ import annotations

# Independent logical workers, one per task, all started at t=0.
#
# The main timeline ends immediately unless it joins tasks, in which case it
# ends when the slowest joined task completes. Unjoined daemon tasks that are
# still running at that point are cut off with an ABORTED record.

import logging
from collections.abc import Sequence

from interleavelab.model import ExecutionModel, SimOptions, Task
from interleavelab.types import EventKind, Timeline, TimelineEvent

logger = logging.getLogger(__name__)

_START_END = {
    True: (EventKind.BLOCK_START, EventKind.BLOCK_END),
    False: (EventKind.YIELD_START, EventKind.YIELD_END),
}


def _task_events(task: Task, cutoff: float | None) -> list[TimelineEvent]:
    """Events of one worker, truncated at ``cutoff`` when given."""

    events = [TimelineEvent(0.0, task.task_id, EventKind.START)]
    t = 0.0
    for seg in task.segments:
        if cutoff is not None and t >= cutoff:
            break
        start_kind, end_kind = _START_END[seg.is_blocking]
        events.append(TimelineEvent(t, task.task_id, start_kind))
        end = t + float(seg.duration)
        if cutoff is not None and end > cutoff:
            break
        t = end
        events.append(TimelineEvent(t, task.task_id, end_kind))

    if cutoff is None:
        events.append(TimelineEvent(t, task.task_id, EventKind.FINISH))
    else:
        events.append(TimelineEvent(cutoff, task.task_id, EventKind.ABORTED))
    return events


def simulate_concurrent(
    tasks: Sequence[Task], options: SimOptions
) -> tuple[Timeline, float]:
    completion = {t.task_id: t.total_duration for t in tasks}

    joined = [completion[t.task_id] for t in tasks if t.task_id in options.join_set]
    main_end = max(joined) if joined else 0.0

    # (timestamp, task order, per-task sequence) keeps causal order on ties.
    keyed: list[tuple[float, int, int, TimelineEvent]] = []
    for order, task in enumerate(tasks):
        cutoff: float | None = None
        if (
            task.task_id in options.daemon_set
            and task.task_id not in options.join_set
            and completion[task.task_id] > main_end
        ):
            cutoff = main_end
            logger.debug(
                "daemon task '%s' aborted at %s (needed %s)",
                task.task_id,
                main_end,
                completion[task.task_id],
            )
        for seq, ev in enumerate(_task_events(task, cutoff)):
            keyed.append((ev.timestamp, order, seq, ev))

    keyed.sort(key=lambda k: k[:3])
    events = tuple(k[3] for k in keyed)

    logger.debug(
        "concurrent run: tasks=%d joined=%d total=%s", len(tasks), len(joined), main_end
    )
    return Timeline(model=ExecutionModel.CONCURRENT, events=events), float(main_end)
