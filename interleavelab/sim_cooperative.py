from __future__ import annotations

# Single logical worker with voluntary yields.
#
# The scheduler walks the task list in round-robin passes and gives every
# runnable task exactly one segment per pass. Blocking segments advance the
# shared clock on the spot; yielding segments park the task until its wake
# time. Between passes the clock moves forward to the earliest wake time, the
# way an event loop polls its timers once per iteration.

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from interleavelab.model import ExecutionModel, Task
from interleavelab.types import EventKind, Timeline, TimelineEvent

logger = logging.getLogger(__name__)


@dataclass
class _TaskState:
    task: Task
    next_segment: int = 0
    started: bool = False
    wake_at: float | None = None
    finish_at: float | None = None

    @property
    def exhausted(self) -> bool:
        return self.next_segment >= len(self.task.segments)


def simulate_cooperative(tasks: Sequence[Task]) -> tuple[Timeline, float]:
    states = [_TaskState(task=t) for t in tasks]
    events: list[TimelineEvent] = []
    clock = 0.0
    remaining = len(states)
    passes = 0

    def emit(st: _TaskState, kind: EventKind) -> None:
        events.append(TimelineEvent(clock, st.task.task_id, kind))

    def finish(st: _TaskState) -> None:
        nonlocal remaining
        st.finish_at = clock
        remaining -= 1
        emit(st, EventKind.FINISH)

    while remaining:
        passes += 1
        for st in states:
            if st.finish_at is not None:
                continue
            if st.wake_at is not None:
                if st.wake_at > clock:
                    continue
                st.wake_at = None
                emit(st, EventKind.YIELD_END)
            if not st.started:
                st.started = True
                emit(st, EventKind.START)

            if st.exhausted:
                finish(st)
                continue

            seg = st.task.segments[st.next_segment]
            st.next_segment += 1
            if seg.is_blocking:
                # Nothing else runs while the worker is held.
                emit(st, EventKind.BLOCK_START)
                clock += float(seg.duration)
                emit(st, EventKind.BLOCK_END)
                if st.exhausted:
                    finish(st)
            else:
                emit(st, EventKind.YIELD_START)
                st.wake_at = clock + float(seg.duration)

        parked = [st.wake_at for st in states if st.wake_at is not None]
        if parked:
            clock = max(clock, min(parked))

    total = max(st.finish_at for st in states if st.finish_at is not None)
    logger.debug(
        "cooperative run: tasks=%d passes=%d total=%s", len(states), passes, total
    )
    return Timeline(model=ExecutionModel.COOPERATIVE, events=tuple(events)), total
