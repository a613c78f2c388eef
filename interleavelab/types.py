from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from interleavelab.model import ExecutionModel


class EventKind(str, Enum):
    START = "start"
    BLOCK_START = "block_start"
    BLOCK_END = "block_end"
    YIELD_START = "yield_start"
    YIELD_END = "yield_end"
    FINISH = "finish"
    ABORTED = "aborted"


@dataclass(frozen=True)
class TimelineEvent:
    timestamp: float
    task_id: str
    event: EventKind


@dataclass(frozen=True)
class Timeline:
    model: ExecutionModel
    events: tuple[TimelineEvent, ...]

    def __iter__(self) -> Iterator[TimelineEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> TimelineEvent:
        return self.events[index]

    def for_task(self, task_id: str) -> tuple[TimelineEvent, ...]:
        return tuple(e for e in self.events if e.task_id == task_id)

    def _first_time(self, task_id: str, kind: EventKind) -> float | None:
        for e in self.events:
            if e.task_id == task_id and e.event is kind:
                return e.timestamp
        return None

    def start_time(self, task_id: str) -> float | None:
        return self._first_time(task_id, EventKind.START)

    def finish_time(self, task_id: str) -> float | None:
        return self._first_time(task_id, EventKind.FINISH)

    def aborted_at(self, task_id: str) -> float | None:
        return self._first_time(task_id, EventKind.ABORTED)
