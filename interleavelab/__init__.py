"""Deterministic simulator for sync, cooperative and concurrent task timing.

Run from source:

    python -m interleavelab simulate --task A=blocking:3,yielding:1 --model cooperative
"""

from __future__ import annotations

from interleavelab.errors import ConfigurationError
from interleavelab.model import ExecutionModel, Segment, SegmentKind, SimOptions, Task
from interleavelab.sim import simulate
from interleavelab.types import EventKind, Timeline, TimelineEvent

__all__ = [
    "ConfigurationError",
    "EventKind",
    "ExecutionModel",
    "Segment",
    "SegmentKind",
    "SimOptions",
    "Task",
    "Timeline",
    "TimelineEvent",
    "__version__",
    "simulate",
]

__version__ = "0.1.0"
