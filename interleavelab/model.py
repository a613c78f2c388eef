from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from collections.abc import Iterable
from typing import Any

from interleavelab.errors import ConfigurationError

SUPPORTED_SCHEMA_VERSIONS = (1,)
_VERSION_KEYS = ("schema_version", "version", "model_version")


class SegmentKind(str, Enum):
    BLOCKING = "blocking"
    YIELDING = "yielding"

    @staticmethod
    def parse(raw: Any) -> "SegmentKind":
        if isinstance(raw, SegmentKind):
            return raw
        try:
            return SegmentKind(str(raw).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"unknown segment kind {raw!r} (expected 'blocking' or 'yielding')"
            ) from None


class ExecutionModel(str, Enum):
    SYNC = "sync"
    COOPERATIVE = "cooperative"
    CONCURRENT = "concurrent"

    @staticmethod
    def parse(raw: Any) -> "ExecutionModel":
        if isinstance(raw, ExecutionModel):
            return raw
        try:
            return ExecutionModel(str(raw).strip().lower())
        except ValueError:
            names = ", ".join(m.value for m in ExecutionModel)
            raise ConfigurationError(
                f"unknown execution model {raw!r} (expected one of: {names})"
            ) from None


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    duration: float

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SegmentKind):
            object.__setattr__(self, "kind", SegmentKind.parse(self.kind))

    @staticmethod
    def blocking(duration: float) -> "Segment":
        return Segment(kind=SegmentKind.BLOCKING, duration=duration)

    @staticmethod
    def yielding(duration: float) -> "Segment":
        return Segment(kind=SegmentKind.YIELDING, duration=duration)

    @property
    def is_blocking(self) -> bool:
        return self.kind is SegmentKind.BLOCKING


@dataclass(frozen=True)
class Task:
    task_id: str
    segments: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable (usually a list) while keeping the instance hashable.
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def total_duration(self) -> float:
        return float(sum(s.duration for s in self.segments))


@dataclass(frozen=True)
class SimOptions:
    """Per-run options that only the CONCURRENT model honours."""

    join_set: frozenset[str] = field(default_factory=frozenset)
    daemon_set: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in ("join_set", "daemon_set"):
            value = getattr(self, name)
            if isinstance(value, str):
                raise ConfigurationError(f"{name} must be a collection of task ids")
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(str(v) for v in value))

    @property
    def is_empty(self) -> bool:
        return not self.join_set and not self.daemon_set


def _parse_segment(task_id: str, index: int, raw: Any) -> Segment:
    if isinstance(raw, dict):
        if "kind" not in raw or "duration" not in raw:
            raise ConfigurationError(
                f"task '{task_id}' segment {index} requires 'kind' and 'duration'"
            )
        kind_raw, duration_raw = raw["kind"], raw["duration"]
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        kind_raw, duration_raw = raw
    else:
        raise ConfigurationError(
            f"task '{task_id}' segment {index} must be a [kind, duration] pair "
            "or a {kind, duration} object"
        )

    if isinstance(duration_raw, bool) or not isinstance(duration_raw, (int, float)):
        raise ConfigurationError(
            f"task '{task_id}' segment {index} duration must be a number"
        )
    try:
        duration = float(duration_raw)
    except OverflowError:
        raise ConfigurationError(
            f"task '{task_id}' segment {index} duration is out of range"
        ) from None
    return Segment(kind=SegmentKind.parse(kind_raw), duration=duration)


def parse_task_spec(text: str) -> Task:
    """Parse the compact ``NAME=kind:duration,kind:duration`` form.

    ``A=blocking:3,yielding:1`` is task ``A`` with two segments; ``A=`` is a
    task with no segments.
    """

    name, sep, body = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ConfigurationError(
            f"task spec {text!r} must look like NAME=kind:duration,..."
        )

    segments: list[Segment] = []
    for index, item in enumerate(p for p in body.split(",") if p.strip()):
        kind_raw, colon, duration_raw = item.partition(":")
        if not colon:
            raise ConfigurationError(
                f"task '{name}' segment {index} must look like kind:duration"
            )
        try:
            duration = float(duration_raw)
        except ValueError:
            raise ConfigurationError(
                f"task '{name}' segment {index} duration {duration_raw.strip()!r} "
                "is not a number"
            ) from None
        segments.append(Segment(kind=SegmentKind.parse(kind_raw), duration=duration))
    return Task(task_id=name, segments=tuple(segments))


def _read_schema_version(obj: dict[str, Any]) -> int:
    for key in _VERSION_KEYS:
        if key in obj:
            try:
                version = int(obj[key])
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"{key} must be an integer (got {obj[key]!r})"
                ) from None
            if version not in SUPPORTED_SCHEMA_VERSIONS:
                raise ConfigurationError(
                    f"Unsupported workload schema_version: {version} "
                    f"(expected one of {list(SUPPORTED_SCHEMA_VERSIONS)})"
                )
            return version
    raise ConfigurationError(
        "workload is missing 'schema_version' "
        "(also accepted: 'version', 'model_version')"
    )


def _id_list(obj: dict[str, Any], key: str) -> frozenset[str]:
    raw = obj.get(key, [])
    if isinstance(raw, str) or not isinstance(raw, Iterable):
        raise ConfigurationError(f"'{key}' must be a list of task ids")
    return frozenset(str(v) for v in raw)


@dataclass(frozen=True)
class Workload:
    """A task set plus the run settings stored alongside it in a JSON file."""

    version: int
    tasks: tuple[Task, ...]
    model: ExecutionModel | None = None
    options: SimOptions = field(default_factory=SimOptions)

    @staticmethod
    def from_json(obj: Any) -> "Workload":
        if not isinstance(obj, dict):
            raise ConfigurationError("workload document must be a JSON object")
        version = _read_schema_version(obj)

        raw_tasks = obj.get("tasks")
        if not isinstance(raw_tasks, list):
            raise ConfigurationError("workload 'tasks' must be a list")

        tasks: list[Task] = []
        for t_index, t in enumerate(raw_tasks):
            if not isinstance(t, dict) or "id" not in t:
                raise ConfigurationError(f"task {t_index} must be an object with 'id'")
            task_id = str(t["id"])
            raw_segments = t.get("segments", [])
            if not isinstance(raw_segments, list):
                raise ConfigurationError(f"task '{task_id}' segments must be a list")
            segments = tuple(
                _parse_segment(task_id, i, s) for i, s in enumerate(raw_segments)
            )
            tasks.append(Task(task_id=task_id, segments=segments))

        model_raw = obj.get("model")
        model = ExecutionModel.parse(model_raw) if model_raw is not None else None

        return Workload(
            version=version,
            tasks=tuple(tasks),
            model=model,
            options=SimOptions(
                join_set=_id_list(obj, "join"),
                daemon_set=_id_list(obj, "daemon"),
            ),
        )

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "schema_version": self.version,
            "tasks": [
                {
                    "id": t.task_id,
                    "segments": [[s.kind.value, s.duration] for s in t.segments],
                }
                for t in self.tasks
            ],
            "join": sorted(self.options.join_set),
            "daemon": sorted(self.options.daemon_set),
        }
        if self.model is not None:
            out["model"] = self.model.value
        return out
