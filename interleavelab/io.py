from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from interleavelab.types import Timeline


def _fmt_time(value: float) -> str:
    return f"{value:g}"


def format_timeline(timeline: Timeline, total_elapsed: float) -> str:
    width = max((len(e.task_id) for e in timeline), default=0)
    lines = [
        f"t={_fmt_time(e.timestamp):<8} {e.task_id:<{width}}  {e.event.value}"
        for e in timeline
    ]
    lines.append(f"total_elapsed={_fmt_time(total_elapsed)}")
    return "\n".join(lines)


def write_summary_json(path: Path, summary: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, sort_keys=True), encoding="utf-8")


def write_timeline_csv(path: Path, timeline: Timeline) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["timestamp", "task_id", "event", "model"])
        for e in timeline:
            w.writerow([e.timestamp, e.task_id, e.event.value, timeline.model.value])
