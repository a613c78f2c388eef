from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from interleavelab.errors import ConfigurationError
from interleavelab.io import format_timeline, write_summary_json, write_timeline_csv
from interleavelab.metrics import aggregate_sweep, compare_models, summarize
from interleavelab.model import (
    ExecutionModel,
    SimOptions,
    Task,
    Workload,
    parse_task_spec,
)
from interleavelab.sim import simulate

logger = logging.getLogger(__name__)


def _id_set(raw: str | None) -> frozenset[str] | None:
    if raw is None:
        return None
    return frozenset(p.strip() for p in raw.split(",") if p.strip())


def _add_task_source(p: argparse.ArgumentParser) -> None:
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--workload", type=Path, help="JSON workload file")
    src.add_argument(
        "--task",
        action="append",
        metavar="SPEC",
        help="Inline task, e.g. A=blocking:3,yielding:1 (repeatable)",
    )
    p.add_argument("--join", help="Comma-separated task ids to join (concurrent)")
    p.add_argument("--daemon", help="Comma-separated daemon task ids (concurrent)")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="interleavelab", description="InterleaveLab task-timing simulator"
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sim = sub.add_parser("simulate", help="Simulate one task set under one model")
    _add_task_source(sim)
    sim.add_argument(
        "--model",
        choices=[m.value for m in ExecutionModel],
        help="Execution model (defaults to the workload's 'model')",
    )
    sim.add_argument("--out-timeline", required=False, type=Path)
    sim.add_argument("--out-summary", required=False, type=Path)

    cmp_ = sub.add_parser("compare", help="Simulate one task set under every model")
    _add_task_source(cmp_)
    cmp_.add_argument("--out-summary", required=False, type=Path)

    sweep = sub.add_parser("sweep", help="Compare models over random task sets")
    sweep.add_argument("--runs", required=True, type=int)
    sweep.add_argument("--seed", required=True, type=int)
    sweep.add_argument("--tasks", required=False, type=int, default=3)
    sweep.add_argument("--max-segments", required=False, type=int, default=4)
    sweep.add_argument("--max-duration", required=False, type=int, default=6)
    sweep.add_argument("--yield-fraction", required=False, type=float, default=0.5)
    sweep.add_argument("--out-summary", required=False, type=Path)
    return p


def _load(
    args: argparse.Namespace,
) -> tuple[tuple[Task, ...], ExecutionModel | None, SimOptions]:
    if args.workload is not None:
        logger.info("Loading workload: %s", args.workload)
        raw = json.loads(args.workload.read_text(encoding="utf-8"))
        workload = Workload.from_json(raw)
        tasks, model, options = workload.tasks, workload.model, workload.options
    else:
        tasks = tuple(parse_task_spec(s) for s in args.task)
        model, options = None, SimOptions()

    # Command-line sets replace the ones stored in the workload file.
    join = _id_set(args.join)
    daemon = _id_set(args.daemon)
    options = SimOptions(
        join_set=join if join is not None else options.join_set,
        daemon_set=daemon if daemon is not None else options.daemon_set,
    )
    return tasks, model, options


def _run(args: argparse.Namespace) -> int:
    if args.cmd == "simulate":
        tasks, model, options = _load(args)
        if args.model is not None:
            model = ExecutionModel.parse(args.model)
        if model is None:
            raise ConfigurationError(
                "no execution model: pass --model or set 'model' in the workload"
            )

        timeline, total = simulate(tasks, model, options)
        print(format_timeline(timeline, total))
        if args.out_timeline:
            write_timeline_csv(args.out_timeline, timeline)
        if args.out_summary:
            summary = summarize(tasks=tasks, timeline=timeline, total_elapsed=total)
            write_summary_json(args.out_summary, summary)
        return 0

    if args.cmd == "compare":
        tasks, _model, options = _load(args)
        result = compare_models(tasks=tasks, options=options)
        for name, total in result["totals"].items():
            print(f"{name:<12} total_elapsed={total:g}")
        if result["cooperative_speedup"] is not None:
            print(f"cooperative speedup over sync: {result['cooperative_speedup']:.2f}x")
        if args.out_summary:
            write_summary_json(args.out_summary, result)
        return 0

    if args.cmd == "sweep":
        from interleavelab.workload import sweep_workloads

        results = [
            compare_models(tasks=tasks)
            for tasks in sweep_workloads(
                seed=args.seed,
                runs=args.runs,
                n_tasks=args.tasks,
                max_segments=args.max_segments,
                max_duration=args.max_duration,
                yield_fraction=args.yield_fraction,
            )
        ]
        summary = aggregate_sweep(results)
        print(json.dumps(summary, indent=2, sort_keys=True))
        if args.out_summary:
            write_summary_json(args.out_summary, summary)
        return 0

    raise AssertionError(f"Unhandled command: {args.cmd}")


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        return _run(args)
    except (ConfigurationError, OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 2
