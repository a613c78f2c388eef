from __future__ import annotations

"""Repo-root convenience shim for the InterleaveLab CLI.

    python runner.py simulate --workload workloads/notes_three_tasks.json

It delegates to the canonical entry point:

    python -m interleavelab
"""

import sys


def main() -> int:
    from interleavelab import __main__ as cli_main

    # Arguments are forwarded exactly as in `python -m interleavelab`.
    return cli_main.main(sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
