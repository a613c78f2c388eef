from __future__ import annotations

import sys

import interleavelab.__main__ as cli_main_module


def test_runner_delegates_to_cli_main_with_forwarded_args(monkeypatch) -> None:
    captured = {}

    def fake_main(argv: list[str] | None = None) -> int:
        captured["argv"] = argv
        return 0

    monkeypatch.setattr(cli_main_module, "main", fake_main)
    monkeypatch.setattr(sys, "argv", ["runner.py", "simulate", "--model", "sync"])

    import runner

    rc = runner.main()

    assert rc == 0
    assert captured["argv"] == ["simulate", "--model", "sync"]
