from __future__ import annotations

import shutil
import sys

import pytest

from conftest import write

from vim_runner.cli import NO_RECIPE_EXIT, main


def test_plan_prints_command(tmp_path, capsys, monkeypatch) -> None:
    monkeypatch.delenv("VIM_RUNNER_PYTHON", raising=False)
    source = write(tmp_path / "hello.py")

    code = main(["plan", "--root", str(tmp_path), source, "--", "a b", "c"])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[0] == f"cwd: {tmp_path}"
    assert out[1] == "recipe: interpreter"
    assert out[2] == f"python3 '{source}' 'a b' 'c'"


def test_plan_reports_no_recipe(tmp_path, capsys) -> None:
    source = write(tmp_path / "data.csv")

    code = main(["plan", source, "--root", str(tmp_path)])

    assert code == NO_RECIPE_EXIT
    assert "No run recipe for filetype: unknown" in capsys.readouterr().err


@pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX shell")
def test_run_streams_output_and_returns_exit_code(tmp_path, capsys, monkeypatch) -> None:
    monkeypatch.setenv("VIM_RUNNER_PYTHON", sys.executable)
    monkeypatch.setenv("VIM_RUNNER_SHELL", shutil.which("sh"))
    source = write(
        tmp_path / "job.py",
        "import sys\nprint('args', sys.argv[1:])\nsys.exit(4)\n",
    )

    code = main(["run", "--root", str(tmp_path), source, "--", "x", "y"])

    captured = capsys.readouterr()
    assert code == 4
    assert "args ['x', 'y']" in captured.out
    assert "Run failed (exit 4)" in captured.err
