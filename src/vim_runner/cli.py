"""Command-line entry point: plan or run a file without an editor."""

from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
from typing import Optional, Sequence

from vim_runner.host.console import ConsoleHost
from vim_runner.runner import NoRecipe, RunOrchestrator, RunRequest
from vim_runner.runtime import telemetry

NO_RECIPE_EXIT = 2


def _extra_args(words: Sequence[str]) -> str:
    items = list(words)
    if items and items[0] == "--":
        items = items[1:]
    return shlex.join(items)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vim-runner", description="Build and run the file or project at hand."
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        help="Telemetry preset (default: environment-driven)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_target(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("file", help="Path of the active file")
        cmd.add_argument(
            "--filetype", default="", help="Filetype tag (default: from extension)"
        )
        cmd.add_argument("--root", default=None, help="Explicit project root")
        cmd.add_argument(
            "args", nargs="*", help="Arguments for the program (after --)"
        )

    plan = sub.add_parser("plan", help="Print the command that would run")
    add_target(plan)

    run = sub.add_parser("run", help="Run and stream output to stdout")
    add_target(run)
    run.add_argument(
        "--prompt", action="store_true", help="Ask for arguments interactively"
    )

    tui = sub.add_parser("tui", help="Open the file in the Textual host")
    tui.add_argument("file")
    tui.add_argument("--filetype", default="")
    return parser


def _request(ns: argparse.Namespace, extra: Optional[str] = None) -> RunRequest:
    return RunRequest.for_file(
        ns.file,
        filetype=ns.filetype or None,
        extra_args=_extra_args(ns.args) if extra is None else extra,
        explicit_root=ns.root,
    )


def _plan(ns: argparse.Namespace, orchestrator: RunOrchestrator) -> int:
    result = orchestrator.plan(_request(ns))
    if isinstance(result, NoRecipe):
        print(result.message, file=sys.stderr)
        return NO_RECIPE_EXIT
    print(f"cwd: {result.working_directory}")
    print(f"recipe: {result.recipe}")
    print(result.shell_command)
    return 0


async def _run(ns: argparse.Namespace, orchestrator: RunOrchestrator) -> int:
    if ns.prompt:
        orchestrator.run_with_prompt(lambda answer: _request(ns, extra=answer))
        outcome = orchestrator.session.current
        if outcome is None:
            return NO_RECIPE_EXIT
    else:
        result = orchestrator.run(_request(ns))
        if isinstance(result, NoRecipe):
            return NO_RECIPE_EXIT
        outcome = result
    return await outcome.wait()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    ns = parser.parse_args(argv)
    if ns.log_preset:
        telemetry.configure(preset=ns.log_preset)

    if ns.command == "tui":
        from vim_runner.adapters.textual.app import main as tui_main

        tui_main([ns.file] + (["--filetype", ns.filetype] if ns.filetype else []))
        return 0

    host = ConsoleHost(ns.file, filetype=ns.filetype)
    orchestrator = RunOrchestrator(host)
    if ns.command == "plan":
        return _plan(ns, orchestrator)
    return asyncio.run(_run(ns, orchestrator))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
