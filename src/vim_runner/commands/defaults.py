"""Built-in run keymaps and commands."""

from __future__ import annotations

from typing import Optional

from vim_runner.host.protocol import HostPrimitives
from vim_runner.runner import RunOrchestrator

from .models import Keymap, UserCommand
from .registry import CommandRegistry


def load_default_commands(
    registry: CommandRegistry, orchestrator: RunOrchestrator
) -> CommandRegistry:
    registry.register_keymap(
        Keymap(
            lhs="<leader>r",
            handler=lambda: orchestrator.run_current(""),
            description="Run current file/project",
        )
    )
    registry.register_keymap(
        Keymap(
            lhs="<leader>R",
            handler=orchestrator.run_with_prompt,
            description="Run with args…",
        )
    )
    registry.register_command(
        UserCommand(
            name="Run",
            handler=orchestrator.run_current,
            description="Run current file/project with optional arguments",
        )
    )
    registry.register_command(
        UserCommand(
            name="RunArgs",
            handler=lambda _args: orchestrator.run_with_prompt(),
            description="Prompt for arguments, then run",
            takes_args=False,
        )
    )
    return registry


def setup(
    host: HostPrimitives,
    *,
    orchestrator: Optional[RunOrchestrator] = None,
    leader: str = " ",
) -> tuple[RunOrchestrator, CommandRegistry]:
    """Wire the runner into ``host``: build the orchestrator, register and
    install the default keymaps and commands."""

    orchestrator = orchestrator or RunOrchestrator(host)
    registry = load_default_commands(CommandRegistry(leader=leader), orchestrator)
    registry.install(host)
    return orchestrator, registry


__all__ = ["load_default_commands", "setup"]
