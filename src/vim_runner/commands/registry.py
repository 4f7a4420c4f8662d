"""Registry for the runner's keybindings and user commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from vim_runner.host.protocol import HostPrimitives
from vim_runner.runtime.telemetry import span

from .models import Keymap, UserCommand, expand_leader


@dataclass(slots=True)
class RegistryStats:
    keymap_count: int
    command_count: int


class CommandConflictError(RuntimeError):
    """Raised when a keymap or command name is already taken."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} '{name}' is already registered")
        self.kind = kind
        self.name = name


class UnknownCommandError(KeyError):
    """Raised when a command line names no registered command."""

    def __init__(self, name: str):
        super().__init__(f"Command '{name}' is not registered")
        self.name = name


class CommandRegistry:
    """Owns keymaps and commands; ``install`` hands them to a host."""

    def __init__(self, *, leader: str = " ", logger_name: str | None = None) -> None:
        self.leader = leader
        self._keymaps: Dict[Tuple[str, str], Keymap] = {}
        self._commands: Dict[str, UserCommand] = {}
        self._logger_name = logger_name

    def register_keymap(self, keymap: Keymap, *, replace: bool = False) -> Keymap:
        with span(
            "commands::register_keymap",
            logger_name=self._logger_name,
            component="commands",
            metadata={"lhs": keymap.lhs, "mode": keymap.mode},
        ) as handle:
            if keymap.key in self._keymaps and not replace:
                handle.add_metadata("conflict", keymap.lhs)
                raise CommandConflictError("keymap", keymap.lhs)
            self._keymaps[keymap.key] = keymap
            return keymap

    def register_command(
        self, command: UserCommand, *, replace: bool = False
    ) -> UserCommand:
        with span(
            "commands::register_command",
            logger_name=self._logger_name,
            component="commands",
            metadata={"command": command.name},
        ) as handle:
            if command.name in self._commands and not replace:
                handle.add_metadata("conflict", command.name)
                raise CommandConflictError("command", command.name)
            self._commands[command.name] = command
            return command

    def get_command(self, name: str) -> UserCommand:
        try:
            return self._commands[name]
        except KeyError:
            raise UnknownCommandError(name) from None

    def find_keymap(self, lhs: str, *, mode: str = "n") -> Optional[Keymap]:
        keymap = self._keymaps.get((mode, lhs))
        if keymap is not None:
            return keymap
        for candidate in self._keymaps.values():
            if candidate.mode != mode:
                continue
            if expand_leader(candidate.lhs, self.leader) == lhs:
                return candidate
        return None

    def press(self, lhs: str, *, mode: str = "n") -> object:
        keymap = self.find_keymap(lhs, mode=mode)
        if keymap is None:
            raise KeyError(f"No keymap for '{lhs}' in mode '{mode}'")
        return keymap.handler()

    def execute(self, line: str) -> object:
        """Evaluate ``Name args...``; a leading ``:`` is accepted."""

        text = line.strip().lstrip(":").strip()
        if not text:
            raise ValueError("empty command line")
        name, _, args = text.partition(" ")
        return self.get_command(name)(args.strip())

    def iter_keymaps(self) -> Iterator[Keymap]:
        yield from self._keymaps.values()

    def iter_commands(self) -> Iterator[UserCommand]:
        yield from self._commands.values()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            keymap_count=len(self._keymaps), command_count=len(self._commands)
        )

    def install(self, host: HostPrimitives) -> None:
        for keymap in self._keymaps.values():
            host.register_keymap(
                expand_leader(keymap.lhs, self.leader),
                keymap.handler,
                description=keymap.description,
            )
        for command in self._commands.values():
            host.register_command(
                command.name,
                command,
                description=command.description,
                takes_args=command.takes_args,
            )


__all__ = [
    "CommandRegistry",
    "CommandConflictError",
    "RegistryStats",
    "UnknownCommandError",
]
