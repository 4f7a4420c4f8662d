"""Dataclasses describing keybindings and user commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

_COMMAND_NAME = re.compile(r"[A-Z][A-Za-z0-9]*")


@dataclass(frozen=True, slots=True)
class Keymap:
    """Normal-mode key sequence bound to a zero-argument handler."""

    lhs: str
    handler: Callable[[], object]
    description: str = ""
    mode: str = "n"

    def __post_init__(self) -> None:
        if not self.lhs:
            raise ValueError("keymap lhs cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    @property
    def key(self) -> tuple[str, str]:
        return (self.mode, self.lhs)


@dataclass(frozen=True, slots=True)
class UserCommand:
    """Ex-style command receiving its raw argument string."""

    name: str
    handler: Callable[[str], object]
    description: str = ""
    takes_args: bool = True

    def __post_init__(self) -> None:
        # Editors reserve lowercase names for built-ins.
        if not _COMMAND_NAME.fullmatch(self.name or ""):
            raise ValueError(
                f"command name '{self.name}' must start with an uppercase letter"
            )
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, args: str = "") -> object:
        return self.handler(args if self.takes_args else "")


def expand_leader(lhs: str, leader: str) -> str:
    return lhs.replace("<leader>", leader).replace("<Leader>", leader)


__all__ = ["Keymap", "UserCommand", "expand_leader"]
