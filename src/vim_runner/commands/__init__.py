"""Keymaps and user commands exposing the runner to a host."""

from .models import Keymap, UserCommand
from .registry import (
    CommandConflictError,
    CommandRegistry,
    RegistryStats,
    UnknownCommandError,
)
from .defaults import load_default_commands, setup

__all__ = [
    "Keymap",
    "UserCommand",
    "CommandRegistry",
    "CommandConflictError",
    "RegistryStats",
    "UnknownCommandError",
    "load_default_commands",
    "setup",
]
