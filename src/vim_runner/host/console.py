"""Headless host that drives the runner from a plain terminal."""

from __future__ import annotations

import sys
from typing import Callable, Dict, Optional, TextIO

from .local import BufferSurface, LocalSystem
from .protocol import NotifyLevel


class ConsoleHost(LocalSystem):
    """Host with one fixed "active" file and stdout as its output split."""

    def __init__(
        self,
        file_path: str,
        *,
        filetype: str = "",
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        read_line: Callable[[str], str] = input,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.filetype = filetype
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._read_line = read_line
        self.notifications: list[tuple[NotifyLevel, str]] = []
        self.keymaps: Dict[str, Callable[[], object]] = {}
        self.commands: Dict[str, Callable[[str], object]] = {}
        self.surfaces: list[BufferSurface] = []

    def current_file(self) -> str:
        return self.file_path

    def current_filetype(self) -> str:
        return self.filetype

    def open_split(self, *, edge: str, size: int) -> BufferSurface:
        del edge, size  # a terminal has no splits
        surface = BufferSurface(sink=self._write_out)
        self.surfaces.append(surface)
        return surface

    def save_active_document(self) -> None:
        # The file on disk is the only copy.
        return None

    def notify(self, message: str, level: NotifyLevel) -> None:
        self.notifications.append((level, message))
        print(f"[{level.value}] {message}", file=self._stderr)

    def prompt(self, label: str, callback: Callable[[Optional[str]], None]) -> None:
        try:
            answer: Optional[str] = self._read_line(label)
        except EOFError:
            answer = None
        callback(answer)

    def register_keymap(
        self, lhs: str, handler: Callable[[], object], *, description: str
    ) -> None:
        del description
        self.keymaps[lhs] = handler

    def register_command(
        self,
        name: str,
        handler: Callable[[str], object],
        *,
        description: str,
        takes_args: bool,
    ) -> None:
        del description, takes_args
        self.commands[name] = handler

    def _write_out(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()


__all__ = ["ConsoleHost"]
