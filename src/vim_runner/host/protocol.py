"""Primitives the editor host supplies to the runner."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional, Protocol, Sequence


class NotifyLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Surface(Protocol):
    """Output view that hosts a spawned process's stdout/stderr."""

    def is_valid(self) -> bool:
        """False once the host has destroyed the underlying view."""
        ...

    def clear(self) -> None:
        ...

    def focus(self) -> None:
        ...

    def write(self, text: str) -> None:
        """Append process output as it arrives."""
        ...


class ProbeResult(Protocol):
    returncode: int
    first_line: str


class HostPrimitives(Protocol):
    """Everything the runner needs from the editor it runs inside."""

    def current_file(self) -> str:
        ...

    def current_filetype(self) -> str:
        ...

    def file_exists(self, path: str) -> bool:
        ...

    def is_directory(self, path: str) -> bool:
        ...

    def getenv(self, name: str) -> Optional[str]:
        ...

    def find_executable(self, name: str) -> Optional[str]:
        """Return the PATH location of ``name`` or ``None``."""
        ...

    def probe(self, argv: Sequence[str], *, cwd: str) -> ProbeResult:
        """Run a short-lived command; never raises."""
        ...

    def open_split(self, *, edge: str, size: int) -> Surface:
        ...

    def save_active_document(self) -> None:
        ...

    def notify(self, message: str, level: NotifyLevel) -> None:
        ...

    def prompt(self, label: str, callback: Callable[[Optional[str]], None]) -> None:
        """Ask for one line of text; ``None`` means the prompt was cancelled."""
        ...

    def register_keymap(
        self, lhs: str, handler: Callable[[], object], *, description: str
    ) -> None:
        ...

    def register_command(
        self,
        name: str,
        handler: Callable[[str], object],
        *,
        description: str,
        takes_args: bool,
    ) -> None:
        ...


__all__ = [
    "NotifyLevel",
    "Surface",
    "ProbeResult",
    "HostPrimitives",
]
