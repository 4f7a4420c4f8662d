"""Filesystem, environment and probe primitives backed by the local OS."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from vim_runner.runtime import telemetry


@dataclass(frozen=True, slots=True)
class ProbeOutput:
    returncode: int
    first_line: str = ""


class LocalSystem:
    """OS-facing half of the host primitives.

    Hosts inherit from this and add the UI half (splits, notifications,
    prompts). ``environ`` and ``path`` can be pinned for tests.
    """

    def __init__(
        self,
        *,
        environ: Optional[Mapping[str, str]] = None,
        path: Optional[str] = None,
        probe_timeout_s: float = 2.0,
    ) -> None:
        self._environ = environ
        self._path = path
        self._probe_timeout_s = probe_timeout_s

    def file_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        return bool(path) and os.path.isdir(path)

    def getenv(self, name: str) -> Optional[str]:
        env = os.environ if self._environ is None else self._environ
        return env.get(name)

    def find_executable(self, name: str) -> Optional[str]:
        return shutil.which(name, path=self._path)

    def probe(self, argv: Sequence[str], *, cwd: str) -> ProbeOutput:
        if not self.is_directory(cwd):
            telemetry.record_event(
                "probe.skipped",
                level="debug",
                data={"argv": " ".join(argv), "cwd": cwd},
            )
            return ProbeOutput(returncode=-1)
        try:
            completed = subprocess.run(
                list(argv),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                timeout=self._probe_timeout_s,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            telemetry.record_event(
                "probe.failed",
                level="debug",
                data={"argv": " ".join(argv), "error": str(exc)},
            )
            return ProbeOutput(returncode=-1)
        lines = completed.stdout.splitlines()
        return ProbeOutput(
            returncode=completed.returncode,
            first_line=lines[0].strip() if lines else "",
        )


@dataclass(eq=False)
class BufferSurface:
    """In-memory surface used by headless hosts.

    ``sink`` receives every chunk as it is written, which lets a console host
    mirror output to a terminal while the text is still kept for inspection.
    """

    name: str = "run-output"
    chunks: list[str] = field(default_factory=list)
    sink: Optional[Callable[[str], None]] = None
    valid: bool = True
    focused: bool = False
    clear_count: int = 0

    def is_valid(self) -> bool:
        return self.valid

    def clear(self) -> None:
        self.chunks.clear()
        self.clear_count += 1

    def focus(self) -> None:
        self.focused = True

    def write(self, text: str) -> None:
        self.chunks.append(text)
        if self.sink is not None:
            self.sink(text)

    def close(self) -> None:
        self.valid = False

    @property
    def text(self) -> str:
        return "".join(self.chunks)


__all__ = ["ProbeOutput", "LocalSystem", "BufferSurface"]
