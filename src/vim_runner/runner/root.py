"""Project root detection: VCS toplevel, then marker files, then the file's dir."""

from __future__ import annotations

import os
from typing import Optional, Protocol, Sequence

from vim_runner.host.protocol import ProbeResult
from vim_runner.runtime import telemetry
from vim_runner.runtime.config import PROJECT_MARKERS


class RootProbes(Protocol):
    def file_exists(self, path: str) -> bool: ...

    def is_directory(self, path: str) -> bool: ...

    def probe(self, argv: Sequence[str], *, cwd: str) -> ProbeResult: ...


class RootResolver:
    """Finds the logical project root for a file. Never raises."""

    def __init__(
        self,
        system: RootProbes,
        *,
        markers: Sequence[str] = PROJECT_MARKERS,
        vcs_command: Sequence[str] = ("git", "rev-parse", "--show-toplevel"),
        logger_name: str | None = None,
    ) -> None:
        self._system = system
        self._markers = tuple(markers)
        self._vcs_command = tuple(vcs_command)
        self._logger_name = logger_name

    def resolve(self, file_path: str) -> str:
        start = os.path.dirname(os.path.abspath(file_path))
        with telemetry.span(
            "runner::resolve_root",
            logger_name=self._logger_name,
            component="runner",
            metadata={"path": file_path},
        ) as handle:
            root = self.vcs_root(start)
            source = "vcs"
            if root is None:
                root = self.marker_root(start)
                source = "marker"
            if root is None:
                root = start
                source = "fallback"
            handle.add_metadata("source", source)
        telemetry.record_event(
            "run.resolve",
            level="debug",
            data={"root": root, "source": source},
            logger_name=self._logger_name,
        )
        return root

    def vcs_root(self, directory: str) -> Optional[str]:
        # The query must run inside the file's own directory, never the cwd.
        if not self._system.is_directory(directory):
            return None
        result = self._system.probe(self._vcs_command, cwd=directory)
        if result.returncode != 0:
            return None
        candidate = result.first_line.strip()
        if candidate and self._system.is_directory(candidate):
            return candidate
        return None

    def marker_root(self, directory: str) -> Optional[str]:
        current = directory
        while current:
            if any(
                self._system.file_exists(os.path.join(current, marker))
                for marker in self._markers
            ):
                return current
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent
        return None


__all__ = ["RootResolver", "RootProbes"]
