"""Ordered-fallback selection of a C/C++ compiler executable."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from vim_runner.runtime import telemetry
from vim_runner.runtime.config import RunnerConfig

from .models import FileType


class ExecutableLookup(Protocol):
    def find_executable(self, name: str) -> Optional[str]: ...


@dataclass(frozen=True, slots=True)
class Toolchain:
    override: Optional[str]
    candidates: tuple[str, ...]
    fallback: str


class CompilerResolver:
    """Picks a compiler: env override, then candidates on PATH, then fallback.

    Always returns a name; a wrong guess surfaces later as a spawn error.
    """

    def __init__(self, lookup: ExecutableLookup, config: RunnerConfig) -> None:
        self._lookup = lookup
        self._toolchains = {
            FileType.C: Toolchain(
                config.cc_override, config.cc_candidates, config.cc_fallback
            ),
            FileType.CPP: Toolchain(
                config.cxx_override, config.cxx_candidates, config.cxx_fallback
            ),
        }

    def resolve(self, file_type: FileType) -> str:
        toolchain = self._toolchains.get(file_type)
        if toolchain is None:
            raise ValueError(f"'{file_type.value}' is not a compiled filetype")

        name, source = self._select(toolchain)
        telemetry.record_event(
            "run.compiler",
            level="debug",
            data={"filetype": file_type.value, "compiler": name, "source": source},
        )
        return name

    def _select(self, toolchain: Toolchain) -> tuple[str, str]:
        if toolchain.override and self._lookup.find_executable(toolchain.override):
            return toolchain.override, "env"
        found = first_on_path(self._lookup, toolchain.candidates)
        if found is not None:
            return found, "path"
        return toolchain.fallback, "fallback"


def first_on_path(lookup: ExecutableLookup, names: Sequence[str]) -> Optional[str]:
    for name in names:
        if lookup.find_executable(name):
            return name
    return None


__all__ = ["CompilerResolver", "Toolchain", "first_on_path"]
