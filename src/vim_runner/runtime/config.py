"""Environment-driven runner configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

ENV_PREFIX = "VIM_RUNNER_"

PROJECT_MARKERS: tuple[str, ...] = (
    "Makefile",
    "CMakeLists.txt",
    "pyproject.toml",
    "package.json",
    "go.mod",
    "Cargo.toml",
)

DEFAULT_CPP_FLAGS = "-std=c++20 -O2 -Wall -Wextra -Wpedantic"
DEFAULT_C_FLAGS = "-std=c17 -O2 -Wall -Wextra"

# Versioned toolchains first; the last entry is the generic name.
DEFAULT_CC_CANDIDATES: tuple[str, ...] = (
    "gcc-14",
    "gcc-13",
    "gcc-12",
    "clang-18",
    "clang-17",
    "gcc",
    "clang",
    "cc",
)
DEFAULT_CXX_CANDIDATES: tuple[str, ...] = (
    "g++-14",
    "g++-13",
    "g++-12",
    "clang++-18",
    "clang++-17",
    "g++",
    "clang++",
    "c++",
)


def _split_list(raw: Optional[str], fallback: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return fallback
    values = tuple(part.strip() for part in raw.split(",") if part.strip())
    return values or fallback


def _positive_int(raw: Optional[str], fallback: int) -> int:
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    """Tunables consumed by the resolver, synthesizer and session manager."""

    markers: tuple[str, ...] = PROJECT_MARKERS
    interpreter: str = "python3"
    make: str = "make"
    cpp_flags: str = DEFAULT_CPP_FLAGS
    c_flags: str = DEFAULT_C_FLAGS
    cc_override: Optional[str] = None
    cxx_override: Optional[str] = None
    cc_candidates: tuple[str, ...] = DEFAULT_CC_CANDIDATES
    cxx_candidates: tuple[str, ...] = DEFAULT_CXX_CANDIDATES
    cc_fallback: str = "cc"
    cxx_fallback: str = "g++"
    binary_prefix: str = "vim_runner_"
    temp_dir: Optional[str] = None
    shell: str = "/bin/bash"
    split_size: int = 15
    split_edge: str = "bottom"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunnerConfig":
        env = os.environ if environ is None else environ
        return cls.from_lookup(env.get)

    @classmethod
    def from_lookup(cls, getenv: Callable[[str], Optional[str]]) -> "RunnerConfig":
        """Build from a variable lookup such as a host's ``getenv``."""

        def get(name: str) -> Optional[str]:
            return getenv(f"{ENV_PREFIX}{name}") or None

        return cls(
            interpreter=get("PYTHON") or "python3",
            cpp_flags=get("CPP_FLAGS") or DEFAULT_CPP_FLAGS,
            cc_override=get("CC"),
            cxx_override=get("CXX"),
            cc_candidates=_split_list(get("CC_CANDIDATES"), DEFAULT_CC_CANDIDATES),
            cxx_candidates=_split_list(get("CXX_CANDIDATES"), DEFAULT_CXX_CANDIDATES),
            temp_dir=get("TMPDIR"),
            shell=get("SHELL") or "/bin/bash",
            split_size=_positive_int(get("SPLIT_SIZE"), 15),
        )


__all__ = [
    "ENV_PREFIX",
    "PROJECT_MARKERS",
    "DEFAULT_CPP_FLAGS",
    "DEFAULT_C_FLAGS",
    "DEFAULT_CC_CANDIDATES",
    "DEFAULT_CXX_CANDIDATES",
    "RunnerConfig",
]
