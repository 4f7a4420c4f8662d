"""Dataclasses describing run requests, plans and their outcomes."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional

Recipe = Literal["make", "interpreter", "compile"]


class FileType(str, Enum):
    """Closed set of filetypes the synthesizer knows about."""

    C = "c"
    CPP = "cpp"
    PYTHON = "python"
    UNKNOWN = "unknown"

    @property
    def is_interpreted(self) -> bool:
        return self is FileType.PYTHON

    @property
    def is_compiled(self) -> bool:
        return self in (FileType.C, FileType.CPP)

    @classmethod
    def parse(cls, tag: Optional[str]) -> "FileType":
        if not tag:
            return cls.UNKNOWN
        return _TAG_ALIASES.get(tag.strip().lower(), cls.UNKNOWN)

    @classmethod
    def detect(cls, path: str) -> "FileType":
        _, ext = os.path.splitext(path)
        return _EXTENSIONS.get(ext.lower(), cls.UNKNOWN)


_TAG_ALIASES: dict[str, FileType] = {
    "c": FileType.C,
    "cpp": FileType.CPP,
    "c++": FileType.CPP,
    "cxx": FileType.CPP,
    "python": FileType.PYTHON,
    "python3": FileType.PYTHON,
    "py": FileType.PYTHON,
}

_EXTENSIONS: dict[str, FileType] = {
    ".c": FileType.C,
    ".h": FileType.C,
    ".cc": FileType.CPP,
    ".cpp": FileType.CPP,
    ".cxx": FileType.CPP,
    ".c++": FileType.CPP,
    ".hh": FileType.CPP,
    ".hpp": FileType.CPP,
    ".hxx": FileType.CPP,
    ".py": FileType.PYTHON,
    ".pyw": FileType.PYTHON,
}


@dataclass(frozen=True, slots=True)
class RunRequest:
    """Everything the orchestrator needs for one invocation."""

    file_path: str
    file_type: FileType = FileType.UNKNOWN
    extra_args: str = ""
    explicit_root: Optional[str] = None
    filetype_label: str = ""

    def __post_init__(self) -> None:
        if not self.file_path:
            raise ValueError("file_path cannot be empty")
        object.__setattr__(self, "file_path", os.path.abspath(self.file_path))
        if not isinstance(self.file_type, FileType):
            object.__setattr__(self, "file_type", FileType.parse(str(self.file_type)))
        if not self.filetype_label:
            object.__setattr__(self, "filetype_label", self.file_type.value)
        object.__setattr__(self, "extra_args", self.extra_args or "")

    @property
    def file_dir(self) -> str:
        return os.path.dirname(self.file_path)

    @classmethod
    def for_file(
        cls,
        path: str,
        *,
        filetype: Optional[str] = None,
        extra_args: str = "",
        explicit_root: Optional[str] = None,
    ) -> "RunRequest":
        """Build a request, detecting the filetype from the extension when no
        host tag is given."""

        file_type = FileType.parse(filetype) if filetype else FileType.detect(path)
        return cls(
            file_path=path,
            file_type=file_type,
            extra_args=extra_args,
            explicit_root=explicit_root,
            filetype_label=filetype or file_type.value,
        )


@dataclass(frozen=True, slots=True)
class RunPlan:
    """Complete shell command plus the directory to run it from."""

    shell_command: str
    working_directory: str
    recipe: Recipe

    def __post_init__(self) -> None:
        if not self.shell_command:
            raise ValueError("shell_command cannot be empty")
        if not self.working_directory:
            raise ValueError("working_directory cannot be empty")


@dataclass(frozen=True, slots=True)
class NoRecipe:
    """Synthesis outcome when no build/run rule matches."""

    filetype: str
    root: str

    @property
    def message(self) -> str:
        return f"No run recipe for filetype: {self.filetype}"


@dataclass(slots=True)
class RunHandle:
    """One spawned run; ``exit_code`` resolves exactly once."""

    plan: RunPlan
    cwd: str
    exit_code: "asyncio.Future[int]"
    task: Optional["asyncio.Task[None]"] = None
    spawn_error: Optional[str] = field(default=None)

    @property
    def done(self) -> bool:
        return self.exit_code.done()

    async def wait(self) -> int:
        return await self.exit_code


__all__ = [
    "FileType",
    "Recipe",
    "RunRequest",
    "RunPlan",
    "NoRecipe",
    "RunHandle",
]
