from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from vim_runner.host import BufferSurface, LocalSystem, NotifyLevel, ProbeOutput


class FakeHost(LocalSystem):
    """Real filesystem, scripted VCS probe, PATH and UI."""

    def __init__(
        self,
        file_path: str = "",
        *,
        filetype: str = "",
        vcs_root: Optional[str] = None,
        executables: Sequence[str] = (),
        prompt_answer: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__(environ=environ or {})
        self.file_path = file_path
        self.filetype = filetype
        self.vcs_root = vcs_root
        self.executables = set(executables)
        self.prompt_answer = prompt_answer
        self.probes: List[tuple[tuple[str, ...], str]] = []
        self.surfaces: List[BufferSurface] = []
        self.notifications: List[tuple[NotifyLevel, str]] = []
        self.saves = 0
        self.prompts: List[str] = []
        self.keymaps: Dict[str, Callable[[], object]] = {}
        self.commands: Dict[str, Callable[[str], object]] = {}

    def current_file(self) -> str:
        return self.file_path

    def current_filetype(self) -> str:
        return self.filetype

    def find_executable(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.executables else None

    def probe(self, argv: Sequence[str], *, cwd: str) -> ProbeOutput:
        self.probes.append((tuple(argv), cwd))
        if self.vcs_root is None:
            return ProbeOutput(returncode=128)
        return ProbeOutput(returncode=0, first_line=self.vcs_root + "\n")

    def open_split(self, *, edge: str, size: int) -> BufferSurface:
        surface = BufferSurface(name=f"{edge}:{size}")
        self.surfaces.append(surface)
        return surface

    def save_active_document(self) -> None:
        self.saves += 1

    def notify(self, message: str, level: NotifyLevel) -> None:
        self.notifications.append((level, message))

    def prompt(self, label: str, callback) -> None:
        self.prompts.append(label)
        callback(self.prompt_answer)

    def register_keymap(self, lhs: str, handler, *, description: str) -> None:
        self.keymaps[lhs] = handler

    def register_command(
        self, name: str, handler, *, description: str, takes_args: bool
    ) -> None:
        self.commands[name] = handler


class FakeProcess:
    def __init__(self, output: bytes, code: int) -> None:
        self.stdout = asyncio.StreamReader()
        self.stdout.feed_data(output)
        self.stdout.feed_eof()
        self.returncode = code

    async def wait(self) -> int:
        return self.returncode


class FakeProcessFactory:
    """Stands in for ``asyncio.create_subprocess_exec``."""

    def __init__(
        self, output: bytes = b"", code: int = 0, error: Optional[OSError] = None
    ) -> None:
        self.output = output
        self.code = code
        self.error = error
        self.calls: List[tuple[tuple[Any, ...], Dict[str, Any]]] = []

    async def __call__(self, *args: Any, **kwargs: Any) -> FakeProcess:
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return FakeProcess(self.output, self.code)


def write(path, text: str = "") -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return str(path)
