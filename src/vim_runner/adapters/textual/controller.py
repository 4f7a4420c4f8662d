"""Host implementation that forwards UI primitives to Textual callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from vim_runner.commands.registry import CommandRegistry, UnknownCommandError
from vim_runner.host.local import LocalSystem
from vim_runner.host.protocol import NotifyLevel, Surface


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the app supplies so the runner can reach its widgets."""

    current_file: Callable[[], str]
    open_split: Callable[[str, int], Surface]
    current_filetype: Callable[[], str] = lambda: ""
    save_document: Callable[[], object] = _noop
    notify: Callable[[str, NotifyLevel], None] = _noop
    prompt: Callable[[str, Callable[[Optional[str]], None]], None] = _noop
    # Optional realtime log callback for debug lines
    log: Callable[[str], None] = _noop


class TextualRunnerHost(LocalSystem):
    """Bridges ``HostPrimitives`` onto a Textual app through hooks."""

    def __init__(self, hooks: TextualUIHooks, **kwargs) -> None:
        super().__init__(**kwargs)
        self.hooks = hooks
        self.keymaps: Dict[str, Callable[[], object]] = {}
        self.commands: Dict[str, Callable[[str], object]] = {}
        self.descriptions: Dict[str, str] = {}
        self.registry: Optional[CommandRegistry] = None

    def attach(self, registry: CommandRegistry) -> None:
        """Command lines typed into the app are evaluated by ``registry``."""

        self.registry = registry

    def current_file(self) -> str:
        return self.hooks.current_file()

    def current_filetype(self) -> str:
        return self.hooks.current_filetype()

    def open_split(self, *, edge: str, size: int) -> Surface:
        self._log("split ->", edge=edge, size=size)
        return self.hooks.open_split(edge, size)

    def save_active_document(self) -> None:
        self._log("save ->", file=self.current_file())
        self.hooks.save_document()

    def notify(self, message: str, level: NotifyLevel) -> None:
        self._log("notify ->", level=level.value, message=message)
        self.hooks.notify(message, level)

    def prompt(self, label: str, callback: Callable[[Optional[str]], None]) -> None:
        self.hooks.prompt(label, callback)

    def register_keymap(
        self, lhs: str, handler: Callable[[], object], *, description: str
    ) -> None:
        self.keymaps[lhs] = handler
        self.descriptions[lhs] = description

    def register_command(
        self,
        name: str,
        handler: Callable[[str], object],
        *,
        description: str,
        takes_args: bool,
    ) -> None:
        del takes_args
        self.commands[name] = handler
        self.descriptions[name] = description

    def press(self, lhs: str) -> object:
        handler = self.keymaps.get(lhs)
        if handler is None:
            raise KeyError(f"No keymap for '{lhs}'")
        self._log("key ->", lhs=lhs)
        return handler()

    def execute(self, line: str) -> object:
        if self.registry is None:
            raise RuntimeError("no command registry attached")
        self._log("command ->", line=line)
        try:
            return self.registry.execute(line)
        except UnknownCommandError as exc:
            self.notify(f"Not an editor command: {exc.name}", NotifyLevel.ERROR)
            return None

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix] + [f"{key}={value!r}" for key, value in fields.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualRunnerHost", "TextualUIHooks"]
