"""Executable Textual app that edits one file and runs it with the runner."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Callable, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.screen import ModalScreen
    from textual.widgets import Footer, Header, Input, Label, Log, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use vim_runner.adapters.textual.app"
    ) from exc

from vim_runner.commands import CommandRegistry, setup
from vim_runner.host.protocol import NotifyLevel
from vim_runner.runner import RunOrchestrator
from vim_runner.runtime import telemetry
from vim_runner.runtime.config import RunnerConfig

from .controller import TextualRunnerHost, TextualUIHooks

_SEVERITY = {
    NotifyLevel.INFO: "information",
    NotifyLevel.WARNING: "warning",
    NotifyLevel.ERROR: "error",
}


class LogSurface:
    """Run output split backed by a Textual ``Log`` widget."""

    def __init__(self, app: App, widget: Log) -> None:
        self._app = app
        self.widget = widget
        self.closed = False

    def is_valid(self) -> bool:
        return not self.closed

    def clear(self) -> None:
        self.widget.clear()

    def focus(self) -> None:
        self._app.call_after_refresh(self.widget.focus)

    def write(self, text: str) -> None:
        self.widget.write(text)

    def close(self) -> None:
        self.closed = True
        self.widget.remove()


class LinePrompt(ModalScreen[Optional[str]]):
    """Single-line text prompt; dismisses with ``None`` on escape."""

    DEFAULT_CSS = """
	LinePrompt {
		align: center middle;
	}

	LinePrompt > Vertical {
		width: 60;
		height: auto;
		border: round $accent;
		padding: 0 1;
		background: $surface;
	}
	"""

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, label: str) -> None:
        super().__init__()
        self._label = label

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self._label)
            yield Input(id="prompt-input")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)


class RunnerApp(App[None]):
    """Minimal editor host: one document, a reusable output split."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
	}

	.run-output {
		border: round $accent;
		background: $surface-darken-1;
	}
	"""

    BINDINGS = [
        ("ctrl+s", "save", "Save"),
        ("f5", "run", "Run"),
        ("f6", "run_args", "Run with args"),
        ("f2", "command_line", "Command"),
        ("f9", "close_output", "Close output"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        file_path: str,
        *,
        filetype: str = "",
        config: Optional[RunnerConfig] = None,
    ) -> None:
        super().__init__()
        self.file_path = os.path.abspath(file_path)
        self.filetype = filetype
        self.config = config
        self.host: TextualRunnerHost | None = None
        self.orchestrator: RunOrchestrator | None = None
        self.registry: CommandRegistry | None = None
        self.surface: LogSurface | None = None
        self._saved_text = ""

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        path = Path(self.file_path)
        self._saved_text = path.read_text(encoding="utf-8") if path.exists() else ""
        yield TextArea(self._saved_text, id="editor")
        yield Footer()

    def on_mount(self) -> None:
        self.title = os.path.basename(self.file_path)
        self.sub_title = os.path.dirname(self.file_path)
        hooks = TextualUIHooks(
            current_file=lambda: self.file_path,
            current_filetype=lambda: self.filetype,
            open_split=self._open_split,
            save_document=self._save_document,
            notify=self._notify,
            prompt=self._prompt,
            log=self._log_line,
        )
        self.host = TextualRunnerHost(hooks)
        self.orchestrator = RunOrchestrator(self.host, config=self.config)
        _, self.registry = setup(self.host, orchestrator=self.orchestrator)
        self.host.attach(self.registry)
        self.query_one("#editor", TextArea).focus()

    def action_save(self) -> None:
        if self._save_document():
            self._notify(f"Wrote {self.file_path}", NotifyLevel.INFO)

    def action_run(self) -> None:
        if self.registry:
            self.registry.press("<leader>r")

    def action_run_args(self) -> None:
        if self.registry:
            self.registry.press("<leader>R")

    def action_command_line(self) -> None:
        self._prompt(":", self._execute_command)

    def action_close_output(self) -> None:
        if self.surface and self.surface.is_valid():
            self.surface.close()
            self.query_one("#editor", TextArea).focus()

    def _execute_command(self, line: Optional[str]) -> None:
        if line and line.strip() and self.host:
            self.host.execute(line)

    def _open_split(self, edge: str, size: int) -> LogSurface:
        widget = Log(highlight=False, classes="run-output")
        widget.styles.dock = edge
        widget.styles.height = size
        self.mount(widget)
        self.surface = LogSurface(self, widget)
        return self.surface

    def _save_document(self) -> bool:
        text = self.query_one("#editor", TextArea).text
        if text == self._saved_text and os.path.exists(self.file_path):
            return True
        try:
            Path(self.file_path).write_text(text, encoding="utf-8")
        except OSError as exc:
            self._notify(f"Save failed: {exc}", NotifyLevel.ERROR)
            return False
        self._saved_text = text
        return True

    def _log_line(self, line: str) -> None:
        telemetry.record_event("textual.host", level="debug", data={"line": line})

    def _notify(self, message: str, level: NotifyLevel) -> None:
        self.notify(message, severity=_SEVERITY[level])

    def _prompt(self, label: str, callback: Callable[[Optional[str]], None]) -> None:
        self.push_screen(LinePrompt(label), callback)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a file and run it.")
    parser.add_argument("file", help="File to open")
    parser.add_argument(
        "--filetype",
        default=os.environ.get("VIM_RUNNER_FILETYPE", ""),
        help="Filetype tag (default: detect from the extension)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    RunnerApp(args.file, filetype=args.filetype).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
