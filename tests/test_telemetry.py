from __future__ import annotations

from contextlib import contextmanager

import pytest

from vim_runner.runtime import telemetry
from vim_runner.runtime.telemetry import PRESETS, LogSettings


class RecordingLogger:
    def __init__(self) -> None:
        self.lines: list[tuple[str, str, list[tuple[str, str]]]] = []
        self.context: dict[str, str] = {}
        self.profiled: list[str] = []
        self.components: list[str] = []

    def _with(self, level: str):
        def emit(message: str, pairs: list[tuple[str, str]]) -> None:
            self.lines.append((level, message, pairs))

        return emit

    def __getattr__(self, name: str):
        if name.endswith("_with"):
            return self._with(name[: -len("_with")])
        raise AttributeError(name)

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        del self.context[key]

    @contextmanager
    def profile(self, name: str):
        self.profiled.append(name)
        yield

    @contextmanager
    def track_component(self, name: str):
        self.components.append(name)
        yield


@pytest.fixture
def recording(monkeypatch) -> RecordingLogger:
    logger = RecordingLogger()
    monkeypatch.setitem(telemetry._LOGGER_CACHE, "tests.recording", logger)
    return logger


def test_environment_settings() -> None:
    settings = telemetry.settings_from_env(
        {
            "VIM_RUNNER_LOG_LEVEL": "debug",
            "VIM_RUNNER_DISABLE_CONSOLE": "yes",
            "VIM_RUNNER_LOG_JSON": "1",
            "VIM_RUNNER_LOG_FILE": "/tmp/runner.log",
            "VIM_RUNNER_LOG_BUFFERED": "on",
            "VIM_RUNNER_LOG_BUFFER_SIZE": "512",
        }
    )

    assert settings == LogSettings(
        level="DEBUG",
        console=False,
        json=True,
        file="/tmp/runner.log",
        buffered=True,
        buffer_size=512,
    )


def test_environment_defaults_and_bad_buffer_size() -> None:
    assert telemetry.settings_from_env({}) == LogSettings()
    settings = telemetry.settings_from_env({"VIM_RUNNER_LOG_BUFFER_SIZE": "big"})
    assert settings.buffer_size == 2048


def test_presets_keep_the_terminal_quiet_except_development() -> None:
    assert PRESETS["development"].console
    assert not PRESETS["production"].console
    performance = telemetry.preset_settings("Performance", {})
    assert performance.json and performance.file == "vim_runner-performance.log"


def test_log_file_redirects_a_preset() -> None:
    settings = telemetry.preset_settings(
        "production", {"VIM_RUNNER_LOG_FILE": "/tmp/prod.log"}
    )
    assert settings.file == "/tmp/prod.log"
    assert PRESETS["production"].file == "vim_runner.log"


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.preset_settings("verbose")
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_record_event_sends_stringified_pairs(recording: RecordingLogger) -> None:
    telemetry.record_event(
        "run.exit", level="warning", data={"code": 2}, logger_name="tests.recording"
    )

    assert recording.lines == [
        ("warning", "event::run.exit", [("event", "run.exit"), ("code", "2")])
    ]


def test_span_scopes_context_and_reports_failures(
    recording: RecordingLogger,
) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with telemetry.span(
            "runner::resolve_root",
            logger_name="tests.recording",
            component="runner",
            metadata={"path": "/repo/main.c"},
        ) as handle:
            assert recording.context == {"path": "/repo/main.c"}
            handle.add_metadata("source", "vcs")
            raise RuntimeError("boom")

    assert recording.context == {}
    assert recording.profiled == ["runner::resolve_root"]
    assert recording.components == ["runner"]
    level, message, pairs = recording.lines[-1]
    assert (level, message) == ("error", "span::fail")
    assert dict(pairs) == {
        "span": "runner::resolve_root",
        "path": "/repo/main.c",
        "source": "vcs",
        "component": "runner",
        "reason": "boom",
    }
