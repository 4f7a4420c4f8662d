"""Telemetry for the runner, built directly on telelog.

Public surface:

``configure(...)`` -- adopt an explicit telelog config or a named preset
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured ``event::<name>`` line
``span(name, ...)`` -- profile a block and optionally track it as a component

Settings are plain ``LogSettings`` values so presets and the environment
resolve to the same shape before anything touches telelog.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

from .config import ENV_PREFIX

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = "vim_runner"
DEFAULT_LEVEL = "WARNING"
DEFAULT_BUFFER_SIZE = 2048
_TRUE = {"1", "true", "yes", "on"}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


@dataclass(frozen=True, slots=True)
class LogSettings:
    level: str = DEFAULT_LEVEL
    console: bool = True
    color: bool = True
    json: bool = False
    file: Optional[str] = None
    buffered: bool = False
    buffer_size: int = DEFAULT_BUFFER_SIZE


# Runs happen inside an editor session; only development writes to the terminal.
PRESETS: Dict[str, LogSettings] = {
    "development": LogSettings(level="DEBUG"),
    "production": LogSettings(
        level="INFO", console=False, file="vim_runner.log", buffered=True
    ),
    "performance": LogSettings(
        level="DEBUG",
        console=False,
        json=True,
        file="vim_runner-performance.log",
        buffered=True,
    ),
}


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> LogSettings:
    env = os.environ if environ is None else environ

    def get(name: str) -> Optional[str]:
        return env.get(f"{ENV_PREFIX}{name}") or None

    def flag(name: str) -> bool:
        return (get(name) or "").lower() in _TRUE

    try:
        buffer_size = int(get("LOG_BUFFER_SIZE") or DEFAULT_BUFFER_SIZE)
    except ValueError:
        buffer_size = DEFAULT_BUFFER_SIZE

    return LogSettings(
        level=(get("LOG_LEVEL") or DEFAULT_LEVEL).upper(),
        console=not flag("DISABLE_CONSOLE"),
        color=not flag("NO_COLOR"),
        json=flag("LOG_JSON"),
        file=get("LOG_FILE"),
        buffered=flag("LOG_BUFFERED"),
        buffer_size=buffer_size,
    )


def preset_settings(
    preset: str, environ: Optional[Mapping[str, str]] = None
) -> LogSettings:
    """Named preset; ``VIM_RUNNER_LOG_FILE`` still redirects its file."""

    try:
        settings = PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(f"Unknown preset '{preset}'.") from None
    log_file = settings_from_env(environ).file
    return replace(settings, file=log_file) if log_file else settings


def build_config(settings: LogSettings) -> Any:
    config = tl.Config()
    config.with_min_level(settings.level)
    config.with_console_output(settings.console)
    if settings.console:
        config.with_colored_output(settings.color)
    if settings.json:
        config.with_json_format(True)
    if settings.file:
        config.with_file_output(settings.file)
    if settings.buffered:
        config.with_buffering(True)
        config.with_buffer_size(settings.buffer_size)
    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` is an explicit ``tl.Config``; ``preset`` names one of
    ``PRESETS``. With neither, settings come from the environment.
    """

    global _ACTIVE_CONFIG
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = build_config(preset_settings(preset))
    elif config is None:
        config = build_config(settings_from_env())

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = build_config(settings_from_env())
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        pairs = [(str(key), _text(value)) for key, value in payload.items()]
        with_data(message, pairs)
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured event line such as ``event::run.exit``."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block through ``logger.profile``.

    ``metadata`` is attached as logger context for the duration of the block;
    an exception escaping the block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    handle = SpanHandle(logger=log, span_name=name, component_name=component)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


configure()

__all__ = [
    "LogSettings",
    "PRESETS",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "settings_from_env",
    "span",
]
