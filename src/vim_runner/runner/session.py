"""Reusable output surface plus the lifecycle of spawned runs."""

from __future__ import annotations

import asyncio
import codecs
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from vim_runner.host.protocol import HostPrimitives, NotifyLevel, Surface
from vim_runner.runtime import telemetry
from vim_runner.runtime.config import RunnerConfig

from .models import RunHandle, RunPlan, RunRequest

ExitCallback = Callable[[int], None]
ProcessFactory = Callable[..., Awaitable[Any]]

SPAWN_FAILURE_CODE = 127
READ_CHUNK = 4096


@dataclass
class Session:
    """Per-host run state: one surface, the most recent run.

    Owned by the host integration and handed to the orchestrator, so several
    hosts (or tests) never share a surface.
    """

    surface: Optional[Surface] = None
    current: Optional[RunHandle] = None
    spawned: int = 0

    @property
    def active(self) -> Optional[RunHandle]:
        if self.current is not None and not self.current.done:
            return self.current
        return None


class SessionManager:
    def __init__(
        self,
        host: HostPrimitives,
        session: Optional[Session] = None,
        config: Optional[RunnerConfig] = None,
        *,
        create_process: ProcessFactory = asyncio.create_subprocess_exec,
        logger_name: str | None = None,
    ) -> None:
        self._host = host
        self.session = session if session is not None else Session()
        self.config = config or RunnerConfig()
        self._create_process = create_process
        self._logger_name = logger_name

    def ensure_surface(self) -> Surface:
        surface = self.session.surface
        if surface is not None and surface.is_valid():
            surface.clear()
            surface.focus()
            telemetry.record_event(
                "surface.reuse", level="debug", logger_name=self._logger_name
            )
            return surface

        surface = self._host.open_split(
            edge=self.config.split_edge, size=self.config.split_size
        )
        surface.focus()
        self.session.surface = surface
        telemetry.record_event(
            "surface.open",
            level="debug",
            data={"edge": self.config.split_edge, "size": self.config.split_size},
            logger_name=self._logger_name,
        )
        return surface

    def spawn(
        self,
        plan: RunPlan,
        request: RunRequest,
        on_exit: Optional[ExitCallback] = None,
    ) -> RunHandle:
        """Start ``plan`` without waiting for it.

        Must be called from the host's running event loop; the exit callback
        and notification run on that same loop.
        """

        self._host.save_active_document()
        surface = self.ensure_surface()
        cwd = (
            plan.working_directory
            if self._host.is_directory(plan.working_directory)
            else request.file_dir
        )

        loop = asyncio.get_running_loop()
        handle = RunHandle(plan=plan, cwd=cwd, exit_code=loop.create_future())
        handle.exit_code.add_done_callback(
            lambda future: self._report_exit(handle, future, on_exit)
        )
        handle.task = loop.create_task(self._drive(handle, surface))

        self.session.current = handle
        self.session.spawned += 1
        telemetry.record_event(
            "run.spawn",
            data={"cwd": cwd, "recipe": plan.recipe, "command": plan.shell_command},
            logger_name=self._logger_name,
        )
        return handle

    async def _drive(self, handle: RunHandle, surface: Surface) -> None:
        try:
            try:
                process = await self._create_process(
                    self.config.shell,
                    "-lc",
                    handle.plan.shell_command,
                    cwd=handle.cwd,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.STDOUT,
                )
            except OSError as exc:
                handle.spawn_error = str(exc)
                telemetry.record_event(
                    "run.spawn_failed",
                    level="error",
                    data={"error": str(exc), "shell": self.config.shell},
                    logger_name=self._logger_name,
                )
                handle.exit_code.set_result(SPAWN_FAILURE_CODE)
                return

            await _pump(process.stdout, surface)
            code = await process.wait()
            handle.exit_code.set_result(code)
        finally:
            if not handle.exit_code.done():
                handle.exit_code.cancel()

    def _report_exit(
        self,
        handle: RunHandle,
        future: "asyncio.Future[int]",
        on_exit: Optional[ExitCallback],
    ) -> None:
        if future.cancelled():
            return
        code = future.result()
        telemetry.record_event(
            "run.exit",
            level="info" if code == 0 else "warning",
            data={"code": code, "recipe": handle.plan.recipe},
            logger_name=self._logger_name,
        )
        if handle.spawn_error is not None:
            self._host.notify(
                f"Run failed to start: {handle.spawn_error}", NotifyLevel.ERROR
            )
        elif code != 0:
            self._host.notify(f"Run failed (exit {code})", NotifyLevel.ERROR)
        else:
            self._host.notify("Run finished (exit 0)", NotifyLevel.INFO)
        if on_exit is not None:
            on_exit(code)


async def _pump(stream: Optional[asyncio.StreamReader], surface: Surface) -> None:
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        text = decoder.decode(chunk)
        if text and surface.is_valid():
            surface.write(text)
    tail = decoder.decode(b"", final=True)
    if tail and surface.is_valid():
        surface.write(tail)


__all__ = ["Session", "SessionManager", "SPAWN_FAILURE_CODE"]
