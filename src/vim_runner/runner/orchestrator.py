"""Entry point tying root resolution, synthesis and the session together."""

from __future__ import annotations

from typing import Callable, Optional, Union

from vim_runner.host.protocol import HostPrimitives, NotifyLevel
from vim_runner.runtime import telemetry
from vim_runner.runtime.config import RunnerConfig

from .models import NoRecipe, RunHandle, RunPlan, RunRequest
from .root import RootResolver
from .session import ExitCallback, Session, SessionManager
from .synthesize import CommandSynthesizer

RunOutcome = Union[RunHandle, NoRecipe]


class RunOrchestrator:
    """Host -> resolve -> synthesize -> spawn -> report."""

    def __init__(
        self,
        host: HostPrimitives,
        *,
        session: Optional[Session] = None,
        config: Optional[RunnerConfig] = None,
        resolver: Optional[RootResolver] = None,
        synthesizer: Optional[CommandSynthesizer] = None,
        session_manager: Optional[SessionManager] = None,
        logger_name: str | None = "vim_runner.runner",
    ) -> None:
        self.host = host
        self._logger_name = logger_name
        self.config = config or RunnerConfig.from_lookup(host.getenv)
        self.resolver = resolver or RootResolver(
            host, markers=self.config.markers, logger_name=logger_name
        )
        self.synthesizer = synthesizer or CommandSynthesizer(
            host, self.config, logger_name=logger_name
        )
        self.sessions = session_manager or SessionManager(
            host, session, self.config, logger_name=logger_name
        )

    @property
    def session(self) -> Session:
        return self.sessions.session

    def resolve_root(self, request: RunRequest) -> str:
        explicit = request.explicit_root
        if explicit and self.host.is_directory(explicit):
            return explicit
        return self.resolver.resolve(request.file_path)

    def plan(self, request: RunRequest) -> Union[RunPlan, NoRecipe]:
        root = self.resolve_root(request)
        result = self.synthesizer.synthesize(
            request.file_type,
            root,
            request.file_path,
            request.extra_args,
            filetype_label=request.filetype_label,
        )
        telemetry.record_event(
            "run.plan",
            level="debug",
            data={
                "file": request.file_path,
                "root": root,
                "recipe": getattr(result, "recipe", "none"),
            },
            logger_name=self._logger_name,
        )
        return result

    def run(
        self, request: RunRequest, on_exit: Optional[ExitCallback] = None
    ) -> RunOutcome:
        with telemetry.span(
            "runner::run",
            logger_name=self._logger_name,
            component="runner",
            metadata={"file": request.file_path, "filetype": request.filetype_label},
        ) as handle:
            result = self.plan(request)
            if isinstance(result, NoRecipe):
                handle.add_metadata("status", "no_recipe")
                telemetry.record_event(
                    "run.no_recipe",
                    level="warning",
                    data={"filetype": result.filetype, "root": result.root},
                    logger_name=self._logger_name,
                )
                self.host.notify(result.message, NotifyLevel.WARNING)
                return result
            handle.add_metadata("recipe", result.recipe)
            return self.sessions.spawn(result, request, on_exit)

    def run_current(self, args: str = "") -> RunOutcome:
        """Run the host's active file with ``args``."""

        return self.run(self.current_request(args))

    def run_with_prompt(
        self,
        request_factory: Optional[Callable[[str], RunRequest]] = None,
        *,
        label: str = "Args: ",
    ) -> None:
        """Prompt for arguments, then run. A cancelled prompt runs with none."""

        factory = request_factory or self.current_request

        def _on_input(answer: Optional[str]) -> None:
            self.run(factory(answer or ""))

        self.host.prompt(label, _on_input)

    def current_request(self, args: str = "") -> RunRequest:
        return RunRequest.for_file(
            self.host.current_file(),
            filetype=self.host.current_filetype() or None,
            extra_args=args,
        )


__all__ = ["RunOrchestrator", "RunOutcome"]
