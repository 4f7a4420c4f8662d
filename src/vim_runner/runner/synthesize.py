"""Turns a filetype + project root into a runnable shell command."""

from __future__ import annotations

import os
import tempfile
from typing import Optional, Protocol, Union

from vim_runner.runtime import telemetry
from vim_runner.runtime.config import RunnerConfig

from .compilers import CompilerResolver, ExecutableLookup
from .models import FileType, NoRecipe, RunPlan
from .shell import command_word, join_quoted, shell_quote, split_args, with_args

SynthesisResult = Union[RunPlan, NoRecipe]


class SynthesisProbes(ExecutableLookup, Protocol):
    def file_exists(self, path: str) -> bool: ...


class CommandSynthesizer:
    """First matching recipe wins: Makefile, interpreter, compiler."""

    def __init__(
        self,
        system: SynthesisProbes,
        config: Optional[RunnerConfig] = None,
        *,
        compilers: Optional[CompilerResolver] = None,
        logger_name: str | None = None,
    ) -> None:
        self._system = system
        self.config = config or RunnerConfig()
        self._compilers = compilers or CompilerResolver(system, self.config)
        self._logger_name = logger_name

    def synthesize(
        self,
        file_type: FileType,
        root: str,
        file: str,
        extra_args: str = "",
        *,
        filetype_label: Optional[str] = None,
    ) -> SynthesisResult:
        with telemetry.span(
            "runner::synthesize",
            logger_name=self._logger_name,
            component="runner",
            metadata={"filetype": file_type.value, "root": root},
        ) as handle:
            result = self._synthesize(file_type, root, file, extra_args)
            if isinstance(result, NoRecipe):
                result = NoRecipe(filetype=filetype_label or file_type.value, root=root)
                handle.add_metadata("recipe", "none")
            else:
                handle.add_metadata("recipe", result.recipe)
            return result

    def _synthesize(
        self, file_type: FileType, root: str, file: str, extra_args: str
    ) -> SynthesisResult:
        if self._system.file_exists(os.path.join(root, "Makefile")):
            return RunPlan(self.make_command(extra_args), root, "make")

        if file_type.is_interpreted:
            command = f"{command_word(self.config.interpreter)} {shell_quote(file)}"
            return RunPlan(with_args(command, extra_args), root, "interpreter")

        if file_type.is_compiled:
            return RunPlan(
                self.compile_command(file_type, file, extra_args), root, "compile"
            )

        return NoRecipe(filetype=file_type.value, root=root)

    def make_command(self, extra_args: str) -> str:
        make = command_word(self.config.make)
        run_target = with_args(f"{make} run", extra_args)
        default_target = with_args(make, extra_args)
        return f"({run_target}) || ({default_target})"

    def compile_command(self, file_type: FileType, file: str, extra_args: str) -> str:
        compiler = command_word(self._compilers.resolve(file_type))
        flags = (
            self.config.cpp_flags if file_type is FileType.CPP else self.config.c_flags
        )
        binary = shell_quote(self.binary_path(file))
        parts = [compiler]
        quoted_flags = join_quoted(split_args(flags))
        if quoted_flags:
            parts.append(quoted_flags)
        parts.extend([shell_quote(file), "-o", binary])
        return f"{' '.join(parts)} && {with_args(binary, extra_args)}"

    def binary_path(self, file: str) -> str:
        """Deterministic output path: one binary per source base name."""

        stem, _ = os.path.splitext(os.path.basename(file))
        directory = self.config.temp_dir or tempfile.gettempdir()
        return os.path.join(directory, f"{self.config.binary_prefix}{stem}")


__all__ = ["CommandSynthesizer", "SynthesisResult"]
