"""Run the active file or project: root detection, recipes, output session."""

from .compilers import CompilerResolver
from .models import FileType, NoRecipe, RunHandle, RunPlan, RunRequest
from .orchestrator import RunOrchestrator, RunOutcome
from .root import RootResolver
from .session import Session, SessionManager
from .shell import shell_quote
from .synthesize import CommandSynthesizer

__all__ = [
    "FileType",
    "RunRequest",
    "RunPlan",
    "NoRecipe",
    "RunHandle",
    "RootResolver",
    "CompilerResolver",
    "CommandSynthesizer",
    "Session",
    "SessionManager",
    "RunOrchestrator",
    "RunOutcome",
    "shell_quote",
]
