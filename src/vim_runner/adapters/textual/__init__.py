"""Textual host integration. ``app`` requires the ``textual`` package."""

from .controller import TextualRunnerHost, TextualUIHooks

__all__ = ["TextualRunnerHost", "TextualUIHooks"]
