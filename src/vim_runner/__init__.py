"""Run the file or project open in an editor."""

__all__ = [
    "adapters",
    "commands",
    "host",
    "runner",
    "runtime",
    "cli",
]

__version__ = "0.1.0"
