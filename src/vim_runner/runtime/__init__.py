"""Runtime services: telemetry and configuration."""

from .config import RunnerConfig

__all__ = ["RunnerConfig", "telemetry"]
