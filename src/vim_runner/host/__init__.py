"""Host boundary: the primitives an editor supplies to the runner."""

from .console import ConsoleHost
from .local import BufferSurface, LocalSystem, ProbeOutput
from .protocol import HostPrimitives, NotifyLevel, ProbeResult, Surface

__all__ = [
    "HostPrimitives",
    "NotifyLevel",
    "ProbeResult",
    "Surface",
    "LocalSystem",
    "ProbeOutput",
    "BufferSurface",
    "ConsoleHost",
]
