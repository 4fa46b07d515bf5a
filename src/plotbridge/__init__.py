"""plotbridge — chainable pyplot commands over swappable backends."""

from .backend import Backend, as_floats, as_limits, options
from .errors import (
    ExecutionError,
    InitializationError,
    PlotBridgeError,
    SessionNotOpenError,
)
from .log import setup_logger
from .native import MatplotlibNative, Session, native
from .pipe import MatplotlibPipe, render_call

__all__ = [
    "Backend",
    "MatplotlibNative",
    "MatplotlibPipe",
    "Session",
    "native",
    "options",
    "as_floats",
    "as_limits",
    "render_call",
    "setup_logger",
    "PlotBridgeError",
    "InitializationError",
    "ExecutionError",
    "SessionNotOpenError",
]
