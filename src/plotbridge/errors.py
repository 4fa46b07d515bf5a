"""Exceptions raised across the bridge boundary."""


class PlotBridgeError(Exception):
    """Base class for every plotbridge failure."""


class InitializationError(PlotBridgeError):
    """The session or the plotting namespace could not be acquired."""


class ExecutionError(PlotBridgeError):
    """A forwarded call raised inside the plotting runtime.

    The session stays open; later calls may still succeed.
    """


class SessionNotOpenError(ExecutionError):
    """An operation was attempted before open() or after close()."""
