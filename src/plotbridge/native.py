"""In-process backend: pyplot calls made directly on the imported module."""

from __future__ import annotations

import importlib
import logging
import threading
import weakref
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any

from . import config
from .backend import Backend
from .errors import ExecutionError, InitializationError, SessionNotOpenError

log = logging.getLogger("plotbridge.native")


@dataclass
class Session:
    """An open pyplot namespace plus the globals ``run_script`` executes in."""

    plt: ModuleType
    namespace: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.namespace.setdefault("plt", self.plt)


class MatplotlibNative(Backend):
    """Drive ``matplotlib.pyplot`` in the current interpreter.

    pyplot keeps its current-figure state per process, so only one instance
    may hold an open session at a time. The slot is a weak reference: an
    instance that is garbage collected without ``close()`` gives it up.
    """

    _active: weakref.ref | None = None
    _active_lock = threading.Lock()

    def __init__(self, module: str = config.PYPLOT_MODULE):
        self.module = module
        self._session: Session | None = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<MatplotlibNative {self.module!r} {state}>"

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise SessionNotOpenError(f"{self!r}: call open() first")
        return self._session

    def open(self) -> MatplotlibNative:
        if self._session is not None:
            raise InitializationError(f"{self!r} already has an open session")

        cls = MatplotlibNative
        with cls._active_lock:
            holder = cls._active() if cls._active is not None else None
            if holder is not None:
                raise InitializationError(
                    f"another session is already open in this process: {holder!r}"
                )
            try:
                plt = importlib.import_module(self.module)
            except Exception as exc:
                raise InitializationError(f"cannot import {self.module!r}: {exc}") from exc
            self._session = Session(plt)
            cls._active = weakref.ref(self)

        log.debug("opened session on %s", self.module)
        return self

    def close(self) -> None:
        session = self._session
        if session is None:
            return
        try:
            session.plt.close("all")
        except Exception as exc:
            raise ExecutionError(f"plt.close failed: {exc}") from exc
        finally:
            self._session = None
            self._release()
            log.debug("closed session on %s", self.module)

    def _release(self) -> None:
        cls = MatplotlibNative
        with cls._active_lock:
            if cls._active is not None and cls._active() in (self, None):
                cls._active = None

    def run_script(self, text: str) -> MatplotlibNative:
        namespace = self.session.namespace
        try:
            exec(compile(text, "<plotbridge>", "exec"), namespace)
        except Exception as exc:
            log.warning("script failed: %s", exc)
            raise ExecutionError(f"script failed: {type(exc).__name__}: {exc}") from exc
        return self

    def _forward(self, name: str, args: tuple, kwargs: dict[str, Any]) -> MatplotlibNative:
        target: Any = self.session.plt
        log.debug("plt.%s args=%r kwargs=%r", name, args, kwargs)
        try:
            for part in name.split("."):
                target = getattr(target, part)
            target(*args, **kwargs)
        except Exception as exc:
            log.warning("plt.%s failed: %s", name, exc)
            raise ExecutionError(f"plt.{name} failed: {exc}") from exc
        return self


def native(module: str = config.PYPLOT_MODULE) -> MatplotlibNative:
    """Construct and open a :class:`MatplotlibNative` in one step."""
    return MatplotlibNative(module).open()
