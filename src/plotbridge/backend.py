"""The operation set every plotting backend exposes.

Concrete backends only decide how a call reaches pyplot: in this process
(:class:`~plotbridge.native.MatplotlibNative`) or through a child
interpreter's stdin (:class:`~plotbridge.pipe.MatplotlibPipe`). Argument
marshaling and keyword construction live here, once, so call sites never
change when the backend does.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from .errors import PlotBridgeError

log = logging.getLogger("plotbridge.backend")


def options(**named: Any) -> dict[str, Any]:
    """Keyword arguments for a forwarded call, without the absent ones.

    A ``None`` value means "let pyplot use its default", so the key is left
    out instead of being forwarded.
    """
    return {key: value for key, value in named.items() if value is not None}


def as_floats(values: ArrayLike) -> list[float]:
    """Marshal an array-like into a plain list of Python floats."""
    return np.asarray(values, dtype=np.float64).tolist()


def as_limits(pair: Sequence[float]) -> tuple[float, float]:
    """Convert ``(min, max)`` to floats. Order is kept as given."""
    if len(pair) != 2:
        raise ValueError(f"axis limits need exactly two values, got {len(pair)}")
    lo, hi = pair
    return float(lo), float(hi)


class Backend(ABC):
    """Chainable pyplot operations.

    Every operation returns the backend itself, so calls can be strung
    together::

        backend.new_figure().plot(x, y, label="loss").set_legend("best")

    Failures inside pyplot raise :class:`~plotbridge.errors.ExecutionError`.
    """

    # -- session lifecycle -------------------------------------------------

    @abstractmethod
    def open(self) -> Backend:
        """Acquire the session and import the plotting namespace."""

    @abstractmethod
    def close(self) -> None:
        """Release the session. Calling it on a closed backend is a no-op."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    def run_script(self, text: str) -> Backend:
        """Execute raw statements in the session's global scope (``plt`` is bound)."""

    @abstractmethod
    def _forward(self, name: str, args: tuple, kwargs: dict[str, Any]) -> Backend:
        """Call ``plt.<name>(*args, **kwargs)`` in the session.

        ``name`` may be dotted (``"style.use"``).
        """

    def __enter__(self) -> Backend:
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type: type[BaseException] | None, *_: object) -> None:
        if exc_type is None:
            self.close()
            return
        # keep the exception raised inside the block
        try:
            self.close()
        except PlotBridgeError as exc:
            log.warning("close failed while handling %s: %s", exc_type.__name__, exc)

    # -- forwarding operations ---------------------------------------------

    def new_figure(self) -> Backend:
        return self._forward("figure", (), {})

    def save_figure(self, path: str | os.PathLike[str]) -> Backend:
        """Write the current figure; pyplot infers the format from the extension."""
        return self._forward("savefig", (os.fspath(path),), {})

    def show(self) -> Backend:
        return self._forward("show", (), {})

    def set_subplot(self, rows: int, cols: int, index: int) -> Backend:
        """Select subplot ``index`` (1-based) of a ``rows`` x ``cols`` grid."""
        return self._forward("subplot", (int(rows), int(cols), int(index)), {})

    def set_grid(self, enabled: bool) -> Backend:
        return self._forward("grid", (bool(enabled),), {})

    def set_legend(self, location: str) -> Backend:
        return self._forward("legend", (), {"loc": location})

    def set_xlim(self, limits: Sequence[float]) -> Backend:
        return self._forward("xlim", as_limits(limits), {})

    def set_ylim(self, limits: Sequence[float]) -> Backend:
        return self._forward("ylim", as_limits(limits), {})

    def scatter(
        self,
        xs: ArrayLike,
        ys: ArrayLike,
        label: str | None = None,
        color: str | None = None,
        marker: str | None = None,
    ) -> Backend:
        """Scatter ``ys`` against ``xs``. Length mismatches are left to pyplot."""
        kwargs = options(label=label, color=color, marker=marker)
        return self._forward("scatter", (as_floats(xs), as_floats(ys)), kwargs)

    def plot(
        self,
        xs: ArrayLike,
        ys: ArrayLike,
        label: str | None = None,
        color: str | None = None,
        marker: str | None = None,
        linestyle: str | None = None,
        linewidth: float | None = None,
    ) -> Backend:
        """Line plot of ``ys`` against ``xs``."""
        if linewidth is not None:
            linewidth = float(linewidth)
        kwargs = options(
            label=label,
            color=color,
            marker=marker,
            ls=linestyle,
            lw=linewidth,
        )
        return self._forward("plot", (as_floats(xs), as_floats(ys)), kwargs)

    def set_style(self, name: str) -> Backend:
        """Activate a named matplotlib style (``plt.style.use``)."""
        return self._forward("style.use", (name,), {})
