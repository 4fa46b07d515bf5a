"""Subprocess backend: pyplot statements sent to a child interpreter.

The child runs a small request loop. Each request is one JSON-encoded
script on a line of its stdin; the child executes it in a persistent
globals dict and answers on its stdout with one JSON line, ``{"ok": true}``
or ``{"ok": false, "error": "<Type>: <message>"}``. A failing statement
therefore raises on the call that sent it, and the loop keeps serving later
requests. Anything the scripts print goes to the child's stderr.
"""

from __future__ import annotations

import json
import logging
import math
import subprocess
from typing import Any

from . import config
from .backend import Backend
from .errors import ExecutionError, InitializationError, SessionNotOpenError

log = logging.getLogger("plotbridge.pipe")

REQUEST_LOOP = """\
import json, os, sys
reply = os.fdopen(os.dup(1), "w", encoding="utf-8")
os.dup2(2, 1)
sys.stdout = sys.stderr
scope = {"__name__": "__plotbridge__"}
while True:
    line = sys.stdin.readline()
    if not line:
        break
    try:
        exec(compile(json.loads(line), "<plotbridge>", "exec"), scope)
    except Exception as exc:
        result = {"ok": False, "error": f"{type(exc).__name__}: {exc}"}
    else:
        result = {"ok": True}
    reply.write(json.dumps(result) + "\\n")
    reply.flush()
"""


def _literal(value: Any) -> str:
    """Python source for a marshaled argument value."""
    if isinstance(value, bool) or value is None:
        return repr(value)
    if isinstance(value, float) and not math.isfinite(value):
        return f"float({str(value)!r})"
    if isinstance(value, list):
        return "[" + ", ".join(_literal(v) for v in value) + "]"
    if isinstance(value, (int, float, str)):
        return repr(value)
    raise TypeError(f"cannot send {type(value).__name__} to a child interpreter")


def render_call(name: str, args: tuple = (), kwargs: dict[str, Any] | None = None) -> str:
    """Render ``plt.<name>(...)`` as a single line of Python."""
    parts = [_literal(a) for a in args]
    parts += [f"{key}={_literal(value)}" for key, value in (kwargs or {}).items()]
    return f"plt.{name}({', '.join(parts)})"


class MatplotlibPipe(Backend):
    """Drive pyplot in a separate Python process over a pipe."""

    def __init__(
        self,
        python: str = config.PYTHON_EXECUTABLE,
        module: str = config.PYPLOT_MODULE,
    ):
        self.python = python
        self.module = module
        self.statements: list[str] = []
        self._child: subprocess.Popen | None = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<MatplotlibPipe {self.python!r} {self.module!r} {state}>"

    @property
    def is_open(self) -> bool:
        return self._child is not None

    def open(self) -> MatplotlibPipe:
        if self._child is not None:
            raise InitializationError(f"{self!r} already has an open session")

        try:
            self._child = subprocess.Popen(
                [self.python, "-c", REQUEST_LOOP],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                encoding="utf-8",
            )
        except OSError as exc:
            raise InitializationError(f"cannot start {self.python!r}: {exc}") from exc
        log.debug("started child pid=%s", self._child.pid)

        try:
            self.run_script(f"import {self.module} as plt")
        except ExecutionError as exc:
            self._kill()
            raise InitializationError(f"cannot import {self.module!r}: {exc}") from exc
        return self

    def run_script(self, text: str) -> MatplotlibPipe:
        child = self._child
        if child is None:
            raise SessionNotOpenError(f"{self!r}: call open() first")
        try:
            child.stdin.write(json.dumps(text) + "\n")
            child.stdin.flush()
            line = child.stdout.readline()
        except OSError as exc:
            self._kill()
            raise ExecutionError(f"child interpreter is gone: {exc}") from exc
        if not line:
            self._kill()
            raise ExecutionError("child interpreter exited unexpectedly")

        self.statements.append(text)
        reply = json.loads(line)
        if not reply["ok"]:
            log.warning("%s failed: %s", text, reply["error"])
            raise ExecutionError(reply["error"])
        return self

    def _forward(self, name: str, args: tuple, kwargs: dict[str, Any]) -> MatplotlibPipe:
        statement = render_call(name, args, kwargs)
        log.debug("send %s", statement)
        return self.run_script(statement)

    def close(self) -> None:
        """End the request loop and reap the child."""
        child = self._child
        if child is None:
            return
        self._child = None
        try:
            child.stdin.close()
        except OSError:
            log.debug("stdin of pid=%s already closed", child.pid)
        returncode = child.wait()
        child.stdout.close()
        log.debug("child pid=%s exited with %s", child.pid, returncode)
        if returncode != 0:
            raise ExecutionError(f"child interpreter exited with status {returncode}")

    def _kill(self) -> None:
        child, self._child = self._child, None
        if child is None:
            return
        child.kill()
        child.communicate()
