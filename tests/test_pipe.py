import ast
import sys

import pytest

from plotbridge import (
    ExecutionError,
    InitializationError,
    MatplotlibPipe,
    SessionNotOpenError,
    render_call,
)


def test_render_scatter_with_one_option():
    statement = render_call("scatter", ([1.0, 2.0], [3.0, 4.0]), {"color": "red"})
    assert statement == "plt.scatter([1.0, 2.0], [3.0, 4.0], color='red')"


def test_render_without_arguments():
    assert render_call("figure") == "plt.figure()"


def test_render_positional_scalars():
    assert render_call("subplot", (2, 1, 2)) == "plt.subplot(2, 1, 2)"
    assert render_call("grid", (True,)) == "plt.grid(True)"


def test_render_non_finite_floats():
    assert render_call("xlim", (float("nan"), float("inf"))) == "plt.xlim(float('nan'), float('inf'))"
    assert render_call("ylim", (float("-inf"), 0.0)) == "plt.ylim(float('-inf'), 0.0)"


def test_render_quotes_are_escaped():
    statement = render_call("plot", ([1.0], [2.0]), {"label": "it's \"quoted\"\n"})
    call = ast.parse(statement).body[0].value
    assert ast.literal_eval(call.keywords[0].value) == "it's \"quoted\"\n"


def test_render_dotted_name():
    assert render_call("style.use", ("ggplot",)) == "plt.style.use('ggplot')"


def test_render_rejects_unknown_types():
    with pytest.raises(TypeError):
        render_call("plot", (object(),))


def test_operations_before_open():
    backend = MatplotlibPipe()
    with pytest.raises(SessionNotOpenError):
        backend.new_figure()
    assert backend.statements == []


def test_missing_interpreter():
    with pytest.raises(InitializationError):
        MatplotlibPipe(python="/nonexistent/bin/python").open()


def test_missing_module():
    with pytest.raises(InitializationError, match="no_such_module_plotbridge"):
        MatplotlibPipe(sys.executable, module="no_such_module_plotbridge").open()


def test_statements_sent_in_order():
    backend = MatplotlibPipe(sys.executable).open()
    try:
        backend.new_figure().set_subplot(2, 1, 1).plot([0, 1], [1, 0])
    finally:
        backend.close()
    assert backend.statements == [
        "import matplotlib.pyplot as plt",
        "plt.figure()",
        "plt.subplot(2, 1, 1)",
        "plt.plot([0.0, 1.0], [1.0, 0.0])",
    ]


def test_save_figure(tmp_path):
    path = tmp_path / "pipe.png"
    with MatplotlibPipe(sys.executable) as plt:
        (
            plt.new_figure()
            .scatter([1, 2, 3], [3, 1, 2], label="pts", color="red")
            .set_xlim((3.0, 0.0))
            .set_legend("best")
            .save_figure(path)
        )
    assert path.read_bytes().startswith(b"\x89PNG")


def test_library_error_raises_at_the_call_and_session_survives(tmp_path):
    path = tmp_path / "after-error.png"
    backend = MatplotlibPipe(sys.executable).open()
    try:
        backend.new_figure()
        with pytest.raises(ExecutionError, match="ValueError"):
            backend.plot([1.0, 2.0], [1.0])
        assert backend.is_open
        backend.scatter([1.0, 2.0], [3.0, 4.0]).save_figure(path)
    finally:
        backend.close()
    assert path.exists()


def test_run_script_globals_persist():
    with MatplotlibPipe(sys.executable) as backend:
        backend.run_script("n = 3")
        backend.run_script("assert n == 3")
        with pytest.raises(ExecutionError, match="NameError"):
            backend.run_script("undefined_name")


def test_printing_does_not_break_replies():
    with MatplotlibPipe(sys.executable) as backend:
        backend.run_script("print('{\"ok\": false}')")
        backend.run_script("import sys; sys.stdout.write('noise\\n')")
        backend.new_figure()


def test_failed_import_leaves_backend_closed():
    backend = MatplotlibPipe(sys.executable, module="no_such_module_plotbridge")
    with pytest.raises(InitializationError):
        backend.open()
    assert not backend.is_open

    backend.module = "matplotlib.pyplot"
    backend.open()
    assert backend.is_open
    backend.close()


def test_dead_child_during_open_is_an_initialization_error(monkeypatch):
    def gone(self, text):
        raise ExecutionError("child interpreter is gone: [Errno 32] Broken pipe")

    backend = MatplotlibPipe(sys.executable)
    monkeypatch.setattr(MatplotlibPipe, "run_script", gone)
    with pytest.raises(InitializationError, match="Broken pipe"):
        backend.open()
    assert not backend.is_open


def test_child_exit_closes_backend():
    backend = MatplotlibPipe(sys.executable).open()
    with pytest.raises(ExecutionError, match="exited"):
        backend.run_script("import os; os._exit(3)")
    assert not backend.is_open
    with pytest.raises(SessionNotOpenError):
        backend.new_figure()


def test_close_is_idempotent():
    backend = MatplotlibPipe(sys.executable).open()
    backend.close()
    backend.close()
    assert not backend.is_open


def test_open_twice():
    backend = MatplotlibPipe(sys.executable).open()
    try:
        with pytest.raises(InitializationError):
            backend.open()
    finally:
        backend.close()
