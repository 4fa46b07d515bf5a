import os
import sys
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from plotbridge import MatplotlibNative  # noqa: E402

FAKE_MODULE = "fake_pyplot"


@pytest.fixture
def fake_plt(monkeypatch):
    """A MagicMock registered as an importable pyplot stand-in."""
    plt = MagicMock(name="plt")
    monkeypatch.setitem(sys.modules, FAKE_MODULE, plt)
    return plt


@pytest.fixture
def bridge(fake_plt):
    backend = MatplotlibNative(FAKE_MODULE).open()
    yield backend
    backend.close()
