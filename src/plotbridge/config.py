"""Environment-driven defaults, read once at import time."""

import os
import sys

PYPLOT_MODULE = os.environ.get("PLOTBRIDGE_MODULE", "matplotlib.pyplot")
PYTHON_EXECUTABLE = os.environ.get("PLOTBRIDGE_PYTHON", sys.executable)
LOG_LEVEL = os.environ.get("PLOTBRIDGE_LOG_LEVEL", "WARNING")
