"""Shared test configuration.

The API module reads its configuration when it is imported, so the
environment is prepared here before any test module imports it.
"""

from __future__ import annotations

import os
import shutil
import sys
import tempfile

import pytest

os.environ.setdefault("CODERUNNER_PYTHON_BIN", sys.executable)
os.environ.setdefault("CODERUNNER_WORK_DIR", tempfile.mkdtemp(prefix="coderunner-tests-"))
os.environ.pop("CODERUNNER_API_KEY", None)
os.environ.pop("CODERUNNER_ALLOWED_LANGS", None)


requires_javac = pytest.mark.skipif(
    shutil.which("javac") is None or shutil.which("java") is None,
    reason="JDK not installed",
)

requires_cxx = pytest.mark.skipif(shutil.which("g++") is None, reason="g++ not installed")
