"""
Executor for running Python programs.

The Python executor writes the submitted code to a time-named file in the
execution's scratch directory and invokes the configured interpreter on
that file.  Standard output and error are captured by the base class
helper and returned in an ``ExecutionResult``.
"""

from __future__ import annotations

from ..languages import Language
from ..workspace import Scratch
from .base import CodeExecutor, Materialized


class PythonExecutor(CodeExecutor):
    """Execute Python code with the system interpreter."""

    language = Language.PYTHON
    default_tools = {"python": "python3"}

    def materialize(self, scratch: Scratch, code: str) -> Materialized:
        source = scratch.write(self.source_name(code), code)
        return Materialized(source)
