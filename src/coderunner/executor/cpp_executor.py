"""
Executor for C++ programs.

The source is written to a time-named ``.cpp`` file, compiled ahead of
time into an executable next to it (the same path with the extension
stripped) and the executable is run directly.  Both files are registered
with the scratch directory so cleanup removes them.
"""

from __future__ import annotations

from ..languages import Language
from ..workspace import Scratch
from .base import CodeExecutor, Materialized


class CppExecutor(CodeExecutor):
    """Compile with ``g++`` and run the resulting binary."""

    language = Language.CPP
    default_tools = {"cxx": "g++", "cxx_flags": ["-std=c++17", "-Wall"]}

    def materialize(self, scratch: Scratch, code: str) -> Materialized:
        source = scratch.write(self.source_name(code), code)
        binary = scratch.artifact(source.stem)
        return Materialized(source, {"binary": binary})
