"""
Language runners for the execution service.

Each runner writes the submitted code into the execution's scratch
directory under the name its toolchain requires, builds it when the
language is compiled, runs it and returns the captured output.  Runners
are looked up by :class:`~coderunner.languages.Language`; a new language
needs a :class:`~coderunner.languages.RunnerSpec` entry and a
:class:`CodeExecutor` subclass.
"""

from .base import CodeExecutor, ExecutionResult, Materialized
from .cpp_executor import CppExecutor
from .java_executor import JavaExecutor, derive_class_name
from .python_executor import PythonExecutor

__all__ = [
    "ExecutionResult",
    "CodeExecutor",
    "Materialized",
    "PythonExecutor",
    "JavaExecutor",
    "CppExecutor",
    "derive_class_name",
]
