"""In-process evaluation of Python snippets.

This is the quick path used for demos: the code is evaluated inside the
calling interpreter, with no scratch directory and no child process.  The
snippet's ``print`` and ``log`` names are bound to an :class:`OutputSink`
placed in its globals, so nothing process-wide (``sys.stdout``,
``builtins.print``) is swapped out while it runs.

There is no isolation whatsoever.  The snippet can do anything the host
process can, which is why this path is not exposed over HTTP.
"""

from __future__ import annotations

import builtins
import json
import logging
import traceback
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


logger = logging.getLogger("coderunner.local")

NO_OUTPUT = "Code executed successfully (no output)"


def stringify(value: Any) -> str:
    """Pretty-print structured values as JSON, ``str()`` everything else."""
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, indent=2)
        except (TypeError, ValueError):
            return repr(value)
    return str(value)


class OutputSink:
    """Collects what an evaluated snippet writes."""

    def __init__(self) -> None:
        self.chunks: List[str] = []
        self.closed = False

    def _append(self, text: str) -> None:
        if self.closed:
            raise ValueError("write to closed output sink")
        self.chunks.append(text)

    def log(self, *args: Any) -> None:
        """Write one line, structured values pretty-printed."""
        self._append(" ".join(stringify(arg) for arg in args) + "\n")

    def print(self, *args: Any, sep: Optional[str] = " ", end: Optional[str] = "\n", file: Any = None, flush: bool = False) -> None:
        """Drop-in for the ``print`` builtin."""
        if file is not None:
            builtins.print(*args, sep=sep, end=end, file=file, flush=flush)
            return
        text = (" " if sep is None else sep).join(str(arg) for arg in args)
        self._append(text + ("\n" if end is None else end))

    def getvalue(self) -> str:
        text = "".join(self.chunks)
        return text[:-1] if text.endswith("\n") else text

    def close(self) -> None:
        self.closed = True


@contextmanager
def output_sink() -> Iterator[OutputSink]:
    sink = OutputSink()
    try:
        yield sink
    finally:
        sink.close()


@dataclass
class LocalResult:
    output: Optional[str] = None
    error: Optional[str] = None


def evaluate(code: str) -> LocalResult:
    """Evaluate ``code`` and return its captured output or the error it raised."""
    with output_sink() as sink:
        namespace: Dict[str, Any] = {
            "__name__": "__main__",
            "__builtins__": builtins,
            "print": sink.print,
            "log": sink.log,
        }
        try:
            exec(compile(code, "<editor>", "exec"), namespace)
        except (Exception, SystemExit) as exc:
            logger.debug("Local evaluation raised %s", exc.__class__.__name__)
            return LocalResult(error=f"Error: {exc}\n{traceback.format_exc()}")
        return LocalResult(output=sink.getvalue() or NO_OUTPUT)
