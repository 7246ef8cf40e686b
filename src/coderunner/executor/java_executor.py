"""
Executor for Java programs.

``javac`` insists that a public class lives in a file of the same name, so
the source is saved as ``<ClassName>.java`` where the class name is read
from the code itself:

* the first ``public class`` declaration, otherwise
* the first ``class`` declaration of any visibility, otherwise
* ``Main``.

The compiled ``<ClassName>.class`` is then launched with the scratch
directory on the class path.  Since the file name depends on the
submission, two requests declaring the same class would fight over one
file if they shared a directory; each execution therefore works in its
own scratch directory.
"""

from __future__ import annotations

import re

from ..languages import Language
from ..workspace import Scratch
from .base import CodeExecutor, Materialized


DEFAULT_CLASS_NAME = "Main"

_PUBLIC_CLASS_RE = re.compile(r"public\s+class\s+(\w+)")
_ANY_CLASS_RE = re.compile(r"class\s+(\w+)")


def derive_class_name(code: str) -> str:
    """Return the class name ``javac`` will expect the file to carry.

    >>> derive_class_name("public class Foo { }")
    'Foo'
    >>> derive_class_name("class Bar { }")
    'Bar'
    >>> derive_class_name("int x;")
    'Main'
    """
    match = _PUBLIC_CLASS_RE.search(code) or _ANY_CLASS_RE.search(code)
    if match:
        return match.group(1)
    return DEFAULT_CLASS_NAME


class JavaExecutor(CodeExecutor):
    """Compile with ``javac`` and run with ``java``."""

    language = Language.JAVA
    default_tools = {"javac": "javac", "java": "java"}

    def declared_type(self, code: str) -> str:
        return derive_class_name(code)

    def materialize(self, scratch: Scratch, code: str) -> Materialized:
        source = scratch.write(self.source_name(code), code)
        class_name = source.stem
        scratch.artifact(f"{class_name}.class")
        return Materialized(source, {"name": class_name})
