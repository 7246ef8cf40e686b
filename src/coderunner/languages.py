"""Supported server-side languages and their static runner settings.

Languages form a closed set.  Each member carries a :class:`RunnerSpec`
describing how its source file is named and which commands build and run
it.  Command templates are lists of arguments with ``{placeholders}``
filled in by the executors:

``{source}``
    Absolute path of the source artifact.
``{binary}``
    Absolute path of the compiled executable (native languages).
``{workdir}``
    The execution's scratch directory.
``{name}``
    The declared type name (JVM languages).

Tool names (``python3``, ``javac`` ...) are placeholders too, so that the
configuration can point them at other binaries.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


class Language(str, enum.Enum):
    PYTHON = "python"
    JAVA = "java"
    CPP = "cpp"


class NamingRule(str, enum.Enum):
    """How an artifact's file name is chosen."""

    TOKEN = "token"
    """Time-derived token independent of the source text."""

    DECLARED_TYPE = "declared-type"
    """Named after the type declared in the source (``Foo.java``)."""


@dataclass(frozen=True)
class RunnerSpec:
    """Static settings for one language."""

    extension: str
    naming: NamingRule
    run_command: Sequence[str]
    build_command: Optional[Sequence[str]] = None
    build_timeout_ms: int = 10000
    run_timeout_ms: int = 5000

    @property
    def compiled(self) -> bool:
        return self.build_command is not None


RUNNER_SPECS: Dict[Language, RunnerSpec] = {
    Language.PYTHON: RunnerSpec(
        extension="py",
        naming=NamingRule.TOKEN,
        run_command=("{python}", "{source}"),
    ),
    Language.JAVA: RunnerSpec(
        extension="java",
        naming=NamingRule.DECLARED_TYPE,
        build_command=("{javac}", "{source}"),
        run_command=("{java}", "-cp", "{workdir}", "{name}"),
    ),
    Language.CPP: RunnerSpec(
        extension="cpp",
        naming=NamingRule.TOKEN,
        build_command=("{cxx}", "{cxx_flags}", "{source}", "-o", "{binary}"),
        run_command=("{binary}",),
    ),
}


def render_command(template: Sequence[str], **values: object) -> List[str]:
    """Fill a command template.

    A placeholder bound to a list expands into several arguments, which is
    how compiler flags are spliced in.
    """
    args: List[str] = []
    for part in template:
        if part.startswith("{") and part.endswith("}"):
            value = values[part[1:-1]]
            if isinstance(value, (list, tuple)):
                args.extend(str(v) for v in value)
                continue
            args.append(str(value))
        else:
            args.append(part.format(**values))
    return args
