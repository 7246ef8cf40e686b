"""Route execution requests to language runners.

The dispatcher is the only place that turns a wire-level language tag into
a :class:`~coderunner.languages.Language`.  Unknown or disabled languages
are rejected with :class:`~coderunner.errors.UnsupportedLanguage` before a
scratch directory is allocated, so a rejected request never writes to
disk.  Build and run failures are folded into an ``error`` response; they
are domain-level outcomes, not transport errors.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Type

from .config import Config
from .errors import ExecutionError, UnsupportedLanguage
from .executor import CodeExecutor, CppExecutor, JavaExecutor, PythonExecutor
from .languages import Language
from .models import ExecuteRequest, ExecuteResponse
from .workspace import Workspace


logger = logging.getLogger("coderunner.dispatcher")


EXECUTOR_CLASSES: Dict[Language, Type[CodeExecutor]] = {
    Language.PYTHON: PythonExecutor,
    Language.JAVA: JavaExecutor,
    Language.CPP: CppExecutor,
}


def build_executors(config: Config, languages: Optional[Iterable[Language]] = None) -> Dict[Language, CodeExecutor]:
    """Instantiate a runner for every enabled language."""
    tools = {
        "python": config.python_bin,
        "javac": config.javac_bin,
        "java": config.java_bin,
        "cxx": config.cxx_bin,
        "cxx_flags": list(config.cxx_flags),
    }
    executors: Dict[Language, CodeExecutor] = {}
    for language in languages if languages is not None else config.allowed_langs:
        executor_cls = EXECUTOR_CLASSES[language]
        executors[language] = executor_cls(
            build_timeout=config.build_timeout,
            run_timeout=config.run_timeout,
            tools=tools,
        )
    return executors


class Dispatcher:
    """Validate a request, run it and shape the response."""

    def __init__(self, executors: Mapping[Language, CodeExecutor], workspace: Workspace) -> None:
        self.executors = dict(executors)
        self.workspace = workspace

    @classmethod
    def from_config(cls, config: Config) -> "Dispatcher":
        return cls(build_executors(config), Workspace(config.work_dir))

    @property
    def languages(self) -> List[str]:
        return [language.value for language in self.executors]

    def resolve(self, language: str) -> CodeExecutor:
        try:
            key = Language((language or "").strip().lower())
        except ValueError:
            raise UnsupportedLanguage(language)
        if key not in self.executors:
            raise UnsupportedLanguage(language)
        return self.executors[key]

    def dispatch(self, req: ExecuteRequest) -> ExecuteResponse:
        """Execute ``req`` and return the response body.

        Raises :class:`UnsupportedLanguage` for languages this server does
        not run.  Every other failure becomes ``ExecuteResponse(error=...)``.
        """
        executor = self.resolve(req.language)

        try:
            with self.workspace.allocate() as scratch:
                result = executor.execute(scratch, req.code, req.stdin)
        except ExecutionError as exc:
            logger.info("%s execution failed during %s (exit_code=%s)", executor.language.value, exc.stage, exc.exit_code)
            return ExecuteResponse(error=exc.message, stage=exc.stage)
        except Exception as exc:
            logger.exception("Unhandled error while executing %s code", executor.language.value)
            return ExecuteResponse(error=str(exc) or exc.__class__.__name__)

        return ExecuteResponse(
            output=result.output,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=result.duration_ms,
        )
