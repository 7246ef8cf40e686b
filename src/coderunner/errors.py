"""Exceptions raised by the execution service."""

from __future__ import annotations


class CodeRunnerError(Exception):
    """Base class for all service errors."""


class UnsupportedLanguage(CodeRunnerError):
    """The requested language is not enabled on this server."""

    def __init__(self, language: str) -> None:
        super().__init__("Unsupported language")
        self.language = language


class ExecutionError(CodeRunnerError):
    """A build or run step failed.

    ``stage`` is ``"build"`` or ``"run"``; the message is the text the caller
    sees, normally the failed step's standard error.
    """

    stage = "run"

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class BuildFailure(ExecutionError):
    stage = "build"


class RunFailure(ExecutionError):
    stage = "run"


class CleanupFailure(CodeRunnerError):
    """An artifact could not be deleted.  Never surfaced to callers."""


class HostedExecutionError(CodeRunnerError):
    """The hosted execution API could not be reached or answered with an error."""
