"""
Base interfaces and dataclasses for language runners.

All concrete executors inherit from :class:`CodeExecutor` and implement
:meth:`CodeExecutor.materialize`, which names and writes the source
artifact.  The shared :meth:`CodeExecutor.execute` then drives the
remaining steps of every runner: an optional build step, the run step and
collection of the captured output.  Cleanup belongs to the
:class:`~coderunner.workspace.Scratch` the executor is handed, so it runs
no matter how the steps end.

Each step has its own wall-clock timeout.  A step that exits non-zero or
times out raises :class:`~coderunner.errors.BuildFailure` or
:class:`~coderunner.errors.RunFailure` whose message is the step's
standard error.  Processes run with the privileges of the service;
isolation from the host (containers, seccomp profiles, dedicated users) is
left to the deployment.
"""

from __future__ import annotations

import abc
import logging
import os
import signal
import subprocess
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Type

from ..errors import BuildFailure, ExecutionError, RunFailure
from ..languages import Language, NamingRule, RunnerSpec, RUNNER_SPECS, render_command
from ..workspace import Scratch, token_name


logger = logging.getLogger("coderunner.executor")


@dataclass
class ExecutionResult:
    """Result of running one step or a whole program.

    Attributes
    ----------
    stdout: str
        Standard output captured from the process.
    stderr: str
        Standard error captured from the process.
    exit_code: int
        Exit status of the process.  ``-9`` when killed by the timeout.
    duration_ms: int
        Wall-clock time in milliseconds.
    timed_out: bool
        Whether the timeout fired.
    """

    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int
    timed_out: bool = False

    @property
    def output(self) -> str:
        """Standard output, or standard error when the program printed nothing else."""
        return self.stdout or self.stderr


@dataclass
class Materialized:
    """Paths and names a runner's command templates are rendered with."""

    source: Path
    values: Dict[str, object] = field(default_factory=dict)


class CodeExecutor(abc.ABC):
    """
    Abstract base class for language runners.

    Parameters
    ----------
    build_timeout: float, optional
        Seconds allowed for the build step.  Defaults to the language's
        :class:`~coderunner.languages.RunnerSpec` value.
    run_timeout: float, optional
        Seconds allowed for the run step.
    tools: dict, optional
        Placeholder values for the command templates, e.g.
        ``{"python": "/usr/bin/python3"}``.
    """

    language: Language
    default_tools: Dict[str, object] = {}

    def __init__(
        self,
        build_timeout: Optional[float] = None,
        run_timeout: Optional[float] = None,
        tools: Optional[Dict[str, object]] = None,
    ) -> None:
        self.spec: RunnerSpec = RUNNER_SPECS[self.language]
        self.build_timeout = build_timeout if build_timeout is not None else self.spec.build_timeout_ms / 1000
        self.run_timeout = run_timeout if run_timeout is not None else self.spec.run_timeout_ms / 1000
        self.tools = {**self.default_tools, **(tools or {})}

    @abc.abstractmethod
    def materialize(self, scratch: Scratch, code: str) -> Materialized:
        """Write ``code`` into ``scratch`` under the language's required name.

        Implementations register every artifact they expect the steps to
        produce so that cleanup removes them.
        """
        raise NotImplementedError

    def source_name(self, code: str) -> str:
        """File name for the source artifact, chosen by the language's naming rule."""
        if self.spec.naming is NamingRule.DECLARED_TYPE:
            return f"{self.declared_type(code)}.{self.spec.extension}"
        return token_name(self.spec.extension)

    def declared_type(self, code: str) -> str:
        """Name of the type ``code`` declares, for declared-type naming."""
        raise NotImplementedError(f"{self.language.value} artifacts are not named after a declared type")

    def execute(
        self,
        scratch: Scratch,
        code: str,
        stdin: Optional[str] = None,
    ) -> ExecutionResult:
        """Build (when the language needs it) and run ``code`` in ``scratch``.

        Returns the run step's result.  Raises :class:`BuildFailure` or
        :class:`RunFailure` when a step fails.
        """
        materialized = self.materialize(scratch, code)
        values = {
            **self.tools,
            "source": materialized.source,
            "workdir": scratch.path,
            **materialized.values,
        }
        logger.info(
            "Running %s in %s (artifact %s)",
            self.language.value,
            scratch.request_id,
            materialized.source.name,
        )

        if self.spec.build_command is not None:
            args = render_command(self.spec.build_command, **values)
            self._run_step(args, scratch.path, self.build_timeout, None, BuildFailure)

        args = render_command(self.spec.run_command, **values)
        return self._run_step(args, scratch.path, self.run_timeout, stdin, RunFailure)

    def _run_step(
        self,
        args: List[str],
        cwd: Path,
        timeout: float,
        stdin_data: Optional[str],
        failure: Type[ExecutionError],
    ) -> ExecutionResult:
        try:
            result = self._run_subprocess(args, cwd, timeout, stdin_data)
        except OSError as exc:
            # Missing toolchain binary or an executable that failed to start.
            raise failure(f"Unable to start {args[0]}: {exc.strerror or exc}") from exc

        logger.info(
            "%s step %s: exit_code=%s, duration_ms=%s",
            failure.stage,
            Path(args[0]).name,
            result.exit_code,
            result.duration_ms,
        )
        if result.timed_out or result.exit_code != 0:
            raise failure(_failure_message(result, failure.stage, args[0]), result.exit_code)
        return result

    def _run_subprocess(
        self,
        args: List[str],
        cwd: Path,
        timeout: float,
        stdin_data: Optional[str] = None,
    ) -> ExecutionResult:
        """
        Invoke a subprocess and capture its output.

        The process runs in ``cwd`` in a new session.  If it exceeds the
        wall-clock ``timeout`` (seconds) its whole process group is killed.

        Parameters
        ----------
        args: list[str]
            Command and arguments to execute.
        cwd: Path
            Working directory for the subprocess.
        timeout: float
            Seconds before the process is killed.
        stdin_data: str, optional
            Data to supply on standard input.  Standard input is closed
            when omitted.

        Returns
        -------
        ExecutionResult
            Contains the process outputs and exit status.
        """
        start_time = time.perf_counter()
        process = subprocess.Popen(
            args,
            cwd=str(cwd),
            stdin=subprocess.PIPE if stdin_data is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )

        timed_out = False

        def kill_proc() -> None:
            nonlocal timed_out
            timed_out = True
            # The child leads its own process group; killing the group also
            # reaps anything it spawned that still holds the output pipes.
            try:
                os.killpg(process.pid, signal.SIGKILL)
            except OSError:
                # Already exited.
                logger.debug("Process %s exited before it could be killed", process.pid)

        timer = threading.Timer(timeout, kill_proc)
        timer.start()

        try:
            stdout, stderr = process.communicate(input=stdin_data)
        finally:
            duration = int((time.perf_counter() - start_time) * 1000)
            timer.cancel()
        exit_code = process.returncode if process.returncode is not None else -1
        if timed_out:
            logger.warning("%s timed out after %ss", Path(args[0]).name, f"{timeout:g}")
            stderr = (stderr or "") + f"\nExecution timed out after {timeout:g} seconds."
            exit_code = -9
        return ExecutionResult(stdout or "", stderr or "", exit_code, duration, timed_out)


def _failure_message(result: ExecutionResult, stage: str, program: str) -> str:
    if result.timed_out:
        return result.stderr.strip()
    text = result.stderr.strip() or result.stdout.strip()
    if text:
        return text
    return f"{Path(program).name} exited with code {result.exit_code} during {stage}"
