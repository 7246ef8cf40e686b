"""Scratch directories for individual executions.

Every execution is given its own directory under a shared base directory,
named by a fresh request id.  Artifacts (source files, class files,
binaries) are only ever created inside that directory, so two executions
never share a path even when their artifacts carry the same name, as Java
sources named after their public class do.

Cleanup runs when the ``with`` block of :meth:`Workspace.allocate` exits,
whether the execution succeeded, failed or timed out.  Deletion errors are
logged and swallowed: they never change the result reported to the caller.
"""

from __future__ import annotations

import logging
import shutil
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from .errors import CleanupFailure


logger = logging.getLogger("coderunner.workspace")


def token_name(extension: str) -> str:
    """Return a time-derived artifact name such as ``temp_1712...123.py``."""
    return f"temp_{time.time_ns()}.{extension}"


class Scratch:
    """The scratch directory of a single execution."""

    def __init__(self, request_id: str, path: Path) -> None:
        self.request_id = request_id
        self.path = path
        self.artifacts: List[Path] = []

    def artifact(self, name: str) -> Path:
        """Register and return the path of an artifact inside this directory."""
        path = self.path / name
        if path.parent != self.path:
            raise ValueError(f"Artifact name must be a plain file name: {name!r}")
        self.artifacts.append(path)
        return path

    def write(self, name: str, content: str) -> Path:
        path = self.artifact(name)
        path.write_text(content, encoding="utf-8")
        return path

    def cleanup(self) -> None:
        """Delete every artifact and the directory itself.

        Safe to call more than once.
        """
        for path in self.artifacts:
            try:
                _unlink(path)
            except CleanupFailure as exc:
                logger.warning("%s", exc)
        # Anything the program or toolchain left behind (nested class files,
        # files the user code wrote) goes with the directory.
        if self.path.exists():
            try:
                shutil.rmtree(self.path)
            except OSError as exc:
                logger.warning(
                    "%s",
                    CleanupFailure(f"Unable to remove scratch dir {self.path}: {exc}"),
                )


def _unlink(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise CleanupFailure(f"Unable to delete artifact {path}: {exc}") from exc


class Workspace:
    """Allocates per-request scratch directories under ``base_dir``."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def allocate(self) -> Iterator[Scratch]:
        request_id = uuid.uuid4().hex
        path = self.base_dir / request_id
        path.mkdir(parents=True, exist_ok=False)
        scratch = Scratch(request_id, path)
        try:
            yield scratch
        finally:
            scratch.cleanup()

    def list(self) -> List[str]:
        """Names of scratch directories currently present.

        Diagnostics only: an empty list means no execution is in flight and
        nothing was left behind.
        """
        if not self.base_dir.exists():
            return []
        return sorted(p.name for p in self.base_dir.iterdir() if p.is_dir())
