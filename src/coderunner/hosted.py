"""Client for a hosted execution API (Piston-compatible).

The editor can send code to a public execution service instead of this
server.  The client forwards source and stdin unchanged and flattens the
service's answer into the same single text block the local runners
produce: compiler errors first, then the program's standard output and
standard error, then a note when the process was terminated by a signal.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .config import DEFAULT_HOSTED_API_URL
from .errors import HostedExecutionError


logger = logging.getLogger("coderunner.hosted")


LANGUAGE_MAP: Dict[str, str] = {
    "javascript": "javascript",
    "python": "python",
    "java": "java",
    "cpp": "c++",
}

FILE_NAMES: Dict[str, str] = {
    "javascript": "index.js",
    "python": "main.py",
    "java": "Main.java",
    "cpp": "main.cpp",
}

COMPILE_TIMEOUT_MS = 10000
RUN_TIMEOUT_MS = 3000


def build_payload(language: str, code: str, stdin: str = "") -> Dict[str, Any]:
    """Return the JSON body for ``POST /execute`` on the hosted API."""
    if language not in LANGUAGE_MAP:
        raise ValueError(f"Unsupported language for hosted execution: {language}")
    return {
        "language": LANGUAGE_MAP[language],
        "version": "*",
        "files": [{"name": FILE_NAMES[language], "content": code}],
        "stdin": stdin,
        "args": [],
        "compile_timeout": COMPILE_TIMEOUT_MS,
        "run_timeout": RUN_TIMEOUT_MS,
        "compile_memory_limit": -1,
        "run_memory_limit": -1,
    }


def format_hosted_output(result: Dict[str, Any]) -> str:
    """Flatten a hosted API response into display text."""
    text = ""
    compile_stage = result.get("compile") or {}
    if compile_stage.get("stderr"):
        text += f"Compilation Error:\n{compile_stage['stderr']}\n"
    run = result.get("run")
    if run:
        if run.get("stdout"):
            text += run["stdout"]
        if run.get("stderr"):
            text += run["stderr"]
        if run.get("code") != 0 and run.get("signal"):
            text += f"\nProcess exited with code {run.get('code')}"
    return text or "No output"


class HostedExecutionClient:
    """Synchronous client for the hosted execution API.

    Args:
        base_url: API root, e.g. ``https://emkc.org/api/v2/piston``.
        timeout: Seconds to wait for the HTTP response.
        client: Optional ``httpx.Client`` for connection pooling or tests.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_HOSTED_API_URL,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._internal_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def __enter__(self) -> "HostedExecutionClient":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def close(self) -> None:
        if self._internal_client:
            self._client.close()

    def run(self, language: str, code: str, stdin: str = "") -> Dict[str, Any]:
        """Send the program and return the raw JSON response."""
        payload = build_payload(language, code, stdin)
        logger.info("Submitting %s code to hosted API %s", language, self.base_url)
        try:
            response = self._client.post(f"{self.base_url}/execute", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise HostedExecutionError(f"HTTP error! status: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise HostedExecutionError(str(exc)) from exc
        return response.json()

    def execute(self, language: str, code: str, stdin: str = "") -> str:
        """Run the program remotely and return its flattened output text."""
        return format_hosted_output(self.run(language, code, stdin))
