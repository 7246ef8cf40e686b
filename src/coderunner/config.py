"""Configuration loader.

The execution service reads its configuration from environment variables so
that the same image can run behind the editor in development and in a
container in production.  Reasonable defaults are provided so that local
development works out of the box.

Environment variables:

``CODERUNNER_API_KEY``
    Optional shared secret.  When set, every request must carry it in the
    ``x-api-key`` header.  Empty by default, which disables the check.

``CODERUNNER_WORK_DIR``
    Base directory under which each execution gets its own scratch directory.
    Defaults to ``coderunner`` inside the system temporary directory.

``CODERUNNER_ALLOWED_LANGS``
    Comma-separated list of server-side languages to enable.  Defaults to
    ``python,java,cpp``.  Unknown names are rejected at startup.

``CODERUNNER_BUILD_TIMEOUT_MS`` / ``CODERUNNER_RUN_TIMEOUT_MS``
    Per-step wall-clock timeouts in milliseconds.  Defaults are 10000 for the
    build step and 5000 for the run step.

``CODERUNNER_PYTHON_BIN``, ``CODERUNNER_JAVAC_BIN``, ``CODERUNNER_JAVA_BIN``,
``CODERUNNER_CXX_BIN``
    Toolchain binaries.  Defaults: ``python3``, ``javac``, ``java``, ``g++``.

``CODERUNNER_CXX_FLAGS``
    Flags passed to the C++ compiler.  Defaults to ``-std=c++17 -Wall``.

``CODERUNNER_CORS_ORIGINS``
    Comma-separated origins allowed by the CORS middleware.  Defaults to ``*``.

``CODERUNNER_HOSTED_API_URL``
    Base URL of the hosted execution API used for the alternative path.

``PORT``
    The port on which the API server listens.  Defaults to 3001.
"""

from __future__ import annotations

import os
import shlex
import tempfile
from dataclasses import dataclass, field
from typing import List

from .languages import Language


DEFAULT_HOSTED_API_URL = "https://emkc.org/api/v2/piston"


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Config:
    """Centralised configuration object."""

    api_key: str = ""
    work_dir: str = field(default_factory=lambda: os.path.join(tempfile.gettempdir(), "coderunner"))
    allowed_langs: List[Language] = field(default_factory=lambda: list(Language))
    build_timeout_ms: int = 10000
    run_timeout_ms: int = 5000
    python_bin: str = "python3"
    javac_bin: str = "javac"
    java_bin: str = "java"
    cxx_bin: str = "g++"
    cxx_flags: List[str] = field(default_factory=lambda: ["-std=c++17", "-Wall"])
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    hosted_api_url: str = DEFAULT_HOSTED_API_URL
    port: int = 3001

    @property
    def build_timeout(self) -> float:
        return self.build_timeout_ms / 1000

    @property
    def run_timeout(self) -> float:
        return self.run_timeout_ms / 1000

    @classmethod
    def load(cls) -> "Config":
        defaults = cls()

        allowed_langs_env = os.getenv("CODERUNNER_ALLOWED_LANGS")
        allowed_langs = defaults.allowed_langs
        if allowed_langs_env is not None:
            allowed_langs = []
            for name in _split_list(allowed_langs_env.lower()):
                try:
                    allowed_langs.append(Language(name))
                except ValueError:
                    raise ValueError(
                        f"Invalid CODERUNNER_ALLOWED_LANGS entry: {name}. "
                        f"Use any of {', '.join(lang.value for lang in Language)}."
                    )

        def _int_var(name: str, default: int, minimum: int = 1) -> int:
            val = os.getenv(name)
            if val is None:
                return default
            try:
                parsed = int(val)
            except ValueError:
                raise ValueError(f"Invalid integer for {name}: {val}")
            if parsed < minimum:
                raise ValueError(f"{name} must be at least {minimum}, got {parsed}")
            return parsed

        cxx_flags_env = os.getenv("CODERUNNER_CXX_FLAGS")
        cors_env = os.getenv("CODERUNNER_CORS_ORIGINS")

        return cls(
            api_key=os.getenv("CODERUNNER_API_KEY", ""),
            work_dir=os.getenv("CODERUNNER_WORK_DIR", defaults.work_dir),
            allowed_langs=allowed_langs,
            build_timeout_ms=_int_var("CODERUNNER_BUILD_TIMEOUT_MS", defaults.build_timeout_ms),
            run_timeout_ms=_int_var("CODERUNNER_RUN_TIMEOUT_MS", defaults.run_timeout_ms),
            python_bin=os.getenv("CODERUNNER_PYTHON_BIN", defaults.python_bin),
            javac_bin=os.getenv("CODERUNNER_JAVAC_BIN", defaults.javac_bin),
            java_bin=os.getenv("CODERUNNER_JAVA_BIN", defaults.java_bin),
            cxx_bin=os.getenv("CODERUNNER_CXX_BIN", defaults.cxx_bin),
            cxx_flags=shlex.split(cxx_flags_env) if cxx_flags_env is not None else defaults.cxx_flags,
            cors_origins=_split_list(cors_env) if cors_env is not None else defaults.cors_origins,
            hosted_api_url=os.getenv("CODERUNNER_HOSTED_API_URL", defaults.hosted_api_url),
            port=_int_var("PORT", defaults.port),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        It exists to provide a more intuitive name when consumed in
        application code.
        """
        return cls.load()
