"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from coderunner.config import DEFAULT_HOSTED_API_URL, Config
from coderunner.languages import Language


ENV_VARS = [
    "CODERUNNER_API_KEY",
    "CODERUNNER_WORK_DIR",
    "CODERUNNER_ALLOWED_LANGS",
    "CODERUNNER_BUILD_TIMEOUT_MS",
    "CODERUNNER_RUN_TIMEOUT_MS",
    "CODERUNNER_PYTHON_BIN",
    "CODERUNNER_JAVAC_BIN",
    "CODERUNNER_JAVA_BIN",
    "CODERUNNER_CXX_BIN",
    "CODERUNNER_CXX_FLAGS",
    "CODERUNNER_CORS_ORIGINS",
    "CODERUNNER_HOSTED_API_URL",
    "PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config.load()
    assert config.api_key == ""
    assert config.allowed_langs == [Language.PYTHON, Language.JAVA, Language.CPP]
    assert config.build_timeout_ms == 10000
    assert config.run_timeout_ms == 5000
    assert config.build_timeout == 10.0
    assert config.run_timeout == 5.0
    assert config.python_bin == "python3"
    assert config.cxx_flags == ["-std=c++17", "-Wall"]
    assert config.cors_origins == ["*"]
    assert config.hosted_api_url == DEFAULT_HOSTED_API_URL
    assert config.port == 3001


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CODERUNNER_API_KEY", "k")
    monkeypatch.setenv("CODERUNNER_WORK_DIR", str(tmp_path))
    monkeypatch.setenv("CODERUNNER_ALLOWED_LANGS", " Python , cpp ")
    monkeypatch.setenv("CODERUNNER_RUN_TIMEOUT_MS", "250")
    monkeypatch.setenv("CODERUNNER_CXX_FLAGS", "-O2 -std=c++20")
    monkeypatch.setenv("CODERUNNER_CORS_ORIGINS", "http://localhost:5173,http://example.com")
    monkeypatch.setenv("PORT", "8080")
    config = Config.from_env()
    assert config.api_key == "k"
    assert config.work_dir == str(tmp_path)
    assert config.allowed_langs == [Language.PYTHON, Language.CPP]
    assert config.run_timeout == 0.25
    assert config.cxx_flags == ["-O2", "-std=c++20"]
    assert config.cors_origins == ["http://localhost:5173", "http://example.com"]
    assert config.port == 8080


def test_invalid_language(monkeypatch):
    monkeypatch.setenv("CODERUNNER_ALLOWED_LANGS", "python,cobol")
    with pytest.raises(ValueError, match="cobol"):
        Config.load()


@pytest.mark.parametrize("value", ["soon", "0", "-5"])
def test_invalid_timeout(monkeypatch, value):
    monkeypatch.setenv("CODERUNNER_BUILD_TIMEOUT_MS", value)
    with pytest.raises(ValueError, match="CODERUNNER_BUILD_TIMEOUT_MS"):
        Config.load()
