"""Tests for per-request scratch directories."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from coderunner.workspace import Workspace, token_name


def test_allocate_creates_and_removes_directory(tmp_path):
    workspace = Workspace(tmp_path)
    with workspace.allocate() as scratch:
        assert scratch.path.is_dir()
        assert scratch.path.parent == tmp_path
        assert workspace.list() == [scratch.request_id]
        scratch.write("a.txt", "hello")
        (scratch.path / "stray.txt").write_text("left behind by the program")
    assert not scratch.path.exists()
    assert workspace.list() == []


def test_cleanup_runs_on_exception(tmp_path):
    workspace = Workspace(tmp_path)
    with pytest.raises(RuntimeError):
        with workspace.allocate() as scratch:
            artifact = scratch.write("Main.java", "class Main {}")
            raise RuntimeError("build exploded")
    assert not artifact.exists()
    assert workspace.list() == []


def test_concurrent_allocations_get_distinct_directories(tmp_path):
    workspace = Workspace(tmp_path)
    with workspace.allocate() as first, workspace.allocate() as second:
        assert first.request_id != second.request_id
        first_file = first.write("Foo.java", "first")
        second_file = second.write("Foo.java", "second")
        assert first_file != second_file
        assert first_file.read_text() == "first"
        assert second_file.read_text() == "second"


def test_cleanup_is_idempotent(tmp_path):
    workspace = Workspace(tmp_path)
    with workspace.allocate() as scratch:
        scratch.write("x.py", "")
        scratch.cleanup()
        assert not scratch.path.exists()
    assert workspace.list() == []


def test_cleanup_failure_is_logged_not_raised(tmp_path, monkeypatch, caplog):
    workspace = Workspace(tmp_path)
    original_unlink = Path.unlink

    def failing_unlink(self, *args, **kwargs):
        if self.name == "locked.py":
            raise PermissionError("permission denied")
        return original_unlink(self, *args, **kwargs)

    monkeypatch.setattr(Path, "unlink", failing_unlink)
    with caplog.at_level(logging.WARNING, logger="coderunner.workspace"):
        with workspace.allocate() as scratch:
            scratch.write("locked.py", "print(1)")
    assert "Unable to delete artifact" in caplog.text
    assert "locked.py" in caplog.text


def test_artifact_must_be_plain_name(tmp_path):
    workspace = Workspace(tmp_path)
    with workspace.allocate() as scratch:
        with pytest.raises(ValueError):
            scratch.artifact("../escape.py")
        with pytest.raises(ValueError):
            scratch.artifact("nested/file.py")


def test_token_name():
    name = token_name("py")
    assert name.startswith("temp_")
    assert name.endswith(".py")
    assert name[len("temp_"):-len(".py")].isdigit()
