"""Tests for reading the origin remote from local git metadata."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Any

import pytest
from gh_pr_comments import git_remote
from gh_pr_comments.git_remote import read_origin_url
from gh_pr_comments.reference import NoRepositoryContextError


def _completed(stdout: str) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


@pytest.mark.unit
def test_read_origin_url_returns_stripped_url(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict[str, Any] = {}

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        recorded["cmd"] = cmd
        recorded["cwd"] = kwargs.get("cwd")
        return _completed("git@github.com:octocat/Hello-World.git\n")

    monkeypatch.setattr(git_remote.subprocess, "run", fake_run)

    assert read_origin_url("/work/tree") == "git@github.com:octocat/Hello-World.git"
    assert recorded["cmd"] == ["git", "remote", "get-url", "origin"]
    assert recorded["cwd"] == "/work/tree"


@pytest.mark.unit
def test_read_origin_url_without_remote_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise subprocess.CalledProcessError(
            returncode=2,
            cmd=cmd,
            stderr="error: No such remote 'origin'\n",
        )

    monkeypatch.setattr(git_remote.subprocess, "run", fake_run)

    with pytest.raises(NoRepositoryContextError) as excinfo:
        read_origin_url("/work/tree")
    assert "No such remote 'origin'" in str(excinfo.value)
    assert excinfo.value.value == "/work/tree"


@pytest.mark.unit
def test_read_origin_url_without_git_executable_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("git")

    monkeypatch.setattr(git_remote.subprocess, "run", fake_run)

    with pytest.raises(NoRepositoryContextError, match="git executable not found"):
        read_origin_url()


@pytest.mark.unit
def test_read_origin_url_with_empty_output_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        git_remote.subprocess,
        "run",
        lambda cmd, **kwargs: _completed("\n"),
    )

    with pytest.raises(NoRepositoryContextError, match="has no URL"):
        read_origin_url("/work/tree")


@pytest.mark.integration
def test_live_read_origin_url_from_real_repository(tmp_path: Path) -> None:
    if shutil.which("git") is None:
        pytest.skip("git executable is not installed.")
    subprocess.run(["git", "init", "--quiet"], cwd=tmp_path, check=True)
    subprocess.run(
        ["git", "remote", "add", "origin", "https://github.com/octocat/Hello-World.git"],
        cwd=tmp_path,
        check=True,
    )

    assert read_origin_url(tmp_path) == "https://github.com/octocat/Hello-World.git"


@pytest.mark.integration
def test_live_read_origin_url_outside_repository(tmp_path: Path) -> None:
    if shutil.which("git") is None:
        pytest.skip("git executable is not installed.")
    with pytest.raises(NoRepositoryContextError):
        read_origin_url(tmp_path)
