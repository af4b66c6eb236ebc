"""Shared pytest fixtures and test-run configuration."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from gh_pr_comments.config import (
    API_BASE_URL_ENV_VAR,
    GITHUB_HOST_ENV_VAR,
    TIMEOUT_SECONDS_ENV_VAR,
    USER_AGENT_ENV_VAR,
)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom pytest options for integration test execution."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked as integration (live GitHub API, local git).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly enabled."""
    run_integration = config.getoption("--run-integration")
    env_enabled = os.getenv("RUN_INTEGRATION_TESTS") == "1"
    if run_integration or env_enabled:
        return

    skip_marker = pytest.mark.skip(
        reason=(
            "Integration tests are disabled by default. "
            "Use --run-integration or set RUN_INTEGRATION_TESTS=1."
        )
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no gh-pr-comments settings in the environment.

    The environment is a private copy because load_dotenv writes to it directly.
    """
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in (
        API_BASE_URL_ENV_VAR,
        GITHUB_HOST_ENV_VAR,
        TIMEOUT_SECONDS_ENV_VAR,
        USER_AGENT_ENV_VAR,
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
