"""Runtime settings loaded from the environment and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from gh_pr_comments.reference import DEFAULT_GITHUB_HOST

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_USER_AGENT = "gh-pr-comments"

API_BASE_URL_ENV_VAR = "GH_PR_COMMENTS_API_URL"
GITHUB_HOST_ENV_VAR = "GH_PR_COMMENTS_HOST"
TIMEOUT_SECONDS_ENV_VAR = "GH_PR_COMMENTS_TIMEOUT_SECONDS"
USER_AGENT_ENV_VAR = "GH_PR_COMMENTS_USER_AGENT"


class ConfigError(ValueError):
    """Raised when an environment setting has an invalid value."""


@dataclass(frozen=True, slots=True)
class Settings:
    """HTTP and remote-matching settings for one run."""

    api_base_url: str = DEFAULT_API_BASE_URL
    github_host: str = DEFAULT_GITHUB_HOST
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    trust_env: bool = True


def _read_timeout_seconds() -> float:
    """Read the request timeout, falling back to the default."""
    raw_value = os.getenv(TIMEOUT_SECONDS_ENV_VAR)
    if not raw_value:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout_seconds = float(raw_value)
    except ValueError as error:
        raise ConfigError(
            f"{TIMEOUT_SECONDS_ENV_VAR} must be a number, got '{raw_value}'."
        ) from error
    if timeout_seconds <= 0:
        raise ConfigError(f"{TIMEOUT_SECONDS_ENV_VAR} must be positive, got '{raw_value}'.")
    return timeout_seconds


def load_settings(*, dotenv_path: Path | None = None) -> Settings:
    """Build settings from environment variables, reading .env without overriding."""
    load_dotenv(dotenv_path=dotenv_path or Path.cwd() / ".env", override=False)

    return Settings(
        api_base_url=(os.getenv(API_BASE_URL_ENV_VAR) or DEFAULT_API_BASE_URL).rstrip("/"),
        github_host=os.getenv(GITHUB_HOST_ENV_VAR) or DEFAULT_GITHUB_HOST,
        timeout_seconds=_read_timeout_seconds(),
        user_agent=os.getenv(USER_AGENT_ENV_VAR) or DEFAULT_USER_AGENT,
    )
