"""Read repository identity from local git metadata."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from gh_pr_comments.reference import NoRepositoryContextError

logger = logging.getLogger(__name__)

ORIGIN_REMOTE_NAME = "origin"


def read_origin_url(workdir: Path | str | None = None) -> str:
    """Return the origin remote URL of the git repository at ``workdir``.

    Raises:
        NoRepositoryContextError: git is unavailable, ``workdir`` is not inside
            a repository, or the repository has no origin remote.
    """
    location = str(workdir) if workdir is not None else str(Path.cwd())
    cmd = ["git", "remote", "get-url", ORIGIN_REMOTE_NAME]
    logger.debug("Running %s in %s", " ".join(cmd), location)

    try:
        result = subprocess.run(
            cmd,
            cwd=workdir,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as error:
        raise NoRepositoryContextError(
            "git executable not found; pass --repo owner/repo instead.",
            value=location,
        ) from error
    except subprocess.CalledProcessError as error:
        detail = (error.stderr or "").strip() or f"exit status {error.returncode}"
        raise NoRepositoryContextError(
            f"Could not read the {ORIGIN_REMOTE_NAME} remote in '{location}' ({detail}). "
            "Pass --repo owner/repo or a full PR URL.",
            value=location,
        ) from error

    remote_url = result.stdout.strip()
    if not remote_url:
        raise NoRepositoryContextError(
            f"The {ORIGIN_REMOTE_NAME} remote in '{location}' has no URL.",
            value=location,
        )
    logger.debug("Origin remote URL: %s", remote_url)
    return remote_url
