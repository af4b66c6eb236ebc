"""Typer CLI printing GitHub PR review comments as markdown."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Annotated, NoReturn

import httpx
import typer

from gh_pr_comments.config import ConfigError, load_settings
from gh_pr_comments.git_remote import read_origin_url
from gh_pr_comments.github_client import (
    GitHubApiError,
    GitHubPayloadError,
    GitHubRateLimitError,
    build_github_client,
    fetch_pull_request_summary,
    fetch_review_comments,
)
from gh_pr_comments.output import render_comments_markdown
from gh_pr_comments.reference import ResolutionError, resolve

LOG_FORMAT = "[%(levelname)s] %(message)s"

logger = logging.getLogger(__name__)

app = typer.Typer(help="Extract GitHub PR review comments as markdown for LLM consumption.")


def _configure_logging(verbose: bool) -> None:
    """Send diagnostics to stderr so stdout carries only the markdown report."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("gh_pr_comments").setLevel(level)


def _fail(message: str, error: Exception) -> NoReturn:
    """Print an error and exit with status 1."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1) from error


@app.command()
def main(
    pr: Annotated[
        str,
        typer.Argument(help="PR number, PR URL, or 'owner/repo/pull/<number>'."),
    ],
    repo: Annotated[
        str | None,
        typer.Option("--repo", "-r", help="GitHub repository in 'owner/repo' format."),
    ] = None,
    include_resolved: Annotated[
        bool,
        typer.Option(help="Include resolved comments in output (currently has no effect)."),
    ] = False,
    timeout_seconds: Annotated[
        float | None,
        typer.Option(help="GitHub API timeout in seconds for each request."),
    ] = None,
    trust_env: Annotated[
        bool,
        typer.Option(
            "--trust-env/--no-trust-env",
            help="Use proxy/SSL environment variables from the current shell.",
        ),
    ] = True,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log progress to stderr.")
    ] = False,
) -> None:
    """Print the review comments of a pull request as markdown."""
    _configure_logging(verbose)

    try:
        settings = load_settings()
    except ConfigError as error:
        _fail(str(error), error)
    settings = replace(settings, trust_env=trust_env)
    if timeout_seconds is not None:
        settings = replace(settings, timeout_seconds=timeout_seconds)

    try:
        reference = resolve(pr, repo, read_origin_url, host=settings.github_host)
    except ResolutionError as error:
        _fail(str(error), error)

    if include_resolved:
        # GitHub's REST comments endpoint does not expose thread resolution.
        logger.debug("--include-resolved has no effect; all review comments are listed.")

    try:
        with build_github_client(settings) as client:
            summary = fetch_pull_request_summary(client=client, reference=reference)
            comments = fetch_review_comments(client=client, reference=reference)
    except GitHubRateLimitError as error:
        _fail(
            f"GitHub API rate limit exceeded: status={error.status_code} "
            f"endpoint={error.endpoint}. Unauthenticated requests are limited; try again later.",
            error,
        )
    except GitHubPayloadError as error:
        _fail(f"Unexpected GitHub response from {error.endpoint}: {error}", error)
    except GitHubApiError as error:
        _fail(
            "GitHub API request failed: "
            f"status={error.status_code} endpoint={error.endpoint}. {error}",
            error,
        )
    except httpx.HTTPError as error:
        _fail(f"network error ({error}).", error)

    typer.echo(render_comments_markdown(reference, summary, comments))


if __name__ == "__main__":
    app()
