"""GitHub REST API wrapper for pull request review comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from gh_pr_comments.config import Settings
from gh_pr_comments.schema import Reference

logger = logging.getLogger(__name__)

GITHUB_JSON_MEDIA_TYPE = "application/vnd.github+json"
RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"


class GitHubApiError(RuntimeError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, *, status_code: int | None, endpoint: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class GitHubRateLimitError(GitHubApiError):
    """Raised when GitHub API rate limiting prevents request completion."""


class GitHubPayloadError(GitHubApiError):
    """Raised when a successful GitHub response does not have the expected shape."""

    def __init__(self, message: str, *, endpoint: str) -> None:
        super().__init__(message, status_code=None, endpoint=endpoint)


@dataclass(frozen=True, slots=True)
class PullRequestSummary:
    """Pull request fields shown in the report header."""

    title: str
    url: str


@dataclass(frozen=True, slots=True)
class ReviewComment:
    """One inline review comment on a pull request diff."""

    author: str
    body: str
    created_at: str
    url: str
    diff_hunk: str
    file_path: str
    line: int | None = None


def _ensure_mapping(value: object, *, context: str) -> dict[str, Any]:
    """Ensure a response fragment is a JSON object."""
    if not isinstance(value, dict):
        raise GitHubPayloadError(
            f"Expected JSON object for {context}.",
            endpoint=context,
        )
    return value


def _require_str(payload: dict[str, Any], *, key: str, endpoint: str) -> str:
    """Read a required string field from payload."""
    value = payload.get(key)
    if not isinstance(value, str):
        raise GitHubPayloadError(
            f"Expected string field '{key}' in GitHub response.",
            endpoint=endpoint,
        )
    return value


def _optional_int(payload: dict[str, Any], *, key: str, endpoint: str) -> int | None:
    """Read an integer field that GitHub may send as null."""
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise GitHubPayloadError(
            f"Expected '{key}' to be an integer or null in GitHub response.",
            endpoint=endpoint,
        )
    return value


def _require_object(payload: dict[str, Any], *, key: str, endpoint: str) -> dict[str, Any]:
    """Read a required object field from payload."""
    value = payload.get(key)
    if not isinstance(value, dict):
        raise GitHubPayloadError(
            f"Expected object field '{key}' in GitHub response.",
            endpoint=endpoint,
        )
    return value


def _is_rate_limited(response: httpx.Response) -> bool:
    """Return whether a failed response reports an exhausted rate limit."""
    if response.status_code == 429:
        return True
    return (
        response.status_code == 403
        and response.headers.get(RATE_LIMIT_REMAINING_HEADER) == "0"
    )


def _raise_http_error(response: httpx.Response, endpoint: str) -> None:
    """Raise a typed error for a non-success GitHub API response."""
    message = f"GitHub API request failed with status {response.status_code} for '{endpoint}'."
    if _is_rate_limited(response):
        raise GitHubRateLimitError(
            message,
            status_code=response.status_code,
            endpoint=endpoint,
        )
    raise GitHubApiError(
        message,
        status_code=response.status_code,
        endpoint=endpoint,
    )


def _get(client: httpx.Client, endpoint: str) -> Any:
    """Perform one GET request and decode its JSON body."""
    logger.debug("GET %s", endpoint)
    response = client.get(endpoint, headers={"Accept": GITHUB_JSON_MEDIA_TYPE})
    logger.debug("GET %s -> %d", endpoint, response.status_code)
    if not response.is_success:
        _raise_http_error(response, endpoint)
    try:
        return response.json()
    except ValueError as error:
        raise GitHubPayloadError(
            f"Malformed JSON in GitHub response for '{endpoint}'.",
            endpoint=endpoint,
        ) from error


def _request_json(client: httpx.Client, endpoint: str) -> dict[str, Any]:
    """Perform a JSON request against GitHub API."""
    return _ensure_mapping(_get(client, endpoint), context=endpoint)


def _request_json_list(client: httpx.Client, endpoint: str) -> list[dict[str, Any]]:
    """Perform a JSON request that returns an array of objects."""
    payload = _get(client, endpoint)
    if not isinstance(payload, list):
        raise GitHubPayloadError(
            "Expected JSON array in GitHub response.",
            endpoint=endpoint,
        )
    rows: list[dict[str, Any]] = []
    for item in payload:
        if not isinstance(item, dict):
            raise GitHubPayloadError(
                "Expected all array items to be JSON objects in GitHub response.",
                endpoint=endpoint,
            )
        rows.append(item)
    return rows


def fetch_pull_request_summary(
    *,
    client: httpx.Client,
    reference: Reference,
) -> PullRequestSummary:
    """Fetch the pull request title and web URL."""
    endpoint = reference.api_path
    payload = _request_json(client, endpoint)
    return PullRequestSummary(
        title=_require_str(payload, key="title", endpoint=endpoint),
        url=_require_str(payload, key="html_url", endpoint=endpoint),
    )


def _parse_review_comment(row: dict[str, Any], *, endpoint: str) -> ReviewComment:
    """Normalize one review comment payload."""
    user_payload = _require_object(row, key="user", endpoint=endpoint)
    return ReviewComment(
        author=_require_str(user_payload, key="login", endpoint=endpoint),
        body=_require_str(row, key="body", endpoint=endpoint),
        created_at=_require_str(row, key="created_at", endpoint=endpoint),
        url=_require_str(row, key="html_url", endpoint=endpoint),
        diff_hunk=_require_str(row, key="diff_hunk", endpoint=endpoint),
        file_path=_require_str(row, key="path", endpoint=endpoint),
        line=_optional_int(row, key="line", endpoint=endpoint),
    )


def fetch_review_comments(
    *,
    client: httpx.Client,
    reference: Reference,
) -> tuple[ReviewComment, ...]:
    """Fetch review comments in the order GitHub returns them.

    Only the first page is requested.
    """
    endpoint = f"{reference.api_path}/comments"
    rows = _request_json_list(client, endpoint)
    comments = tuple(_parse_review_comment(row, endpoint=endpoint) for row in rows)
    logger.debug("Fetched %d review comment(s) from %s", len(comments), endpoint)
    return comments


def build_github_client(settings: Settings) -> httpx.Client:
    """Build an unauthenticated GitHub HTTP client."""
    headers = {
        "Accept": GITHUB_JSON_MEDIA_TYPE,
        "User-Agent": settings.user_agent,
    }
    return httpx.Client(
        base_url=settings.api_base_url,
        headers=headers,
        timeout=settings.timeout_seconds,
        trust_env=settings.trust_env,
        follow_redirects=True,
    )
