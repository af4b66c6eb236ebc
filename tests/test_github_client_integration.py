"""Integration tests for GitHub client against live GitHub API."""

from __future__ import annotations

import os

import pytest
from gh_pr_comments.config import load_settings
from gh_pr_comments.github_client import (
    build_github_client,
    fetch_pull_request_summary,
    fetch_review_comments,
)
from gh_pr_comments.reference import resolve
from gh_pr_comments.schema import Reference

DEFAULT_LIVE_PR_URL = "https://github.com/octocat/Hello-World/pull/1"


def _integration_reference() -> Reference:
    """Return the PR targeted by live tests, configurable via GITHUB_TEST_PR_URL."""
    pr_url = os.getenv("GITHUB_TEST_PR_URL") or DEFAULT_LIVE_PR_URL

    def no_origin() -> str:
        raise AssertionError("a full URL never needs the origin remote")

    return resolve(pr_url, None, no_origin)


@pytest.mark.integration
def test_live_fetch_summary_and_comments() -> None:
    reference = _integration_reference()

    with build_github_client(load_settings()) as client:
        summary = fetch_pull_request_summary(client=client, reference=reference)
        comments = fetch_review_comments(client=client, reference=reference)

    assert summary.title
    assert f"/pull/{reference.number}" in summary.url
    for comment in comments:
        assert comment.author
        assert comment.file_path
