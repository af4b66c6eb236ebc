"""Markdown rendering of pull request review comments."""

from __future__ import annotations

from collections.abc import Sequence

from gh_pr_comments.github_client import PullRequestSummary, ReviewComment
from gh_pr_comments.schema import Reference


def _render_comment(comment: ReviewComment) -> list[str]:
    """Render one review comment block."""
    lines = [
        f"### Comment by @{comment.author}",
        f"**File:** `{comment.file_path}`",
    ]
    if comment.line is not None:
        lines.append(f"**Line:** {comment.line}")
    lines.extend(
        [
            f"**Created:** {comment.created_at}",
            f"**URL:** {comment.url}",
            "",
            "#### Diff Context",
            "```diff",
            comment.diff_hunk,
            "```",
            "",
            "#### Comment",
            comment.body,
            "",
            "---",
            "",
        ]
    )
    return lines


def render_comments_markdown(
    reference: Reference,
    summary: PullRequestSummary,
    comments: Sequence[ReviewComment],
) -> str:
    """Render the pull request header and its review comments, in the given order."""
    lines = [
        f"# PR #{reference.number} - {reference.full_name}",
        f"**Title:** {summary.title}",
        f"**URL:** {summary.url}",
        "",
        "## Comments",
        "",
    ]
    for comment in comments:
        lines.extend(_render_comment(comment))
    return "\n".join(lines)
