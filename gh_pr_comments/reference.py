"""Pull request reference resolution.

A token names a pull request in one of three shapes, tried in a fixed order:

1. URL: ``https://github.com/{owner}/{repo}/pull/{number}``
2. Slash path: ``{owner}/{repo}/pull/{number}``
3. Bare number: ``{number}``, combined with a ``--repo`` hint or the
   ``origin`` remote of the working directory.

The first recognized shape owns the token. A failure inside a recognized
shape is final and is never retried against a later shape.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from urllib.parse import urlsplit

from pydantic import ValidationError

from gh_pr_comments.schema import Reference

logger = logging.getLogger(__name__)

DEFAULT_GITHUB_HOST = "github.com"
PULL_SEGMENT = "pull"
URL_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
PULL_URL_PATH_PATTERN = re.compile(r"^/(?P<owner>[^/]+)/(?P<repo>[^/]+)/pull/(?P<number>[0-9]+)")
NUMBER_PATTERN = re.compile(r"^[0-9]+$")
MAX_PULL_REQUEST_NUMBER = 2**32 - 1

AmbientLookup = Callable[[], str]


class ResolutionError(ValueError):
    """Raised when a token cannot be resolved to a pull request reference."""

    def __init__(self, message: str, *, value: str) -> None:
        super().__init__(message)
        self.value = value


class InvalidPullRequestUrlError(ResolutionError):
    """Raised for a URL whose path is not /{owner}/{repo}/pull/{number}."""


class MissingPullRequestNumberError(ResolutionError):
    """Raised for an owner/repo token that names no pull request number."""


class InvalidPullRequestNumberError(ResolutionError):
    """Raised when the number part is not a positive integer."""


class UnrecognizedReferenceError(ResolutionError):
    """Raised when a token matches none of the supported shapes."""


class InvalidRepoHintError(ResolutionError):
    """Raised when the repository hint is not in owner/repo format."""


class NoRepositoryContextError(ResolutionError):
    """Raised when no origin remote can be read from the working directory."""


class UnsupportedRemoteHostError(ResolutionError):
    """Raised when the origin remote does not point at a supported host."""


def _build_reference(
    owner: str,
    repository: str,
    number: int,
    *,
    error_type: type[ResolutionError],
    value: str,
) -> Reference:
    """Build a reference, reporting invariant violations as ``error_type``."""
    try:
        return Reference(owner=owner, repository=repository, number=number)
    except ValidationError as error:
        raise error_type(
            f"'{value}' does not name a valid pull request: "
            f"{error.errors()[0]['msg']}",
            value=value,
        ) from error


def _parse_number(raw_number: str, *, value: str) -> int:
    """Parse a pull request number made of ASCII digits."""
    if not NUMBER_PATTERN.fullmatch(raw_number):
        raise InvalidPullRequestNumberError(
            f"Invalid PR number '{raw_number}' in '{value}'. Expected a positive integer.",
            value=value,
        )
    number = int(raw_number)
    if not 1 <= number <= MAX_PULL_REQUEST_NUMBER:
        raise InvalidPullRequestNumberError(
            f"Invalid PR number '{raw_number}' in '{value}'. "
            f"Expected a positive integer up to {MAX_PULL_REQUEST_NUMBER}.",
            value=value,
        )
    return number


def _looks_like_url(token: str) -> bool:
    """Return whether the token is a syntactically valid absolute URI."""
    scheme, separator, remainder = token.partition(":")
    if not separator or not remainder:
        return False
    if not URL_SCHEME_PATTERN.fullmatch(scheme):
        return False
    try:
        urlsplit(token)
    except ValueError:
        return False
    return True


def match_url(token: str) -> Reference | None:
    """Resolve a full pull request URL, or return None for non-URL tokens."""
    if not _looks_like_url(token):
        return None

    match = PULL_URL_PATH_PATTERN.match(urlsplit(token).path)
    if match is None:
        raise InvalidPullRequestUrlError(
            f"Invalid pull request URL '{token}'. "
            "Expected https://<host>/{owner}/{repo}/pull/{number}.",
            value=token,
        )
    number = _parse_number(match.group("number"), value=token)
    return _build_reference(
        match.group("owner"),
        match.group("repo"),
        number,
        error_type=InvalidPullRequestUrlError,
        value=token,
    )


def match_slash_path(token: str) -> Reference | None:
    """Resolve an owner/repo/pull/number token, or return None without a slash."""
    if "/" not in token:
        return None

    segments = token.split("/")
    if len(segments) == 2:
        raise MissingPullRequestNumberError(
            f"PR number not specified in '{token}'. "
            "Use owner/repo/pull/<number>, or pass the number with --repo owner/repo.",
            value=token,
        )
    if len(segments) != 4 or segments[2] != PULL_SEGMENT:
        raise UnrecognizedReferenceError(
            f"Could not parse PR reference '{token}'. Expected owner/repo/pull/<number>.",
            value=token,
        )

    owner, repository, _pull, raw_number = segments
    number = _parse_number(raw_number, value=token)
    return _build_reference(
        owner,
        repository,
        number,
        error_type=UnrecognizedReferenceError,
        value=token,
    )


def parse_repo_hint(repo_hint: str) -> tuple[str, str]:
    """Parse and validate a repository hint in owner/repo format."""
    owner, separator, repository = repo_hint.strip().partition("/")
    if not separator or not owner or not repository or "/" in repository:
        raise InvalidRepoHintError(
            f"Invalid repo '{repo_hint}'. Expected format is owner/repo.",
            value=repo_hint,
        )
    return owner, repository


def parse_remote_url(remote_url: str, *, host: str = DEFAULT_GITHUB_HOST) -> tuple[str, str]:
    """Extract owner and repository from an SSH or HTTPS remote URL.

    Accepts ``git@github.com:owner/repo.git``, ``https://github.com/owner/repo``,
    ``ssh://git@github.com/owner/repo.git`` and similar forms. A trailing
    ``.git`` is stripped from the repository name.
    """
    pattern = re.compile(
        rf"{re.escape(host)}[:/](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?$"
    )
    match = pattern.search(remote_url.strip())
    if match is None:
        raise UnsupportedRemoteHostError(
            f"Could not parse a {host} repository from git remote '{remote_url}'.",
            value=remote_url,
        )
    return match.group("owner"), match.group("repo")


def match_bare_number(
    token: str,
    repo_hint: str | None,
    ambient_lookup: AmbientLookup,
    *,
    host: str = DEFAULT_GITHUB_HOST,
) -> Reference | None:
    """Resolve a bare PR number against the repo hint or the origin remote."""
    if not NUMBER_PATTERN.fullmatch(token):
        return None

    number = _parse_number(token, value=token)
    if repo_hint is not None:
        owner, repository = parse_repo_hint(repo_hint)
        return _build_reference(
            owner,
            repository,
            number,
            error_type=InvalidRepoHintError,
            value=repo_hint,
        )

    remote_url = ambient_lookup()
    logger.debug("Using origin remote %s for PR #%d", remote_url, number)
    owner, repository = parse_remote_url(remote_url, host=host)
    return _build_reference(
        owner,
        repository,
        number,
        error_type=UnsupportedRemoteHostError,
        value=remote_url,
    )


def resolve(
    token: str,
    repo_hint: str | None,
    ambient_lookup: AmbientLookup,
    *,
    host: str = DEFAULT_GITHUB_HOST,
) -> Reference:
    """Resolve a PR token into a reference.

    Args:
        token: PR URL, ``owner/repo/pull/<number>`` path, or bare number.
        repo_hint: Optional ``owner/repo`` used with a bare number.
        ambient_lookup: Returns the working directory's origin remote URL,
            raising NoRepositoryContextError when there is none. Only called
            for a bare number without a hint.
        host: Hosting domain the origin remote must point at.

    Raises:
        ResolutionError: One of its subclasses, naming the failing shape.
    """
    reference = match_url(token)
    if reference is None:
        reference = match_slash_path(token)
    if reference is None:
        reference = match_bare_number(token, repo_hint, ambient_lookup, host=host)
    if reference is None:
        raise UnrecognizedReferenceError(
            f"Could not parse PR input '{token}'. "
            "Expected a PR URL, owner/repo/pull/<number>, or a PR number.",
            value=token,
        )

    logger.debug("Resolved '%s' to %s#%d", token, reference.full_name, reference.number)
    return reference
