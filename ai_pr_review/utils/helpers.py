"""
Helper utilities for AI PR Review.

Contains input validation and small text helpers used across the application.
"""

import re

from ai_pr_review.errors import InvalidRepositoryError

_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def parse_repository(repository: str) -> tuple[str, str]:
    """
    Split a repository identifier into owner and name.

    Args:
        repository: Identifier in ``owner/repo`` form.

    Returns:
        Tuple of (owner, repo).

    Raises:
        InvalidRepositoryError: If the identifier is not exactly owner/repo.
    """
    parts = repository.strip().split("/")
    if len(parts) != 2 or not all(_NAME_RE.match(part) for part in parts):
        raise InvalidRepositoryError(
            f"Repository must be in format: owner/repo (got {repository!r})"
        )

    owner, repo = parts
    return owner, repo


def validate_pr_number(pr_number: int) -> int:
    """Return the PR number if it is a positive integer, else raise ValueError."""
    if isinstance(pr_number, bool) or not isinstance(pr_number, int) or pr_number <= 0:
        raise ValueError("PR number must be a positive integer")
    return pr_number


def truncate_string(
    text: str,
    max_length: int = 500,
    suffix: str = "...",
) -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: The text to truncate.
        max_length: Maximum length including suffix.
        suffix: Suffix to append when truncated.

    Returns:
        Truncated string.
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix
