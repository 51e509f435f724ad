"""
Pull request snapshot types for AI PR Review.

A snapshot is fetched once per review and never mutated.
"""

from dataclasses import dataclass, field
from typing import Optional

from ai_pr_review.utils.diff import extract_valid_lines


@dataclass(frozen=True)
class ChangedFile:
    """Represents a file changed in a PR."""

    filename: str
    status: str  # added, removed, modified, renamed
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: Optional[str] = None
    valid_lines: tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        # Head-revision lines only; derived once from the patch.
        object.__setattr__(self, "valid_lines", tuple(extract_valid_lines(self.patch)))

    def accepts_line(self, line: int) -> bool:
        """Check whether an inline comment may target this head-revision line."""
        return line in self.valid_lines


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Immutable state of one Pull Request, fetched once per review."""

    owner: str
    repo: str
    number: int
    title: str
    description: str
    author: str
    base_ref: str
    head_ref: str
    head_sha: str
    files: tuple[ChangedFile, ...] = ()
    html_url: str = ""

    @property
    def full_repo_name(self) -> str:
        """Get full repository name in owner/repo format."""
        return f"{self.owner}/{self.repo}"

    def get_file(self, filename: str) -> Optional[ChangedFile]:
        """Find a changed file by path."""
        for changed_file in self.files:
            if changed_file.filename == filename:
                return changed_file
        return None
