"""
Formatters package for AI PR Review.

Contains the console, file and GitHub renderers for review reports.
"""

from ai_pr_review.formatters.console_formatter import ConsoleFormatter
from ai_pr_review.formatters.file_formatter import FileFormatter
from ai_pr_review.formatters.github_formatter import GitHubFormatter
from ai_pr_review.formatters.markdown import format_finding_comment, format_report_markdown

__all__ = [
    "ConsoleFormatter",
    "FileFormatter",
    "GitHubFormatter",
    "format_finding_comment",
    "format_report_markdown",
]
