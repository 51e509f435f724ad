"""
Utilities package for AI PR Review.

Contains diff helpers and common utilities.
"""

from ai_pr_review.utils.diff import annotate_patch, extract_valid_lines
from ai_pr_review.utils.helpers import (
    parse_repository,
    truncate_string,
    validate_pr_number,
)

__all__ = [
    "annotate_patch",
    "extract_valid_lines",
    "parse_repository",
    "truncate_string",
    "validate_pr_number",
]
