"""
Services package for AI PR Review.

Contains business logic services for GitHub integration and review orchestration.
"""

from ai_pr_review.services.github_service import GitHubService
from ai_pr_review.services.review_service import ReviewOutcome, ReviewService, build_report

__all__ = [
    "GitHubService",
    "ReviewOutcome",
    "ReviewService",
    "build_report",
]
