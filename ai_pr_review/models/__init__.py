"""
Models package for AI PR Review.

Contains Pydantic models for review taxonomies, findings and reports.
"""

from ai_pr_review.models.schemas import (
    DETAILED_TAXONOMY,
    TRIAGE_TAXONOMY,
    CommentDispatchResult,
    DispatchStatus,
    DispatchSummary,
    Finding,
    InlineComment,
    ParsedReview,
    ReviewReport,
    ReviewTaxonomy,
    SectionKind,
    SectionSpec,
    Severity,
    get_taxonomy,
)

__all__ = [
    "DETAILED_TAXONOMY",
    "TRIAGE_TAXONOMY",
    "CommentDispatchResult",
    "DispatchStatus",
    "DispatchSummary",
    "Finding",
    "InlineComment",
    "ParsedReview",
    "ReviewReport",
    "ReviewTaxonomy",
    "SectionKind",
    "SectionSpec",
    "Severity",
    "get_taxonomy",
]
