"""
Analyzers package for AI PR Review.

Contains the OpenAI review client and the response parser.
"""

from ai_pr_review.analyzers.llm_analyzer import LLMAnalyzer
from ai_pr_review.analyzers.response_parser import ResponseParser, parse_review_response

__all__ = [
    "LLMAnalyzer",
    "ResponseParser",
    "parse_review_response",
]
