"""
Pytest fixtures for AI PR Review tests.

Provides reusable test fixtures, mocks, and sample data.
"""

from unittest.mock import AsyncMock

import pytest

from ai_pr_review.analyzers.llm_analyzer import LLMAnalyzer
from ai_pr_review.config import Settings
from ai_pr_review.models.schemas import Finding, ReviewReport, Severity
from ai_pr_review.models.snapshot import ChangedFile, PullRequestSnapshot
from ai_pr_review.services.github_service import GitHubService
from ai_pr_review.services.review_service import ReviewService


# Context, addition, deletion, context: new lines 1, 2, 3
SAMPLE_PATCH = """@@ -1,4 +1,5 @@
 import os
+import sys
-import re
 import json"""

# Valid new lines 10, 11, 12
A_TS_PATCH = """@@ -10,2 +10,3 @@ export function login() {
   const user = getUser();
+  validate(user);
   return user;"""

DETAILED_RESPONSE = """Here is my review.

SUMMARY:
This PR adds input validation to the login form.
It also refactors the session helper.

STRENGTHS:
- Clear separation of concerns
- Good test coverage

CONCERNS:
- [src/auth.ts:12] Possible SQL injection risk in the query builder
- [src/session.ts] Minor style nit in naming
- Consider adding docs for the new helper
1. Major bug: token expiry is never checked

RECOMMENDATIONS:
* Add integration tests
- Document the validation rules

SCORE: 9
"""

TRIAGE_RESPONSE = """SUMMARY: Quick fix for the config loader.

🚨 CRITICAL ISSUES (Must fix before merge)
- [app.py:5] Hardcoded password in settings

WARNINGS:
- [app.py:9] Unused import

GOOD PRACTICES:
- Nice naming

SCORE: 4
"""


def make_snapshot(*files: ChangedFile, number: int = 42) -> PullRequestSnapshot:
    """Build a snapshot around the given files."""
    return PullRequestSnapshot(
        owner="octocat",
        repo="hello-world",
        number=number,
        title="Add login validation",
        description="Validates user input before login.",
        author="octocat",
        base_ref="main",
        head_ref="feature/login",
        head_sha="abc123",
        files=tuple(files),
        html_url="https://github.com/octocat/hello-world/pull/42",
    )


@pytest.fixture
def snapshot_factory():
    """Provide a builder for snapshots with custom files."""
    return make_snapshot


@pytest.fixture
def sample_patch() -> str:
    """Provide a small unified-diff patch."""
    return SAMPLE_PATCH


@pytest.fixture
def detailed_response() -> str:
    """Provide a well-formed response in the detailed taxonomy."""
    return DETAILED_RESPONSE


@pytest.fixture
def triage_response() -> str:
    """Provide a well-formed response in the triage taxonomy."""
    return TRIAGE_RESPONSE


@pytest.fixture
def sample_snapshot() -> PullRequestSnapshot:
    """Provide a snapshot with two changed files and one binary file."""
    return make_snapshot(
        ChangedFile(
            filename="src/auth.ts",
            status="modified",
            additions=1,
            deletions=1,
            changes=2,
            patch="@@ -10,3 +10,3 @@\n query = build()\n-run(query)\n+run(escape(query))\n return",
        ),
        ChangedFile(
            filename="src/session.ts",
            status="added",
            additions=3,
            changes=3,
            patch="@@ -0,0 +1,3 @@\n+export const a = 1;\n+export const b = 2;\n+export const c = 3;",
        ),
        ChangedFile(filename="logo.png", status="added"),
    )


@pytest.fixture
def a_ts_snapshot() -> PullRequestSnapshot:
    """Provide a snapshot where a.ts accepts lines 10, 11 and 12."""
    return make_snapshot(ChangedFile(filename="a.ts", status="modified", patch=A_TS_PATCH))


@pytest.fixture
def mock_settings() -> Settings:
    """Provide settings with both credentials."""
    return Settings(
        _env_file=None,
        openai_api_key="test-api-key",
        github_token="test-github-token",
        log_level="DEBUG",
    )


@pytest.fixture
def mock_github_service(sample_snapshot) -> AsyncMock:
    """Provide a mock GitHub service returning the sample snapshot."""
    service = AsyncMock(spec=GitHubService)
    service.get_snapshot.return_value = sample_snapshot
    return service


@pytest.fixture
def mock_llm_analyzer(detailed_response) -> AsyncMock:
    """Provide a mock LLM analyzer returning the detailed response."""
    analyzer = AsyncMock(spec=LLMAnalyzer)
    analyzer.review_pull_request.return_value = detailed_response
    return analyzer


@pytest.fixture
def review_service(mock_github_service, mock_llm_analyzer) -> ReviewService:
    """Provide a review service with mocked collaborators."""
    return ReviewService(
        github_service=mock_github_service,
        llm_analyzer=mock_llm_analyzer,
    )


@pytest.fixture
def sample_finding() -> Finding:
    """Provide a sample finding."""
    return Finding(
        file="src/auth.ts",
        line=12,
        body="Possible SQL injection risk in the query builder",
        severity=Severity.CRITICAL,
    )


@pytest.fixture
def sample_report(sample_finding) -> ReviewReport:
    """Provide a sample report in the detailed taxonomy."""
    return ReviewReport(
        repository="octocat/hello-world",
        pr_number=42,
        title="Add login validation",
        summary="Adds validation.",
        overall_score=9,
        taxonomy="detailed",
        findings={
            "concerns": [
                sample_finding,
                Finding(file="src/session.ts", body="Minor style nit", severity=Severity.MINOR),
            ]
        },
        notes={
            "strengths": ["Clear separation of concerns"],
            "recommendations": ["Add integration tests"],
        },
    )
