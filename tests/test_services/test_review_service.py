"""
Tests for Review Service.

Tests the review pipeline, comment reconciliation and dispatch.
"""

import pytest

from ai_pr_review.errors import CompletionAPIError, ErrorKind, HostingAPIError
from ai_pr_review.models.schemas import (
    TRIAGE_TAXONOMY,
    DispatchStatus,
    Finding,
    InlineComment,
    ParsedReview,
    ReviewReport,
    Severity,
)
from ai_pr_review.services.review_service import ReviewOutcome, ReviewService, build_report


class TestBuildReport:
    """Tests for build_report function."""

    def test_combines_snapshot_and_parsed(self, sample_snapshot):
        """Test identifiers come from the snapshot and content from the parser."""
        parsed = ParsedReview(
            summary="Looks fine.",
            score=8,
            findings={"concerns": [Finding(file="src/auth.ts", line=11, body="bug")]},
            notes={"strengths": ["tidy"]},
        )
        report = build_report(sample_snapshot, parsed)

        assert report.repository == "octocat/hello-world"
        assert report.pr_number == 42
        assert report.title == "Add login validation"
        assert report.summary == "Looks fine."
        assert report.overall_score == 8
        assert report.taxonomy == "detailed"
        assert report.findings_for("concerns")[0].line == 11
        assert report.notes_for("strengths") == ["tidy"]


class TestReviewPullRequest:
    """Tests for ReviewService.review_pull_request."""

    @pytest.mark.asyncio
    async def test_review(self, review_service, mock_github_service, mock_llm_analyzer):
        """Test one fetch and one completion produce a report."""
        outcome = await review_service.review_pull_request("octocat", "hello-world", 42)

        mock_github_service.get_snapshot.assert_awaited_once_with("octocat", "hello-world", 42)
        mock_llm_analyzer.review_pull_request.assert_awaited_once()
        assert outcome.report.overall_score == 9
        assert outcome.report.repository == "octocat/hello-world"
        assert len(outcome.report.findings_for("concerns")) == 4
        assert outcome.snapshot is mock_github_service.get_snapshot.return_value

    @pytest.mark.asyncio
    async def test_fetch_failure_skips_completion(
        self, review_service, mock_github_service, mock_llm_analyzer
    ):
        """Test a fetch failure is fatal and no completion is requested."""
        mock_github_service.get_snapshot.side_effect = HostingAPIError("not found", 404)

        with pytest.raises(HostingAPIError):
            await review_service.review_pull_request("octocat", "hello-world", 999)

        mock_llm_analyzer.review_pull_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_completion_failure(self, review_service, mock_llm_analyzer):
        """Test a completion failure is fatal."""
        mock_llm_analyzer.review_pull_request.side_effect = CompletionAPIError("quota")

        with pytest.raises(CompletionAPIError):
            await review_service.review_pull_request("octocat", "hello-world", 42)

    @pytest.mark.asyncio
    async def test_invalid_pr_number(self, review_service, mock_github_service):
        """Test a non-positive PR number is rejected before fetching."""
        with pytest.raises(ValueError):
            await review_service.review_pull_request("octocat", "hello-world", 0)

        mock_github_service.get_snapshot.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_triage_taxonomy(
        self, mock_github_service, mock_llm_analyzer, triage_response
    ):
        """Test the taxonomy flows to the analyzer and the parser."""
        mock_llm_analyzer.review_pull_request.return_value = triage_response
        service = ReviewService(mock_github_service, mock_llm_analyzer, taxonomy=TRIAGE_TAXONOMY)

        outcome = await service.review_pull_request("octocat", "hello-world", 42)

        assert mock_llm_analyzer.review_pull_request.call_args.args[1] is TRIAGE_TAXONOMY
        assert outcome.report.taxonomy == "triage"
        assert outcome.report.findings_for("critical")[0].severity == Severity.CRITICAL


class TestInlineComments:
    """Tests for comment building and reconciliation."""

    def test_build_inline_comments(self, review_service, sample_report):
        """Test only findings with a line become inline comments."""
        comments = review_service.build_inline_comments(sample_report)

        assert len(comments) == 1
        assert comments[0].path == "src/auth.ts"
        assert comments[0].line == 12
        assert "**CRITICAL**" in comments[0].body

    def test_reconcile(self, review_service, a_ts_snapshot):
        """Test lines outside the diff are skipped and lines inside are kept."""
        outside = InlineComment(path="a.ts", line=15, body="x")
        inside = InlineComment(path="a.ts", line=11, body="y")

        dispatchable, skipped = review_service.reconcile(a_ts_snapshot, [outside, inside])

        assert dispatchable == [inside]
        assert skipped == [outside]

    def test_reconcile_unknown_file(self, review_service, a_ts_snapshot):
        """Test comments on files outside the PR are skipped."""
        comment = InlineComment(path="b.ts", line=10, body="x")

        dispatchable, skipped = review_service.reconcile(a_ts_snapshot, [comment])

        assert dispatchable == []
        assert skipped == [comment]

    def test_reconcile_ignores_lineless(self, review_service, a_ts_snapshot):
        """Test comments without a line are in neither list."""
        comment = InlineComment(path="a.ts", body="x")
        assert review_service.reconcile(a_ts_snapshot, [comment]) == ([], [])


class TestDispatchComments:
    """Tests for ReviewService.dispatch_comments."""

    @pytest.mark.asyncio
    async def test_skip_invalid_line(self, review_service, mock_github_service, a_ts_snapshot):
        """Test an invalid line is never sent and a valid one is posted."""
        comments = [
            InlineComment(path="a.ts", line=15, body="x"),
            InlineComment(path="a.ts", line=11, body="y"),
        ]

        summary = await review_service.dispatch_comments(a_ts_snapshot, comments)

        mock_github_service.post_inline_comment.assert_awaited_once_with(
            owner="octocat",
            repo="hello-world",
            pr_number=42,
            commit_sha="abc123",
            path="a.ts",
            line=11,
            body="y",
        )
        assert (summary.posted, summary.skipped, summary.failed) == (1, 1, 0)
        assert summary.results[0].status == DispatchStatus.SKIPPED_INVALID_LINE
        assert summary.results[0].comment.line == 15

    @pytest.mark.asyncio
    async def test_failure_isolated(self, review_service, mock_github_service, a_ts_snapshot):
        """Test one rejected comment does not stop the others."""
        mock_github_service.post_inline_comment.side_effect = [
            {"id": 1},
            HostingAPIError(
                "Unprocessable Entity", status_code=422, kind=ErrorKind.RECOVERABLE_ITEM
            ),
            {"id": 3},
        ]
        comments = [InlineComment(path="a.ts", line=n, body=f"c{n}") for n in (10, 11, 12)]

        summary = await review_service.dispatch_comments(a_ts_snapshot, comments)

        assert mock_github_service.post_inline_comment.await_count == 3
        assert (summary.posted, summary.skipped, summary.failed) == (2, 0, 1)
        assert [r.status for r in summary.results] == [
            DispatchStatus.POSTED,
            DispatchStatus.FAILED_REMOTE,
            DispatchStatus.POSTED,
        ]
        assert summary.results[1].error == "Unprocessable Entity"

    @pytest.mark.asyncio
    async def test_posts_in_order(self, review_service, mock_github_service, a_ts_snapshot):
        """Test comments are posted one at a time in input order."""
        comments = [InlineComment(path="a.ts", line=n, body=f"c{n}") for n in (12, 10, 11)]

        await review_service.dispatch_comments(a_ts_snapshot, comments)

        lines = [c.kwargs["line"] for c in mock_github_service.post_inline_comment.call_args_list]
        assert lines == [12, 10, 11]

    @pytest.mark.asyncio
    async def test_results_in_input_order(
        self, review_service, mock_github_service, a_ts_snapshot
    ):
        """Test skipped and attempted comments are reported in input order."""
        comments = [InlineComment(path="a.ts", line=n, body=f"c{n}") for n in (10, 15, 11)]

        summary = await review_service.dispatch_comments(a_ts_snapshot, comments)

        assert [r.comment.line for r in summary.results] == [10, 15, 11]
        assert [r.status for r in summary.results] == [
            DispatchStatus.POSTED,
            DispatchStatus.SKIPPED_INVALID_LINE,
            DispatchStatus.POSTED,
        ]

    @pytest.mark.asyncio
    async def test_fatal_error_propagates(
        self, review_service, mock_github_service, a_ts_snapshot
    ):
        """Test an error that is not recoverable per comment stops dispatch."""
        mock_github_service.post_inline_comment.side_effect = HostingAPIError("bad credentials", 401)
        comments = [InlineComment(path="a.ts", line=n, body=f"c{n}") for n in (10, 11)]

        with pytest.raises(HostingAPIError):
            await review_service.dispatch_comments(a_ts_snapshot, comments)

        assert mock_github_service.post_inline_comment.await_count == 1

    @pytest.mark.asyncio
    async def test_nothing_to_dispatch(self, review_service, mock_github_service, a_ts_snapshot):
        """Test an empty comment list makes no requests."""
        summary = await review_service.dispatch_comments(a_ts_snapshot, [])

        mock_github_service.post_inline_comment.assert_not_awaited()
        assert summary.results == []


class TestPublish:
    """Tests for ReviewService.publish."""

    def _outcome(self, snapshot, *findings):
        report = ReviewReport(
            repository=snapshot.full_repo_name,
            pr_number=snapshot.number,
            title=snapshot.title,
            summary="Summary text",
            overall_score=6,
            findings={"concerns": list(findings)},
        )
        return ReviewOutcome(snapshot=snapshot, report=report)

    @pytest.mark.asyncio
    async def test_publish(self, review_service, mock_github_service, a_ts_snapshot):
        """Test the summary is posted and then inline comments."""
        calls = []
        mock_github_service.post_review_summary.side_effect = (
            lambda **kwargs: calls.append("summary")
        )
        mock_github_service.post_inline_comment.side_effect = (
            lambda **kwargs: calls.append(kwargs["line"])
        )
        outcome = self._outcome(
            a_ts_snapshot,
            Finding(file="a.ts", line=11, body="bug here", severity=Severity.MAJOR),
            Finding(file="a.ts", line=40, body="outside the diff"),
            Finding(file="a.ts", body="no line"),
        )

        summary = await review_service.publish(outcome)

        assert calls == ["summary", 11]
        body = mock_github_service.post_review_summary.call_args.kwargs["body"]
        assert "AI PR Code Review" in body
        assert "Summary text" in body
        assert (summary.posted, summary.skipped, summary.failed) == (1, 1, 0)

    @pytest.mark.asyncio
    async def test_publish_summary_failure_is_fatal(
        self, review_service, mock_github_service, a_ts_snapshot
    ):
        """Test a failed summary post stops publishing."""
        mock_github_service.post_review_summary.side_effect = HostingAPIError("forbidden", 403)
        outcome = self._outcome(a_ts_snapshot, Finding(file="a.ts", line=11, body="x"))

        with pytest.raises(HostingAPIError):
            await review_service.publish(outcome)

        mock_github_service.post_inline_comment.assert_not_awaited()
