"""
Review Service for AI PR Review.

Main entry point for pull request reviews: fetches the snapshot, runs the
model analysis, assembles the report and publishes comments back to GitHub.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ai_pr_review.analyzers.llm_analyzer import LLMAnalyzer
from ai_pr_review.analyzers.response_parser import ResponseParser
from ai_pr_review.errors import ErrorKind, ReviewError
from ai_pr_review.models.schemas import (
    DETAILED_TAXONOMY,
    CommentDispatchResult,
    DispatchStatus,
    DispatchSummary,
    InlineComment,
    ParsedReview,
    ReviewReport,
    ReviewTaxonomy,
)
from ai_pr_review.models.snapshot import PullRequestSnapshot
from ai_pr_review.services.github_service import GitHubService
from ai_pr_review.utils.helpers import truncate_string, validate_pr_number


@dataclass(frozen=True)
class ReviewOutcome:
    """The snapshot a review was run on, and its report."""

    snapshot: PullRequestSnapshot
    report: ReviewReport


def build_report(
    snapshot: PullRequestSnapshot,
    parsed: ParsedReview,
    taxonomy: ReviewTaxonomy = DETAILED_TAXONOMY,
) -> ReviewReport:
    """
    Combine a snapshot's identifiers with parsed review content.

    Args:
        snapshot: The reviewed pull request.
        parsed: Parser output.
        taxonomy: Category scheme the content was parsed with.

    Returns:
        Immutable ReviewReport.
    """
    return ReviewReport(
        repository=snapshot.full_repo_name,
        pr_number=snapshot.number,
        title=snapshot.title,
        summary=parsed.summary,
        overall_score=parsed.score,
        taxonomy=taxonomy.name,
        findings={key: list(items) for key, items in parsed.findings.items()},
        notes={key: list(items) for key, items in parsed.notes.items()},
    )


class ReviewService:
    """
    Coordinates one end-to-end pull request review.

    Fetch snapshot, one model call, parse, assemble the report, and on
    request publish the summary and inline comments.
    """

    def __init__(
        self,
        github_service: GitHubService,
        llm_analyzer: LLMAnalyzer,
        taxonomy: ReviewTaxonomy = DETAILED_TAXONOMY,
        parser: Optional[ResponseParser] = None,
    ) -> None:
        """
        Initialize the Review Service.

        Args:
            github_service: GitHub API client.
            llm_analyzer: OpenAI review client.
            taxonomy: Category scheme for the prompt and the parser.
            parser: Response parser. Created for the taxonomy if not provided.
        """
        self._logger = logging.getLogger("ai_pr_review.review_service")
        self._github_service = github_service
        self._llm_analyzer = llm_analyzer
        self._taxonomy = taxonomy
        self._parser = parser or ResponseParser(taxonomy)

    @property
    def taxonomy(self) -> ReviewTaxonomy:
        """Category scheme used by this service."""
        return self._taxonomy

    async def review_pull_request(
        self,
        owner: str,
        repo: str,
        pr_number: int,
    ) -> ReviewOutcome:
        """
        Review a GitHub Pull Request.

        Args:
            owner: Repository owner.
            repo: Repository name.
            pr_number: PR number.

        Returns:
            ReviewOutcome with the snapshot and the report.

        Raises:
            HostingAPIError: If the PR cannot be fetched.
            CompletionAPIError: If the model call fails.
            ValueError: If pr_number is not a positive integer.
        """
        validate_pr_number(pr_number)
        self._logger.info(f"Starting PR review for {owner}/{repo}#{pr_number}")

        snapshot = await self._github_service.get_snapshot(owner, repo, pr_number)
        response = await self._llm_analyzer.review_pull_request(snapshot, self._taxonomy)
        parsed = self._parser.parse(response, snapshot)
        report = build_report(snapshot, parsed, self._taxonomy)

        self._logger.info(
            f"Review of {report.repository}#{report.pr_number} complete: "
            f"{len(report.all_findings)} finding(s), score {report.overall_score}"
        )
        return ReviewOutcome(snapshot=snapshot, report=report)

    def build_inline_comments(self, report: ReviewReport) -> list[InlineComment]:
        """
        Turn line-attributed findings into inline comment candidates.

        Findings without a line number are left to the summary note.
        """
        from ai_pr_review.formatters.markdown import format_finding_comment

        return [
            InlineComment(path=finding.file, line=finding.line, body=format_finding_comment(finding))
            for finding in report.all_findings
            if finding.line is not None
        ]

    def reconcile(
        self,
        snapshot: PullRequestSnapshot,
        comments: list[InlineComment],
    ) -> tuple[list[InlineComment], list[InlineComment]]:
        """
        Split candidates into dispatchable comments and invalid-line skips.

        Line-less comments are in neither list: they are never inline.

        Returns:
            Tuple of (dispatchable, skipped).
        """
        dispatchable: list[InlineComment] = []
        skipped: list[InlineComment] = []

        for comment in comments:
            if comment.line is None:
                continue
            changed_file = snapshot.get_file(comment.path)
            if changed_file is not None and changed_file.accepts_line(comment.line):
                dispatchable.append(comment)
            else:
                skipped.append(comment)

        return dispatchable, skipped

    async def dispatch_comments(
        self,
        snapshot: PullRequestSnapshot,
        comments: list[InlineComment],
    ) -> DispatchSummary:
        """
        Post inline comments one at a time.

        Comments on lines outside the diff are skipped without a request. A
        recoverable failure is recorded and the remaining comments still go
        out; any other error propagates.

        Args:
            snapshot: Snapshot holding the valid lines and head SHA.
            comments: Candidate comments, in order.

        Returns:
            DispatchSummary with one result per line-attributed comment, in
            input order.
        """
        _, skipped = self.reconcile(snapshot, comments)

        results: list[CommentDispatchResult] = []
        for comment in comments:
            if comment.line is None:
                continue
            if comment in skipped:
                self._logger.info(f"Skipping comment on {comment.location}: line not in diff")
                results.append(
                    CommentDispatchResult(
                        comment=comment, status=DispatchStatus.SKIPPED_INVALID_LINE
                    )
                )
                continue

            try:
                await self._github_service.post_inline_comment(
                    owner=snapshot.owner,
                    repo=snapshot.repo,
                    pr_number=snapshot.number,
                    commit_sha=snapshot.head_sha,
                    path=comment.path,
                    line=comment.line,
                    body=comment.body,
                )
            except ReviewError as e:
                if e.kind != ErrorKind.RECOVERABLE_ITEM:
                    raise
                self._logger.warning(
                    f"Failed to post comment on {comment.location}: {e.message} "
                    f"(body: {truncate_string(comment.body, 100)})"
                )
                results.append(
                    CommentDispatchResult(
                        comment=comment,
                        status=DispatchStatus.FAILED_REMOTE,
                        error=e.message,
                    )
                )
                continue

            results.append(CommentDispatchResult(comment=comment, status=DispatchStatus.POSTED))

        summary = DispatchSummary(results=results)
        self._logger.info(
            f"Inline comments: {summary.posted} posted, {summary.skipped} skipped, "
            f"{summary.failed} failed"
        )
        return summary

    async def publish(self, outcome: ReviewOutcome) -> DispatchSummary:
        """
        Post the summary review note and the inline comments.

        Args:
            outcome: Result of review_pull_request.

        Returns:
            DispatchSummary for the inline comments.

        Raises:
            HostingAPIError: If the summary review cannot be posted.
        """
        from ai_pr_review.formatters.markdown import format_report_markdown

        snapshot = outcome.snapshot
        await self._github_service.post_review_summary(
            owner=snapshot.owner,
            repo=snapshot.repo,
            pr_number=snapshot.number,
            body=format_report_markdown(outcome.report, self._taxonomy),
        )

        comments = self.build_inline_comments(outcome.report)
        return await self.dispatch_comments(snapshot, comments)
