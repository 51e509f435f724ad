"""GitHub renderer: publishes a review back onto the pull request."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from ai_pr_review.models.schemas import DispatchStatus, DispatchSummary
from ai_pr_review.services.review_service import ReviewOutcome, ReviewService


class GitHubFormatter:
    """Posts the summary review and inline comments through the review service."""

    def __init__(self, review_service: ReviewService, console: Optional[Console] = None) -> None:
        self._review_service = review_service
        self._console = console or Console()

    async def format(self, outcome: ReviewOutcome) -> DispatchSummary:
        """
        Publish the review and print the comment tally.

        Args:
            outcome: Result of ReviewService.review_pull_request.

        Returns:
            DispatchSummary of the inline comments.
        """
        summary = await self._review_service.publish(outcome)
        console = self._console

        console.print("[green]✓ Posted review summary[/green]")
        if outcome.snapshot.html_url:
            console.print(f"🔗 {escape(outcome.snapshot.html_url)}")
        if summary.posted:
            console.print(f"[green]✓ Posted {summary.posted} inline comment(s)[/green]")
        if summary.skipped:
            console.print(
                f"[yellow]⚠️  Skipped {summary.skipped} comment(s) (lines not in diff)[/yellow]"
            )
        if summary.failed:
            console.print(f"[yellow]⚠️  Failed to post {summary.failed} comment(s):[/yellow]")
            for result in summary.results:
                if result.status == DispatchStatus.FAILED_REMOTE:
                    location = escape(result.comment.location)
                    error = escape(result.error or "")
                    console.print(f"[yellow]   {location}: {error}[/yellow]")

        return summary
