"""
Command-line entry point for AI PR Review.

Validates input and credentials up front, runs one review, and hands the
report to the selected renderer.
"""

import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from ai_pr_review import __version__
from ai_pr_review.analyzers.llm_analyzer import LLMAnalyzer
from ai_pr_review.config import Settings, get_settings, setup_logging
from ai_pr_review.errors import (
    InvalidRepositoryError,
    ReviewError,
    UnsupportedOutputError,
)
from ai_pr_review.formatters import ConsoleFormatter, FileFormatter, GitHubFormatter
from ai_pr_review.formatters.file_formatter import DEFAULT_OUTPUT_FILE
from ai_pr_review.models.schemas import TAXONOMIES, get_taxonomy
from ai_pr_review.services.github_service import GitHubService
from ai_pr_review.services.review_service import ReviewService
from ai_pr_review.utils.helpers import parse_repository

OUTPUT_MODES = ("console", "file", "github")

console = Console()


def _validate_repository(ctx: click.Context, param: click.Parameter, value: str) -> tuple[str, str]:
    try:
        return parse_repository(value)
    except InvalidRepositoryError as e:
        raise click.BadParameter(e.message) from e


def _validate_output(ctx: click.Context, param: click.Parameter, value: str) -> str:
    mode = value.strip().lower()
    if mode not in OUTPUT_MODES:
        error = UnsupportedOutputError(
            f"Output must be one of: {', '.join(OUTPUT_MODES)} (got {value!r})"
        )
        raise click.BadParameter(error.message)
    return mode


async def run_review(
    settings: Settings,
    owner: str,
    repo: str,
    pr_number: int,
    output: str,
    output_file: str,
) -> None:
    """Run one review and render it."""
    taxonomy = get_taxonomy(settings.review_taxonomy)
    review_service = ReviewService(
        github_service=GitHubService.from_settings(settings),
        llm_analyzer=LLMAnalyzer.from_settings(settings),
        taxonomy=taxonomy,
    )

    console.print(f"📋 Fetching PR #{pr_number} from {owner}/{repo}...")
    outcome = await review_service.review_pull_request(owner, repo, pr_number)
    console.print("[green]✅ Review completed![/green]\n")

    if output == "console":
        ConsoleFormatter(console).format(outcome.report)
    elif output == "file":
        path = FileFormatter().format(outcome.report, output_file)
        console.print(f"📝 Report written to {escape(str(path))}")
    elif output == "github":
        await GitHubFormatter(review_service, console).format(outcome)
    else:
        raise UnsupportedOutputError(f"Invalid output format: {output}")


@click.command("ai-pr-review")
@click.version_option(version=__version__, prog_name="ai-pr-review")
@click.option(
    "-r",
    "--repository",
    required=True,
    callback=_validate_repository,
    help="Repository in format: owner/repo",
)
@click.option(
    "-p",
    "--pr-number",
    required=True,
    type=click.IntRange(min=1),
    help="Pull request number.",
)
@click.option(
    "-o",
    "--output",
    default="console",
    show_default=True,
    callback=_validate_output,
    help=f"Output format: {', '.join(OUTPUT_MODES)}.",
)
@click.option(
    "-f",
    "--output-file",
    default=DEFAULT_OUTPUT_FILE,
    show_default=True,
    help="Output file path (when using file output).",
)
@click.option("--model", default=None, help="OpenAI model. Overrides OPENAI_MODEL.")
@click.option(
    "--taxonomy",
    type=click.Choice(sorted(TAXONOMIES), case_sensitive=False),
    default=None,
    help="Review categories. Overrides REVIEW_TAXONOMY.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging level. Overrides LOG_LEVEL.",
)
def main(
    repository: tuple[str, str],
    pr_number: int,
    output: str,
    output_file: str,
    model: Optional[str],
    taxonomy: Optional[str],
    log_level: Optional[str],
) -> None:
    """AI-powered GitHub PR code reviewer.

    \b
    Required environment variables (or .env):
      GITHUB_TOKEN      GitHub personal access token
      OPENAI_API_KEY    OpenAI API key
    """
    overrides = {}
    if model:
        overrides["openai_model"] = model
    if taxonomy:
        overrides["review_taxonomy"] = taxonomy.lower()
    if log_level:
        overrides["log_level"] = log_level.upper()
    settings = get_settings().model_copy(update=overrides)
    setup_logging(settings)

    try:
        settings.require_credentials()
    except ReviewError as e:
        raise click.ClickException(e.message) from e

    owner, repo = repository
    console.print("🚀 Starting AI PR Review...\n")

    try:
        asyncio.run(run_review(settings, owner, repo, pr_number, output, output_file))
    except ReviewError as e:
        raise click.ClickException(e.message) from e

    console.print("✨ Done!\n")


if __name__ == "__main__":
    main()
