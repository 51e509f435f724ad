"""
LLM Analyzer for AI PR Review.

OpenAI chat-completion integration: builds the review prompt for a pull
request snapshot and returns the model's free-text answer.
"""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from ai_pr_review.config import Settings
from ai_pr_review.errors import CompletionAPIError
from ai_pr_review.models.schemas import DETAILED_TAXONOMY, ReviewTaxonomy
from ai_pr_review.models.snapshot import PullRequestSnapshot
from ai_pr_review.utils.diff import annotate_patch
from ai_pr_review.utils.helpers import truncate_string

DEFAULT_MODEL = "gpt-4o"

SYSTEM_PROMPT = (
    "You are an expert code reviewer. Provide thorough, constructive feedback on "
    "pull requests. Only reference line numbers shown in the left gutter of the diffs."
)


class LLMAnalyzer:
    """
    OpenAI GPT integration for pull request review.

    Makes exactly one completion call per review and never retries it: a
    failed call is fatal for the run.
    """

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        max_patch_chars: int = 20_000,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """
        Initialize the LLM Analyzer.

        Args:
            api_key: OpenAI API key.
            model: Model to use. Defaults to DEFAULT_MODEL.
            temperature: Temperature for responses.
            max_tokens: Completion token limit.
            max_patch_chars: Per-file patch size kept in the prompt.
            client: Pre-built client, mainly for tests.
        """
        self._logger = logging.getLogger("ai_pr_review.llm_analyzer")

        self._api_key = api_key
        self._model = model or DEFAULT_MODEL
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._max_patch_chars = max_patch_chars

        self._client: Optional[AsyncOpenAI] = client
        if self._client is None and self._api_key and self._api_key != "your_openai_api_key_here":
            # max_retries=0: the completion request is never retried.
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMAnalyzer":
        """Create an analyzer from application settings."""
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            max_patch_chars=settings.max_patch_chars,
        )

    @property
    def is_configured(self) -> bool:
        """Check if LLM is properly configured."""
        return self._client is not None

    @property
    def model(self) -> str:
        """Name of the completion model."""
        return self._model

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Request one chat completion.

        Args:
            system_prompt: System prompt for the model.
            user_prompt: User prompt with the request.

        Returns:
            Response text.

        Raises:
            CompletionAPIError: If the client is missing, the call fails, or
                the model returns no text.
        """
        if not self._client:
            raise CompletionAPIError("OpenAI client not configured")

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as e:
            self._logger.error(f"OpenAI API error: {e}")
            raise CompletionAPIError(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise CompletionAPIError("OpenAI returned an empty review")

        self._logger.debug(f"Received {len(content)} characters from {self._model}")
        return content

    def build_review_prompt(
        self,
        snapshot: PullRequestSnapshot,
        taxonomy: ReviewTaxonomy = DETAILED_TAXONOMY,
    ) -> str:
        """
        Build the user prompt for a pull request.

        Args:
            snapshot: Pull request to review.
            taxonomy: Section scheme the model is asked to follow.

        Returns:
            Prompt text with metadata, line-annotated diffs and instructions.
        """
        lines = [
            "Review the following pull request:",
            "",
            f"Title: {snapshot.title}",
            f"Description: {snapshot.description or '(none)'}",
            f"Author: {snapshot.author}",
            f"Branches: {snapshot.head_ref} -> {snapshot.base_ref}",
            "",
            f"Files changed ({len(snapshot.files)}):",
        ]

        for changed_file in snapshot.files:
            lines.append("")
            lines.append(f"### File: {changed_file.filename}")
            lines.append(
                f"Status: {changed_file.status} "
                f"(+{changed_file.additions}/-{changed_file.deletions})"
            )
            if changed_file.patch:
                patch = truncate_string(
                    changed_file.patch,
                    max_length=self._max_patch_chars,
                    suffix="\n... [diff truncated]",
                )
                lines.append("```diff")
                lines.append(annotate_patch(patch))
                lines.append("```")
            else:
                lines.append("(no textual diff: binary or too large)")

        lines.append("")
        lines.append("Provide a comprehensive code review with these sections, in this order:")
        for number, spec in enumerate(taxonomy.sections, start=1):
            lines.append(f"{number}. {spec.headers[0]}: {spec.instruction}")

        lines.append("")
        lines.append("Format rules:")
        lines.append("- Start each section with its name in capitals followed by a colon.")
        lines.append("- Write every list item as a bullet starting with '- '.")
        if taxonomy.finding_keys:
            lines.append(
                "- Prefix each issue with [path:line] using the new-file line numbers "
                "from the diff gutter, or [path] when no single line applies."
            )
        lines.append("- Give the score as a bare integer.")

        return "\n".join(lines)

    async def review_pull_request(
        self,
        snapshot: PullRequestSnapshot,
        taxonomy: ReviewTaxonomy = DETAILED_TAXONOMY,
    ) -> str:
        """
        Ask the model to review a pull request.

        Args:
            snapshot: Pull request to review.
            taxonomy: Section scheme the model is asked to follow.

        Returns:
            Raw review text.
        """
        prompt = self.build_review_prompt(snapshot, taxonomy)
        self._logger.info(
            f"Requesting review of {snapshot.full_repo_name}#{snapshot.number} from {self._model}"
        )
        return await self.complete(SYSTEM_PROMPT, prompt)
