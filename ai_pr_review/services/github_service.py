"""
GitHub Service for AI PR Review.

Provides GitHub API integration for fetching PR snapshots and posting reviews.
"""

import asyncio
import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ai_pr_review.config import Settings
from ai_pr_review.errors import ErrorKind, HostingAPIError
from ai_pr_review.models.snapshot import ChangedFile, PullRequestSnapshot

DEFAULT_API_URL = "https://api.github.com"

# GitHub stops listing PR files after 3000 entries.
_FILES_PER_PAGE = 100
_MAX_FILE_PAGES = 30


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, HostingAPIError) and exc.is_retryable


class GitHubService:
    """
    GitHub API integration service.

    Provides methods to fetch PR details and changed files, and to post
    inline comments and review summaries.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the GitHub Service.

        Args:
            token: GitHub personal access token.
            api_url: GitHub API base URL.
            timeout: Per-request timeout in seconds.
        """
        self._logger = logging.getLogger("ai_pr_review.github_service")
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubService":
        """Create a service from application settings."""
        return cls(
            token=settings.github_token,
            api_url=settings.github_api_url,
            timeout=settings.request_timeout,
        )

    @property
    def is_configured(self) -> bool:
        """Check if GitHub is properly configured."""
        return bool(self._token and self._token != "your_github_token_here")

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "AI-PR-Review/1.0",
        }
        if self.is_configured:
            headers["Authorization"] = f"token {self._token}"
        return headers

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs,
    ) -> Any:
        """
        Make a request to the GitHub API.

        Args:
            method: HTTP method.
            endpoint: API endpoint.
            **kwargs: Additional arguments for httpx.

        Returns:
            Decoded response JSON.

        Raises:
            HostingAPIError: On a non-2xx response, a transport failure or a
                body that is not JSON.
        """
        url = f"{self._api_url}{endpoint}"

        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method,
                    url,
                    headers=self._get_headers(),
                    timeout=self._timeout,
                    **kwargs,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                message = _error_message(e.response)
                self._logger.error(f"GitHub API error {status} on {method} {endpoint}: {message}")
                raise HostingAPIError(
                    f"GitHub API returned {status} for {method} {endpoint}: {message}",
                    status_code=status,
                ) from e
            except httpx.RequestError as e:
                self._logger.error(f"Request to {endpoint} failed: {e}")
                raise HostingAPIError(f"Request to GitHub failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            self._logger.error(f"GitHub returned invalid JSON for {method} {endpoint}: {e}")
            raise HostingAPIError(
                f"GitHub returned invalid JSON for {method} {endpoint}",
                status_code=response.status_code,
            ) from e

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    async def _get(self, endpoint: str, **kwargs) -> Any:
        """GET with retries on transport errors and 5xx responses."""
        return await self._make_request("GET", endpoint, **kwargs)

    async def get_pull_request(
        self,
        owner: str,
        repo: str,
        pr_number: int,
    ) -> dict:
        """
        Get the raw metadata of a Pull Request.

        Args:
            owner: Repository owner.
            repo: Repository name.
            pr_number: PR number.

        Returns:
            PR JSON object.
        """
        return await self._get(f"/repos/{owner}/{repo}/pulls/{pr_number}")

    async def list_changed_files(
        self,
        owner: str,
        repo: str,
        pr_number: int,
    ) -> list[dict]:
        """
        List every file changed in a Pull Request, following pagination.

        Args:
            owner: Repository owner.
            repo: Repository name.
            pr_number: PR number.

        Returns:
            List of file JSON objects in API order.
        """
        endpoint = f"/repos/{owner}/{repo}/pulls/{pr_number}/files"
        files: list[dict] = []

        for page in range(1, _MAX_FILE_PAGES + 1):
            batch = await self._get(
                endpoint, params={"per_page": _FILES_PER_PAGE, "page": page}
            )
            if not batch:
                break
            files.extend(batch)
            if len(batch) < _FILES_PER_PAGE:
                break

        return files

    async def get_snapshot(
        self,
        owner: str,
        repo: str,
        pr_number: int,
    ) -> PullRequestSnapshot:
        """
        Fetch a Pull Request and its changed files as one snapshot.

        The two requests are independent and issued concurrently.

        Args:
            owner: Repository owner.
            repo: Repository name.
            pr_number: PR number.

        Returns:
            PullRequestSnapshot with valid comment lines derived per file.
        """
        pr_data, files_data = await asyncio.gather(
            self.get_pull_request(owner, repo, pr_number),
            self.list_changed_files(owner, repo, pr_number),
        )

        files = tuple(
            ChangedFile(
                filename=file.get("filename", ""),
                status=file.get("status", "modified"),
                additions=file.get("additions", 0),
                deletions=file.get("deletions", 0),
                changes=file.get("changes", 0),
                patch=file.get("patch"),
            )
            for file in files_data
        )

        snapshot = PullRequestSnapshot(
            owner=owner,
            repo=repo,
            number=pr_data.get("number", pr_number),
            title=pr_data.get("title") or "",
            description=pr_data.get("body") or "",
            author=(pr_data.get("user") or {}).get("login", "unknown"),
            base_ref=pr_data.get("base", {}).get("ref", ""),
            head_ref=pr_data.get("head", {}).get("ref", ""),
            head_sha=pr_data.get("head", {}).get("sha", ""),
            files=files,
            html_url=pr_data.get("html_url", ""),
        )
        self._logger.info(
            f"Fetched {snapshot.full_repo_name}#{snapshot.number} with {len(files)} changed file(s)"
        )
        return snapshot

    async def post_inline_comment(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_sha: str,
        path: str,
        line: int,
        body: str,
        side: str = "RIGHT",
    ) -> dict:
        """
        Post a review comment on one line of a PR file.

        Args:
            owner: Repository owner.
            repo: Repository name.
            pr_number: PR number.
            commit_sha: Head commit SHA the line refers to.
            path: File path.
            line: Head-revision line number.
            body: Comment body.
            side: Which side of the diff (LEFT or RIGHT).

        Returns:
            Created comment JSON.

        Raises:
            HostingAPIError: With kind RECOVERABLE_ITEM when the post fails.
        """
        endpoint = f"/repos/{owner}/{repo}/pulls/{pr_number}/comments"

        data = {
            "body": body,
            "commit_id": commit_sha,
            "path": path,
            "line": line,
            "side": side,
        }

        try:
            return await self._make_request("POST", endpoint, json=data)
        except HostingAPIError as e:
            raise HostingAPIError(
                e.message, status_code=e.status_code, kind=ErrorKind.RECOVERABLE_ITEM
            ) from e

    async def post_review_summary(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        body: str,
        event: str = "COMMENT",
    ) -> dict:
        """
        Create a PR review holding the summary note.

        Args:
            owner: Repository owner.
            repo: Repository name.
            pr_number: PR number.
            body: Review body.
            event: Review event (APPROVE, REQUEST_CHANGES, COMMENT).

        Returns:
            Created review JSON.
        """
        endpoint = f"/repos/{owner}/{repo}/pulls/{pr_number}/reviews"

        return await self._make_request("POST", endpoint, json={"body": body, "event": event})


def _error_message(response: httpx.Response) -> str:
    """Pull GitHub's error message out of a response, if any."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict):
        return str(payload.get("message", ""))
    return ""
