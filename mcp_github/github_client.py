"""
GitHub REST API client.

`GitHubAPI.request` is the single-resource request engine and
`GitHubAPI.request_paginated` follows `Link: rel="next"` headers across
pages. The per-resource methods below only choose URL shapes and payloads.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

import httpx

from .auth import CredentialProvider, get_credential_provider
from .config import Settings, settings
from .errors import AuthError, ShapeError
from .helpers import create_api_error, parse_link_header, parse_response_body
from .models import (
    Commit,
    CommitDetail,
    CompareResult,
    Issue,
    IssueComment,
    PullRequest,
)

logger = logging.getLogger(__name__)

AI_COMMENT_IDENTIFIER = "[AI] Generated using MCP\n\n"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"

T = TypeVar("T")


@dataclass
class PaginatedResult(Generic[T]):
    """Items from every fetched page, in server order.

    `truncated` is True when the page cap stopped the walk while a `next`
    link was still pending.
    """

    items: List[T] = field(default_factory=list)
    pages: int = 0
    truncated: bool = False


class GitHubAPI:
    """Authenticated GitHub REST client.

    Example:
        >>> api = GitHubAPI()
        >>> api.initialize()
        >>> issue = await api.get_issue("octocat", "hello-world", 1)
    """

    def __init__(
        self,
        provider: Optional[CredentialProvider] = None,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or settings
        self.provider = provider or get_credential_provider(self.config)
        self._transport = transport
        self.token: Optional[str] = None
        self.auth_method: Optional[str] = None

    # ── Authentication ────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Fetch the credential once; raises AuthError when it is unusable."""
        logger.debug("Initializing GitHub API client")
        credential = self.provider.get_credential()
        if credential and credential.authenticated:
            self.token = credential.token
            self.auth_method = self.provider.method
            logger.info(f"GitHub API authenticated using {self.auth_method}")
            return
        raise AuthError(f"GitHub authentication failed: {self.provider.login_hint}")

    def get_auth_status(self) -> Dict[str, Any]:
        return {"authenticated": bool(self.token), "method": self.auth_method}

    async def test_connection(self) -> bool:
        try:
            await self.request("/user")
            return True
        except Exception as exc:
            logger.error(f"Connection test failed: {exc}")
            return False

    # ── Request engine ────────────────────────────────────────────────────

    def _headers(self, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        if not self.token:
            raise AuthError("GitHub authentication required")
        headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": self.config.user_agent,
            "X-GitHub-Api-Version": self.config.github_api_version,
        }
        headers.update(overrides or {})
        headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.github_api_base.rstrip("/"),
            timeout=self.config.request_timeout,
            transport=self._transport,
        )

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> Tuple[httpx.Response, Any]:
        logger.debug(f"Making request: {method} {url} using {self.auth_method}")
        resp = await client.request(
            method,
            url,
            headers=self._headers(headers),
            content=json.dumps(body) if body is not None else None,
        )
        parsed = parse_response_body(resp)
        if not resp.is_success:
            logger.debug(f"Request failed: {resp.status_code} {parsed!r}")
            raise create_api_error(resp.status_code, parsed)
        logger.debug(f"Request successful: {resp.status_code}")
        return resp, parsed

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> Any:
        """
        Perform one request and return the parsed body.

        Args:
            url: Absolute URL or path relative to the API base.
            method: HTTP method.
            headers: Header overrides; they win over the protocol headers.
            body: JSON-serializable payload, omitted when None.

        Raises:
            AuthError: no token held.
            ApiError: non-2xx response.
        """
        async with self._client() as client:
            _, parsed = await self._send(client, url, method, headers, body)
        return parsed

    async def request_paginated(
        self,
        url: str,
        per_page: Optional[int] = None,
        max_pages: Optional[int] = None,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> PaginatedResult[Any]:
        """
        Collect every page of a list endpoint by following `rel="next"`.

        Args:
            url: First page URL or path.
            per_page: Page size (defaults to the configured value).
            max_pages: Stop after this many pages even if more remain.

        Raises:
            ValueError: `per_page` or `max_pages` below 1.
            ShapeError: a page body is not a JSON array.
        """
        per_page = per_page if per_page is not None else self.config.per_page
        max_pages = max_pages if max_pages is not None else self.config.max_pages
        if per_page < 1 or (max_pages is not None and max_pages < 1):
            raise ValueError(f"per_page and max_pages must be >= 1 (got {per_page}, {max_pages})")
        current_url: Optional[str] = str(httpx.URL(url).copy_set_param("per_page", per_page))
        result: PaginatedResult[Any] = PaginatedResult()

        async with self._client() as client:
            while current_url:
                if max_pages is not None and result.pages >= max_pages:
                    logger.warning(f"Reached max_pages limit: {max_pages}")
                    result.truncated = True
                    break

                result.pages += 1
                logger.debug(f"Fetching page {result.pages}: {current_url}")
                resp, page = await self._send(client, current_url, method, headers, body)

                if not isinstance(page, list):
                    raise ShapeError("Expected array response for paginated request")
                result.items.extend(page)

                links = parse_link_header(resp.headers.get("link"))
                current_url = links.get("next") or None
                logger.debug(
                    f"Page {result.pages}: Retrieved {len(page)} items. Total: {len(result.items)}"
                )

        logger.info(f"Pagination complete: {result.pages} pages, {len(result.items)} total items")
        return result

    # ── Issues ────────────────────────────────────────────────────────────

    async def create_issue(self, owner: str, repo: str, title: str, body: Optional[str] = None) -> Issue:
        logger.debug(f"Creating issue in {owner}/{repo}: {title}")
        raw = await self.request(
            f"/repos/{owner}/{repo}/issues",
            method="POST",
            body={"title": title, "body": body or ""},
        )
        return Issue.model_validate(raw)

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> Issue:
        logger.debug(f"Getting issue #{issue_number} from {owner}/{repo}")
        raw = await self.request(f"/repos/{owner}/{repo}/issues/{issue_number}")
        return Issue.model_validate(raw)

    async def update_issue(
        self, owner: str, repo: str, issue_number: int, updates: Dict[str, Any]
    ) -> Issue:
        logger.debug(f"Updating issue #{issue_number} in {owner}/{repo}: {sorted(updates)}")
        raw = await self.request(
            f"/repos/{owner}/{repo}/issues/{issue_number}",
            method="PATCH",
            body=updates,
        )
        return Issue.model_validate(raw)

    async def add_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> IssueComment:
        logger.debug(f"Adding comment to issue #{issue_number} in {owner}/{repo}")
        raw = await self.request(
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            method="POST",
            body={"body": AI_COMMENT_IDENTIFIER + body},
        )
        return IssueComment.model_validate(raw)

    async def get_issue_comments(self, owner: str, repo: str, issue_number: int) -> List[IssueComment]:
        logger.debug(f"Getting comments for #{issue_number} in {owner}/{repo}")
        page = await self.request_paginated(f"/repos/{owner}/{repo}/issues/{issue_number}/comments")
        return [IssueComment.model_validate(c) for c in page.items]

    # ── Pull requests ─────────────────────────────────────────────────────

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: Optional[str] = None,
        draft: Optional[bool] = None,
    ) -> PullRequest:
        logger.debug(
            f"Creating PR in {owner}/{repo}: {title} ({head} -> {base}){' (draft)' if draft else ''}"
        )
        raw = await self.request(
            f"/repos/{owner}/{repo}/pulls",
            method="POST",
            body={"title": title, "head": head, "base": base, "body": body or "", "draft": bool(draft)},
        )
        return PullRequest.model_validate(raw)

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequest:
        logger.debug(f"Getting PR #{pr_number} from {owner}/{repo}")
        raw = await self.request(f"/repos/{owner}/{repo}/pulls/{pr_number}")
        return PullRequest.model_validate(raw)

    async def update_pull_request(
        self, owner: str, repo: str, pr_number: int, updates: Dict[str, Any]
    ) -> PullRequest:
        logger.debug(f"Updating PR #{pr_number} in {owner}/{repo}: {sorted(updates)}")
        raw = await self.request(
            f"/repos/{owner}/{repo}/pulls/{pr_number}",
            method="PATCH",
            body=updates,
        )
        return PullRequest.model_validate(raw)

    async def get_pull_request_diff(self, owner: str, repo: str, pr_number: int) -> str:
        logger.debug(f"Getting diff for PR #{pr_number} in {owner}/{repo}")
        diff = await self.request(
            f"/repos/{owner}/{repo}/pulls/{pr_number}",
            headers={"Accept": DIFF_MEDIA_TYPE},
        )
        return diff if isinstance(diff, str) else json.dumps(diff)

    async def get_pull_request_comments(self, owner: str, repo: str, pr_number: int) -> List[IssueComment]:
        # PR conversation comments live on the issues endpoint
        return await self.get_issue_comments(owner, repo, pr_number)

    async def add_pull_request_comment(self, owner: str, repo: str, pr_number: int, body: str) -> IssueComment:
        return await self.add_issue_comment(owner, repo, pr_number, body)

    # ── Commits ───────────────────────────────────────────────────────────

    async def get_commit(self, owner: str, repo: str, ref: str) -> CommitDetail:
        logger.debug(f"Getting commit details for {owner}/{repo}@{ref}")
        raw = await self.request(f"/repos/{owner}/{repo}/commits/{ref}")
        return CommitDetail.model_validate(raw)

    async def get_commits_by_date_range(
        self,
        owner: str,
        repo: str,
        since: str,
        until: Optional[str] = None,
        author: Optional[str] = None,
        per_page: Optional[int] = None,
        max_pages: Optional[int] = None,
    ) -> PaginatedResult[Commit]:
        """List commits in a date window, optionally by one author (all pages)."""
        logger.debug(
            f"Getting commits for {owner}/{repo} from {since}"
            f"{f' to {until}' if until else ''}{f' by {author}' if author else ''}"
        )
        params = {"since": since}
        if until:
            params["until"] = until
        if author:
            params["author"] = author
        url = str(httpx.URL(f"/repos/{owner}/{repo}/commits", params=params))

        page = await self.request_paginated(url, per_page=per_page, max_pages=max_pages)
        return PaginatedResult(
            items=[Commit.model_validate(c) for c in page.items],
            pages=page.pages,
            truncated=page.truncated,
        )

    async def compare_commits(self, owner: str, repo: str, base: str, head: str) -> CompareResult:
        logger.debug(f"Comparing commits in {owner}/{repo}: {base}...{head}")
        raw = await self.request(f"/repos/{owner}/{repo}/compare/{base}...{head}")
        return CompareResult.model_validate(raw)


# ── Process-wide client ───────────────────────────────────────────────────

_github_api: Optional[GitHubAPI] = None


def get_github_api() -> GitHubAPI:
    """Return the shared client, creating an uninitialized one on first use."""
    global _github_api
    if _github_api is None:
        _github_api = GitHubAPI()
    return _github_api


def set_github_api(api: Optional[GitHubAPI]) -> None:
    global _github_api
    _github_api = api
