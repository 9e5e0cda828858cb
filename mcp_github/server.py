"""
MCP Server – Exposes GitHub collaboration operations as MCP tools.

Tools (callable actions):
    create_issue              – open a new issue
    get_issue                 – issue details with its comments
    update_issue              – change title, body or state of an issue
    add_issue_comment         – comment on an issue (marked as AI-generated)
    create_pull_request       – open a pull request
    get_pull_request          – PR details with its comments
    update_pull_request       – change title, body, state or base of a PR
    get_pr_diff               – raw diff of a PR
    compare_commits           – ahead/behind, commits and files between two refs
    get_code_changes_by_date  – per-file change report over a date range

Every tool returns one text payload; failures come back as "❌ Error ..." text.
"""
import logging
from typing import Literal, Optional

from mcp.server.fastmcp import FastMCP

from . import formatter
from . import operations as ops
from .config import settings
from .github_client import get_github_api
from .models import IssueUpdate, PullRequestUpdate
from .operations import NothingToUpdate

logger = logging.getLogger(__name__)

# ── Create the MCP server instance ────────────────────────────────────────

mcp = FastMCP(
    "mcp-github",
    instructions=(
        "MCP server for GitHub issues, pull requests and commit-range "
        "code change reports, authenticated through the GitHub CLI."
    ),
    host=settings.mcp_server_host,
    port=settings.mcp_server_port,
)


# ═══════════════════════════════════════════════════════════════════════════
#  ISSUE TOOLS
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
async def create_issue(owner: str, repo: str, title: str, body: Optional[str] = None) -> str:
    """
    Create a new issue in a GitHub repository.

    Args:
        owner: Repository owner (username or organization).
        repo: Repository name.
        title: Issue title.
        body: Issue body (markdown).
    """
    try:
        issue = await ops.create_issue(get_github_api(), owner, repo, title, body)
        return formatter.format_issue_created(issue)
    except Exception as exc:
        logger.exception("Failed to create issue")
        return f"❌ Error creating issue: {exc}"


@mcp.tool()
async def get_issue(owner: str, repo: str, issue_number: int) -> str:
    """
    Get details of a GitHub issue including comments.

    Args:
        owner: Repository owner.
        repo: Repository name.
        issue_number: Issue number.
    """
    try:
        thread = await ops.get_issue(get_github_api(), owner, repo, issue_number)
        return formatter.format_issue_thread(thread)
    except Exception as exc:
        logger.exception("Failed to get issue #%s", issue_number)
        return f"❌ Error getting issue: {exc}"


@mcp.tool()
async def update_issue(
    owner: str,
    repo: str,
    issue_number: int,
    title: Optional[str] = None,
    body: Optional[str] = None,
    state: Optional[Literal["open", "closed"]] = None,
) -> str:
    """
    Update an existing GitHub issue (title, body, or state).

    Args:
        owner: Repository owner.
        repo: Repository name.
        issue_number: Issue number.
        title: New title.
        body: New body (markdown).
        state: New state – 'open' or 'closed'.
    """
    try:
        result = await ops.update_issue(
            get_github_api(), owner, repo, issue_number,
            IssueUpdate(title=title, body=body, state=state),
        )
        if isinstance(result, NothingToUpdate):
            return formatter.format_nothing_to_update(result)
        return formatter.format_issue_updated(result)
    except Exception as exc:
        logger.exception("Failed to update issue #%s", issue_number)
        return f"❌ Error updating issue: {exc}"


@mcp.tool()
async def add_issue_comment(owner: str, repo: str, issue_number: int, body: str) -> str:
    """
    Add a comment to a GitHub issue.

    Args:
        owner: Repository owner.
        repo: Repository name.
        issue_number: Issue number.
        body: Comment body (markdown).
    """
    try:
        comment = await ops.add_issue_comment(get_github_api(), owner, repo, issue_number, body)
        return formatter.format_comment_added(issue_number, comment)
    except Exception as exc:
        logger.exception("Failed to add comment to #%s", issue_number)
        return f"❌ Error adding comment: {exc}"


# ═══════════════════════════════════════════════════════════════════════════
#  PULL REQUEST TOOLS
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
async def create_pull_request(
    owner: str,
    repo: str,
    title: str,
    head: str,
    base: str,
    body: Optional[str] = None,
    draft: Optional[bool] = None,
) -> str:
    """
    Create a new pull request in a GitHub repository.

    Args:
        owner: Repository owner.
        repo: Repository name.
        title: Pull request title.
        head: Name of the branch where your changes are (e.g. 'feature-branch').
        base: Name of the branch you want to merge into (e.g. 'main').
        body: Pull request body (markdown).
        draft: Create as draft pull request (default false).
    """
    try:
        pr = await ops.create_pull_request(get_github_api(), owner, repo, title, head, base, body, draft)
        return formatter.format_pull_request_created(pr)
    except Exception as exc:
        logger.exception("Failed to create pull request")
        return f"❌ Error creating pull request: {exc}"


@mcp.tool()
async def get_pull_request(owner: str, repo: str, pr_number: int) -> str:
    """
    Get details of a GitHub pull request including comments.

    Args:
        owner: Repository owner.
        repo: Repository name.
        pr_number: Pull request number.
    """
    try:
        thread = await ops.get_pull_request(get_github_api(), owner, repo, pr_number)
        return formatter.format_pull_request_thread(thread)
    except Exception as exc:
        logger.exception("Failed to get pull request #%s", pr_number)
        return f"❌ Error getting pull request: {exc}"


@mcp.tool()
async def update_pull_request(
    owner: str,
    repo: str,
    pr_number: int,
    title: Optional[str] = None,
    body: Optional[str] = None,
    state: Optional[Literal["open", "closed"]] = None,
    base: Optional[str] = None,
) -> str:
    """
    Update an existing GitHub pull request (title, body, state, or base branch).

    Args:
        owner: Repository owner.
        repo: Repository name.
        pr_number: Pull request number.
        title: New title.
        body: New body (markdown).
        state: New state – 'open' or 'closed'.
        base: New base branch.
    """
    try:
        result = await ops.update_pull_request(
            get_github_api(), owner, repo, pr_number,
            PullRequestUpdate(title=title, body=body, state=state, base=base),
        )
        if isinstance(result, NothingToUpdate):
            return formatter.format_nothing_to_update(result)
        return formatter.format_pull_request_updated(result)
    except Exception as exc:
        logger.exception("Failed to update pull request #%s", pr_number)
        return f"❌ Error updating pull request: {exc}"


@mcp.tool()
async def get_pr_diff(owner: str, repo: str, pr_number: int) -> str:
    """
    Get the diff (patch) for a GitHub pull request.

    Args:
        owner: Repository owner.
        repo: Repository name.
        pr_number: Pull request number.
    """
    try:
        diff = await ops.get_pr_diff(get_github_api(), owner, repo, pr_number)
        return formatter.format_pr_diff(pr_number, diff)
    except Exception as exc:
        logger.exception("Failed to get diff for #%s", pr_number)
        return f"❌ Error getting diff: {exc}"


# ═══════════════════════════════════════════════════════════════════════════
#  COMMIT TOOLS
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
async def compare_commits(owner: str, repo: str, base: str, head: str) -> str:
    """
    Compare two refs (base...head): ahead/behind counts, commits and file patches.

    Args:
        owner: Repository owner.
        repo: Repository name.
        base: Base branch, tag or SHA.
        head: Head branch, tag or SHA.
    """
    try:
        result = await ops.compare_commits(get_github_api(), owner, repo, base, head)
        return formatter.format_compare(base, head, result)
    except Exception as exc:
        logger.exception("Failed to compare %s...%s", base, head)
        return f"❌ Error comparing commits: {exc}"


@mcp.tool()
async def get_code_changes_by_date(
    owner: str,
    repo: str,
    since: str,
    until: Optional[str] = None,
    author: Optional[str] = None,
) -> str:
    """
    Get code changes in a repository within a date range, optionally filtered by author.

    Args:
        owner: Repository owner (e.g. 'octocat').
        repo: Repository name (e.g. 'hello-world').
        since: Start date in ISO 8601 format (e.g. '2025-01-01' or '2025-01-01T00:00:00Z').
        until: End date in ISO 8601 format (defaults to now).
        author: GitHub username or email address of the commit author.
    """
    try:
        report = await ops.get_code_changes_by_date(get_github_api(), owner, repo, since, until, author)
        return formatter.format_code_changes(report)
    except Exception as exc:
        logger.exception("Failed to get code changes")
        return f"❌ Error getting code changes: {exc}"
