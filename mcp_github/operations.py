"""
Domain operations shared by the MCP tools and the REST bridge.

Each function maps typed arguments onto one or more `GitHubAPI` calls and
returns structured data; rendering to text happens in `formatter`.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .aggregation import ChangeSummary, aggregate_file_changes
from .batch import BatchExecutor, fetch_commit_details
from .github_client import GitHubAPI
from .models import (
    Commit,
    CompareResult,
    Issue,
    IssueComment,
    IssueUpdate,
    PullRequest,
    PullRequestUpdate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NothingToUpdate:
    """Returned instead of a resource when an update carries no fields."""

    kind: str
    number: int
    fields: str

    @property
    def message(self) -> str:
        return f"Nothing to update. Please specify at least one field ({self.fields})."


@dataclass
class IssueThread:
    issue: Issue
    comments: List[IssueComment] = field(default_factory=list)


@dataclass
class PullRequestThread:
    pull_request: PullRequest
    comments: List[IssueComment] = field(default_factory=list)


@dataclass
class CodeChangesReport:
    owner: str
    repo: str
    since: str
    until: Optional[str] = None
    author: Optional[str] = None
    commits: List[Commit] = field(default_factory=list)
    summary: Optional[ChangeSummary] = None
    failed_commits: List[str] = field(default_factory=list)
    truncated: bool = False

    @property
    def has_commits(self) -> bool:
        return bool(self.commits)


# ── Issues ────────────────────────────────────────────────────────────────


async def create_issue(api: GitHubAPI, owner: str, repo: str, title: str, body: Optional[str] = None) -> Issue:
    return await api.create_issue(owner, repo, title, body)


async def get_issue(api: GitHubAPI, owner: str, repo: str, issue_number: int) -> IssueThread:
    issue = await api.get_issue(owner, repo, issue_number)
    comments = await api.get_issue_comments(owner, repo, issue_number)
    return IssueThread(issue=issue, comments=comments)


async def update_issue(
    api: GitHubAPI, owner: str, repo: str, issue_number: int, update: IssueUpdate
) -> Union[Issue, NothingToUpdate]:
    changes = update.changes()
    if not changes:
        return NothingToUpdate("issue", issue_number, "title, body, or state")
    return await api.update_issue(owner, repo, issue_number, changes)


async def add_issue_comment(api: GitHubAPI, owner: str, repo: str, issue_number: int, body: str) -> IssueComment:
    return await api.add_issue_comment(owner, repo, issue_number, body)


# ── Pull requests ─────────────────────────────────────────────────────────


async def create_pull_request(
    api: GitHubAPI,
    owner: str,
    repo: str,
    title: str,
    head: str,
    base: str,
    body: Optional[str] = None,
    draft: Optional[bool] = None,
) -> PullRequest:
    return await api.create_pull_request(owner, repo, title, head, base, body, draft)


async def get_pull_request(api: GitHubAPI, owner: str, repo: str, pr_number: int) -> PullRequestThread:
    pr = await api.get_pull_request(owner, repo, pr_number)
    comments = await api.get_pull_request_comments(owner, repo, pr_number)
    return PullRequestThread(pull_request=pr, comments=comments)


async def update_pull_request(
    api: GitHubAPI, owner: str, repo: str, pr_number: int, update: PullRequestUpdate
) -> Union[PullRequest, NothingToUpdate]:
    changes = update.changes()
    if not changes:
        return NothingToUpdate("pull request", pr_number, "title, body, state, or base")
    return await api.update_pull_request(owner, repo, pr_number, changes)


async def get_pr_diff(api: GitHubAPI, owner: str, repo: str, pr_number: int) -> str:
    return await api.get_pull_request_diff(owner, repo, pr_number)


# ── Commits ───────────────────────────────────────────────────────────────


async def compare_commits(api: GitHubAPI, owner: str, repo: str, base: str, head: str) -> CompareResult:
    return await api.compare_commits(owner, repo, base, head)


async def get_code_changes_by_date(
    api: GitHubAPI,
    owner: str,
    repo: str,
    since: str,
    until: Optional[str] = None,
    author: Optional[str] = None,
    executor: Optional[BatchExecutor] = None,
) -> CodeChangesReport:
    """
    Commits in a date window plus aggregated per-file statistics.

    Phases: list commits (all pages) -> fetch every commit's detail in
    paced batches -> fold the details into a ChangeSummary. No detail is
    fetched when the window holds no commits.
    """
    logger.info(
        f"Fetching commits for {owner}/{repo} from {since}"
        f"{f' to {until}' if until else ''}{f' by {author}' if author else ''}"
    )
    report = CodeChangesReport(owner=owner, repo=repo, since=since, until=until, author=author)

    listing = await api.get_commits_by_date_range(owner, repo, since, until, author)
    report.commits = listing.items
    report.truncated = listing.truncated
    if not report.commits:
        logger.info("No commits in range; skipping aggregation")
        return report

    logger.info(f"Retrieved {len(report.commits)} commits. Fetching file changes for each commit...")
    outcome = await fetch_commit_details(api, owner, repo, report.commits, executor=executor)
    report.failed_commits = [failure.ref for failure in outcome.failures]
    logger.info(
        f"Retrieved file changes for {len(outcome.results) - len(outcome.failures)}"
        f"/{len(outcome.results)} commits in {outcome.batches} batches"
    )

    report.summary = aggregate_file_changes(outcome.results)
    return report
