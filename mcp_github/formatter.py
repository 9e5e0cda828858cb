"""
Text rendering of operation results for MCP tool output.
"""
from typing import List

from .models import CompareResult, Issue, IssueComment, PullRequest
from .operations import CodeChangesReport, IssueThread, NothingToUpdate, PullRequestThread

FILE_DISPLAY_LIMIT = 50
RECENT_COMMITS_LIMIT = 10


def _labels(labels) -> str:
    return ", ".join(label.name for label in labels) or "(none)"


def _comments_block(comments: List[IssueComment]) -> str:
    if not comments:
        return ""
    text = f"\n\n---\n💬 Comments ({len(comments)}):\n\n"
    for index, comment in enumerate(comments, start=1):
        text += f"[{index}] {comment.user.login} at {comment.created_at}\n"
        text += f"{comment.body}\n\n"
    return text


def _period(since: str, until) -> str:
    return f"{since} to {until}" if until else f"{since} to now"


# ── Issues ────────────────────────────────────────────────────────────────


def format_issue_created(issue: Issue) -> str:
    return f"✅ Issue created!\n\n#{issue.number}: {issue.title}\nURL: {issue.html_url}"


def format_issue_thread(thread: IssueThread) -> str:
    issue = thread.issue
    text = (
        f"📋 Issue #{issue.number}: {issue.title}\n\n"
        f"State: {issue.state}\n"
        f"Author: {issue.user.login}\n"
        f"Created: {issue.created_at}\n"
        f"Updated: {issue.updated_at}\n"
        f"Labels: {_labels(issue.labels)}\n\n"
        f"{issue.body or ''}\n\n"
        f"URL: {issue.html_url}"
    )
    return text + _comments_block(thread.comments)


def format_issue_updated(issue: Issue) -> str:
    return (
        f"✅ Issue #{issue.number} updated!\n\n"
        f"Title: {issue.title}\n"
        f"State: {issue.state}\n"
        f"URL: {issue.html_url}"
    )


def format_comment_added(issue_number: int, comment: IssueComment) -> str:
    return f"✅ Comment added to issue #{issue_number}\nURL: {comment.html_url}"


def format_nothing_to_update(result: NothingToUpdate) -> str:
    return f"⚠️ {result.message}"


# ── Pull requests ─────────────────────────────────────────────────────────


def format_pull_request_created(pr: PullRequest) -> str:
    return (
        f"✅ Pull Request created!\n\n"
        f"#{pr.number}: {pr.title}\n"
        f"{pr.head.ref} → {pr.base.ref}\n"
        f"URL: {pr.html_url}"
    )


def format_pull_request_thread(thread: PullRequestThread) -> str:
    pr = thread.pull_request
    flags = (" (merged)" if pr.merged else "") + (" (draft)" if pr.draft else "")
    mergeable = "unknown" if pr.mergeable is None else str(pr.mergeable).lower()
    text = (
        f"🔀 Pull Request #{pr.number}: {pr.title}\n\n"
        f"State: {pr.state}{flags}\n"
        f"Author: {pr.user.login}\n"
        f"Created: {pr.created_at}\n"
        f"Updated: {pr.updated_at}\n"
        f"Labels: {_labels(pr.labels)}\n"
        f"Branch: {pr.head.ref} → {pr.base.ref}\n"
        f"Mergeable: {mergeable}\n\n"
        f"{pr.body or ''}\n\n"
        f"URL: {pr.html_url}"
    )
    return text + _comments_block(thread.comments)


def format_pull_request_updated(pr: PullRequest) -> str:
    return (
        f"✅ Pull Request #{pr.number} updated!\n\n"
        f"Title: {pr.title}\n"
        f"State: {pr.state}\n"
        f"Branch: {pr.head.ref} → {pr.base.ref}\n"
        f"URL: {pr.html_url}"
    )


def format_pr_diff(pr_number: int, diff: str) -> str:
    return f"📄 Diff for Pull Request #{pr_number}\n\n```diff\n{diff}\n```"


# ── Commits ───────────────────────────────────────────────────────────────


def format_compare(base: str, head: str, result: CompareResult) -> str:
    text = (
        f"🔍 Compare {base}...{head}\n\n"
        f"Status: {result.status}\n"
        f"Ahead by: {result.ahead_by} | Behind by: {result.behind_by}\n"
        f"Commits: {result.total_commits or len(result.commits)}\n"
        f"Files Changed: {len(result.files)}\n"
    )
    if result.commits:
        text += "\n---\n📜 Commits:\n\n"
        for commit in result.commits:
            text += f"- {commit.short_sha} {commit.headline} ({commit.commit.author.name})\n"
    if result.files:
        text += "\n---\n📁 Files:\n\n"
        for file in result.files:
            text += f"- {file.filename} [{file.status}] +{file.additions} -{file.deletions}\n"
            if file.patch:
                text += f"```diff\n{file.patch}\n```\n"
    if result.html_url:
        text += f"\nURL: {result.html_url}"
    return text


def format_code_changes(report: CodeChangesReport) -> str:
    scope = f"{report.owner}/{report.repo} from {report.since}"
    scope += f" to {report.until}" if report.until else ""
    scope += f" by {report.author}" if report.author else ""
    if not report.has_commits:
        return f"ℹ️ No commits found in {scope}"

    summary = report.summary
    text = f"📊 Code Changes in {report.owner}/{report.repo}\n\n"
    text += f"Period: {_period(report.since, report.until)}\n"
    if report.author:
        text += f"Author: {report.author}\n"
    text += f"Commits: {len(report.commits)}\n"
    if summary is not None:
        text += f"Files Changed: {len(summary.files)}\n"
        text += f"Total Changes: {summary.total_changes} lines\n"
        text += f"  Additions: +{summary.total_additions} lines\n"
        text += f"  Deletions: -{summary.total_deletions} lines\n"
    if report.truncated:
        text += "⚠️ Commit list truncated by the page limit; totals cover fetched commits only.\n"
    if report.failed_commits:
        text += (
            f"⚠️ File changes unavailable for {len(report.failed_commits)} commit(s): "
            f"{', '.join(sha[:7] for sha in report.failed_commits)}\n"
        )
    text += "\n"

    ranked = summary.ranked_files() if summary is not None else []
    if ranked:
        text += "---\n📁 Changed Files (sorted by change volume):\n\n"
        for index, stat in enumerate(ranked[:FILE_DISPLAY_LIMIT], start=1):
            text += f"{index}. {stat.filename}\n"
            text += (
                f"   Status: {', '.join(sorted(stat.statuses))} | "
                f"Changes: {stat.changes} (+{stat.additions} -{stat.deletions})\n"
            )
        if len(ranked) > FILE_DISPLAY_LIMIT:
            text += f"\n... and {len(ranked) - FILE_DISPLAY_LIMIT} more files\n"

    text += f"\n---\n📜 Recent Commits (latest {RECENT_COMMITS_LIMIT}):\n\n"
    for index, commit in enumerate(report.commits[:RECENT_COMMITS_LIMIT], start=1):
        text += f"{index}. {commit.short_sha} - {commit.headline}\n"
        text += f"   Author: {commit.commit.author.name} | Date: {commit.commit.author.date}\n"
    if len(report.commits) > RECENT_COMMITS_LIMIT:
        text += f"\n... and {len(report.commits) - RECENT_COMMITS_LIMIT} more commits\n"

    return text
