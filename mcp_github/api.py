"""
REST bridge – the same operations over plain HTTP, plus MCP over SSE.

MCP Protocol endpoints (for any MCP client):
    GET  /mcp/sse        - SSE connection endpoint
    POST /mcp/messages   - MCP message handler

REST API endpoints (all under /api/repos/{owner}/{repo}):
    POST  /issues
    GET   /issues/{issue_number}
    PATCH /issues/{issue_number}
    POST  /issues/{issue_number}/comments
    POST  /pulls
    GET   /pulls/{pr_number}
    PATCH /pulls/{pr_number}
    GET   /pulls/{pr_number}/diff
    GET   /compare?base=&head=
    GET   /code-changes?since=&until=&author=
"""
import logging
from dataclasses import asdict
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse
from mcp.server.sse import SseServerTransport
from starlette.requests import Request
from starlette.routing import Route

from . import operations as ops
from .aggregation import ChangeSummary
from .errors import AuthError
from .github_client import get_github_api
from .models import CommentCreate, IssueCreate, IssueUpdate, PullRequestCreate, PullRequestUpdate
from .operations import NothingToUpdate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# MCP SSE Transport
# ---------------------------------------------------------------------------
_sse_transport = SseServerTransport("/mcp/messages/")


async def _handle_mcp_sse(request: Request):
    """Accept an MCP client connection over SSE."""
    from .server import mcp as mcp_instance

    async with _sse_transport.connect_sse(
        request.scope, request.receive, request._send
    ) as (read_stream, write_stream):
        await mcp_instance._mcp_server.run(
            read_stream,
            write_stream,
            mcp_instance._mcp_server.create_initialization_options(),
        )


# ---------------------------------------------------------------------------
# FastAPI App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="MCP GitHub",
    description="GitHub issues, pull requests and code change reports over REST and MCP (SSE)",
    version="1.0.0",
)

app.router.routes.insert(0, Route("/mcp/sse", endpoint=_handle_mcp_sse))
app.mount("/mcp/messages/", app=_sse_transport.handle_post_message)


def _http_error(exc: Exception, action: str) -> HTTPException:
    if isinstance(exc, AuthError):
        return HTTPException(status_code=401, detail=str(exc))
    logger.exception("Error %s", action)
    return HTTPException(status_code=502, detail=str(exc))


def _updated_or_400(result: Any) -> Any:
    if isinstance(result, NothingToUpdate):
        raise HTTPException(status_code=400, detail=result.message)
    return result.model_dump()


def _summary_dict(summary: Optional[ChangeSummary]) -> Optional[dict]:
    if summary is None:
        return None
    return {
        "total_additions": summary.total_additions,
        "total_deletions": summary.total_deletions,
        "total_changes": summary.total_changes,
        "files": [
            {**asdict(stat), "statuses": sorted(stat.statuses)}
            for stat in summary.ranked_files()
        ],
    }


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": "mcp-github",
        "mcp_sse_endpoint": "/mcp/sse",
        "auth": get_github_api().get_auth_status(),
    }


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------
@app.post("/api/repos/{owner}/{repo}/issues", status_code=201)
async def api_create_issue(owner: str, repo: str, payload: IssueCreate):
    try:
        issue = await ops.create_issue(get_github_api(), owner, repo, payload.title, payload.body)
        return issue.model_dump()
    except Exception as exc:
        raise _http_error(exc, "creating issue")


@app.get("/api/repos/{owner}/{repo}/issues/{issue_number}")
async def api_get_issue(owner: str, repo: str, issue_number: int):
    try:
        thread = await ops.get_issue(get_github_api(), owner, repo, issue_number)
        return {
            "issue": thread.issue.model_dump(),
            "comments": [c.model_dump() for c in thread.comments],
        }
    except Exception as exc:
        raise _http_error(exc, f"getting issue #{issue_number}")


@app.patch("/api/repos/{owner}/{repo}/issues/{issue_number}")
async def api_update_issue(owner: str, repo: str, issue_number: int, payload: IssueUpdate):
    try:
        result = await ops.update_issue(get_github_api(), owner, repo, issue_number, payload)
    except Exception as exc:
        raise _http_error(exc, f"updating issue #{issue_number}")
    return _updated_or_400(result)


@app.post("/api/repos/{owner}/{repo}/issues/{issue_number}/comments", status_code=201)
async def api_add_issue_comment(owner: str, repo: str, issue_number: int, payload: CommentCreate):
    try:
        comment = await ops.add_issue_comment(get_github_api(), owner, repo, issue_number, payload.body)
        return comment.model_dump()
    except Exception as exc:
        raise _http_error(exc, f"commenting on #{issue_number}")


# ---------------------------------------------------------------------------
# Pull requests
# ---------------------------------------------------------------------------
@app.post("/api/repos/{owner}/{repo}/pulls", status_code=201)
async def api_create_pull_request(owner: str, repo: str, payload: PullRequestCreate):
    try:
        pr = await ops.create_pull_request(
            get_github_api(), owner, repo,
            payload.title, payload.head, payload.base, payload.body, payload.draft,
        )
        return pr.model_dump()
    except Exception as exc:
        raise _http_error(exc, "creating pull request")


@app.get("/api/repos/{owner}/{repo}/pulls/{pr_number}")
async def api_get_pull_request(owner: str, repo: str, pr_number: int):
    try:
        thread = await ops.get_pull_request(get_github_api(), owner, repo, pr_number)
        return {
            "pull_request": thread.pull_request.model_dump(),
            "comments": [c.model_dump() for c in thread.comments],
        }
    except Exception as exc:
        raise _http_error(exc, f"getting pull request #{pr_number}")


@app.patch("/api/repos/{owner}/{repo}/pulls/{pr_number}")
async def api_update_pull_request(owner: str, repo: str, pr_number: int, payload: PullRequestUpdate):
    try:
        result = await ops.update_pull_request(get_github_api(), owner, repo, pr_number, payload)
    except Exception as exc:
        raise _http_error(exc, f"updating pull request #{pr_number}")
    return _updated_or_400(result)


@app.get("/api/repos/{owner}/{repo}/pulls/{pr_number}/diff", response_class=PlainTextResponse)
async def api_get_pr_diff(owner: str, repo: str, pr_number: int):
    try:
        return await ops.get_pr_diff(get_github_api(), owner, repo, pr_number)
    except Exception as exc:
        raise _http_error(exc, f"getting diff for #{pr_number}")


# ---------------------------------------------------------------------------
# Commits
# ---------------------------------------------------------------------------
@app.get("/api/repos/{owner}/{repo}/compare")
async def api_compare_commits(owner: str, repo: str, base: str = Query(...), head: str = Query(...)):
    try:
        result = await ops.compare_commits(get_github_api(), owner, repo, base, head)
        return result.model_dump()
    except Exception as exc:
        raise _http_error(exc, f"comparing {base}...{head}")


@app.get("/api/repos/{owner}/{repo}/code-changes")
async def api_code_changes(
    owner: str,
    repo: str,
    since: str = Query(..., description="ISO 8601 start date"),
    until: Optional[str] = Query(None, description="ISO 8601 end date"),
    author: Optional[str] = Query(None, description="GitHub username or email"),
):
    try:
        report = await ops.get_code_changes_by_date(get_github_api(), owner, repo, since, until, author)
    except Exception as exc:
        raise _http_error(exc, "getting code changes")
    return {
        "owner": report.owner,
        "repo": report.repo,
        "since": report.since,
        "until": report.until,
        "author": report.author,
        "total_commits": len(report.commits),
        "truncated": report.truncated,
        "failed_commits": report.failed_commits,
        "summary": _summary_dict(report.summary),
        "recent_commits": [c.model_dump() for c in report.commits[:10]],
    }
