"""
Typed shapes for GitHub resources and request payloads.

Only the fields this server reads are declared; everything else GitHub sends
is kept as extra data so nothing is lost when a model is dumped back out.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class GitHubModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class User(GitHubModel):
    login: str = ""


class Label(GitHubModel):
    name: str = ""


class Issue(GitHubModel):
    number: int
    title: str = ""
    html_url: str = ""
    state: str = ""
    user: User = Field(default_factory=User)
    created_at: str = ""
    updated_at: str = ""
    body: Optional[str] = None
    labels: List[Label] = Field(default_factory=list)


class IssueComment(GitHubModel):
    id: int
    body: str = ""
    user: User = Field(default_factory=User)
    created_at: str = ""
    html_url: str = ""


class BranchRef(GitHubModel):
    ref: str = ""
    sha: str = ""


class PullRequest(GitHubModel):
    number: int
    title: str = ""
    html_url: str = ""
    state: str = ""
    user: User = Field(default_factory=User)
    created_at: str = ""
    updated_at: str = ""
    body: Optional[str] = None
    labels: List[Label] = Field(default_factory=list)
    head: BranchRef = Field(default_factory=BranchRef)
    base: BranchRef = Field(default_factory=BranchRef)
    merged: bool = False
    mergeable: Optional[bool] = None
    draft: Optional[bool] = None


# ── Commits ───────────────────────────────────────────────────────────────


class GitActor(GitHubModel):
    name: str = ""
    email: str = ""
    date: str = ""


class CommitData(GitHubModel):
    message: str = ""
    author: GitActor = Field(default_factory=GitActor)
    committer: GitActor = Field(default_factory=GitActor)


class Commit(GitHubModel):
    sha: str
    commit: CommitData = Field(default_factory=CommitData)
    html_url: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def headline(self) -> str:
        return self.commit.message.split("\n", 1)[0]


class CommitFile(GitHubModel):
    filename: str
    status: str = ""
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: Optional[str] = None


class CommitStats(GitHubModel):
    additions: int = 0
    deletions: int = 0
    total: int = 0


class CommitDetail(Commit):
    files: List[CommitFile] = Field(default_factory=list)
    stats: Optional[CommitStats] = None
    degraded: bool = False

    @classmethod
    def degraded_from(cls, commit: Commit) -> "CommitDetail":
        """Stand-in for a commit whose detail fetch failed: no files."""
        data = commit.model_dump()
        data.update(files=[], degraded=True)
        return cls.model_validate(data)


class CompareResult(GitHubModel):
    status: str = ""
    ahead_by: int = 0
    behind_by: int = 0
    total_commits: int = 0
    html_url: str = ""
    commits: List[Commit] = Field(default_factory=list)
    files: List[CommitFile] = Field(default_factory=list)


# ── Request payloads ──────────────────────────────────────────────────────


class IssueCreate(BaseModel):
    title: str
    body: Optional[str] = None


class IssueUpdate(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    state: Optional[Literal["open", "closed"]] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CommentCreate(BaseModel):
    body: str


class PullRequestCreate(BaseModel):
    title: str
    head: str
    base: str
    body: Optional[str] = None
    draft: Optional[bool] = None


class PullRequestUpdate(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    state: Optional[Literal["open", "closed"]] = None
    base: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
