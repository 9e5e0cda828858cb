"""Shared fixtures: a scripted fake of the GitHub REST API behind httpx.MockTransport."""
from collections import defaultdict, deque

import httpx
import pytest

from mcp_github.auth import EnvCredentialProvider
from mcp_github.config import Settings
from mcp_github.github_client import GitHubAPI, set_github_api

API_BASE = "https://api.github.com"


class FakeGitHub:
    """Answers requests by (method, path).

    Responses queued for the same route are served in order; the last one
    keeps being served once the queue is down to a single entry.
    """

    def __init__(self):
        self.routes = defaultdict(deque)
        self.requests = []

    def add(self, method, path, status=200, json=None, text=None, headers=None):
        self.routes[(method, path)].append((status, json, text, headers or {}))
        return self

    def add_error(self, method, path, exc):
        self.routes[(method, path)].append(exc)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not Found"})
        entry = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        status, json_body, text, headers = entry
        if text is not None:
            return httpx.Response(status, text=text, headers=headers)
        return httpx.Response(status, json=json_body, headers=headers)

    def calls(self, method=None, path=None):
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]


def make_api(fake, **config_overrides):
    config = Settings(**{"batch_delay_ms": 0, "max_pages": None, **config_overrides})
    api = GitHubAPI(
        provider=EnvCredentialProvider("test-token"),
        config=config,
        transport=httpx.MockTransport(fake),
    )
    api.initialize()
    return api


def commit_json(sha, message="change", name="Dev", date="2025-01-02T03:04:05Z"):
    return {
        "sha": sha,
        "commit": {"message": message, "author": {"name": name, "email": "dev@example.com", "date": date}},
        "html_url": f"https://github.com/o/r/commit/{sha}",
    }


def commit_detail_json(sha, files, **kwargs):
    data = commit_json(sha, **kwargs)
    data["files"] = files
    return data


def file_json(filename, additions=0, deletions=0, status="modified", changes=None):
    return {
        "filename": filename,
        "status": status,
        "additions": additions,
        "deletions": deletions,
        "changes": additions + deletions if changes is None else changes,
    }


@pytest.fixture
def fake():
    return FakeGitHub()


@pytest.fixture
def api(fake):
    return make_api(fake)


@pytest.fixture
def shared_api(api):
    """Install `api` as the process-wide client used by tools and REST routes."""
    set_github_api(api)
    yield api
    set_github_api(None)
