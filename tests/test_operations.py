"""Tests for the domain operations facade."""
import pytest

from mcp_github import operations as ops
from mcp_github.batch import BatchExecutor
from mcp_github.models import IssueUpdate, PullRequestUpdate
from mcp_github.operations import NothingToUpdate

from .conftest import API_BASE, commit_detail_json, commit_json, file_json, make_api


async def _no_sleep(_seconds):
    return None


@pytest.mark.asyncio
class TestUpdates:
    async def test_update_issue_without_fields_makes_no_request(self, fake, api):
        result = await ops.update_issue(api, "o", "r", 1, IssueUpdate())
        assert isinstance(result, NothingToUpdate)
        assert "Nothing to update" in result.message
        assert fake.requests == []

    async def test_update_pull_request_without_fields_makes_no_request(self, fake, api):
        result = await ops.update_pull_request(api, "o", "r", 2, PullRequestUpdate())
        assert isinstance(result, NothingToUpdate)
        assert "base" in result.message
        assert fake.requests == []

    async def test_update_pull_request_with_base_only(self, fake, api):
        fake.add("PATCH", "/repos/o/r/pulls/2", json={"number": 2, "base": {"ref": "develop"}})
        pr = await ops.update_pull_request(api, "o", "r", 2, PullRequestUpdate(base="develop"))
        assert pr.base.ref == "develop"
        assert fake.requests[0].content == b'{"base": "develop"}'


@pytest.mark.asyncio
class TestThreads:
    async def test_get_issue_includes_comments(self, fake, api):
        fake.add("GET", "/repos/o/r/issues/3", json={"number": 3, "title": "Crash"})
        fake.add("GET", "/repos/o/r/issues/3/comments", json=[{"id": 10, "body": "same here"}])
        thread = await ops.get_issue(api, "o", "r", 3)
        assert thread.issue.title == "Crash"
        assert [c.body for c in thread.comments] == ["same here"]

    async def test_get_pull_request_includes_comments(self, fake, api):
        fake.add("GET", "/repos/o/r/pulls/4", json={"number": 4, "head": {"ref": "f"}, "base": {"ref": "main"}})
        fake.add("GET", "/repos/o/r/issues/4/comments", json=[])
        thread = await ops.get_pull_request(api, "o", "r", 4)
        assert thread.pull_request.head.ref == "f"
        assert thread.comments == []


@pytest.mark.asyncio
class TestCodeChangesByDate:
    async def test_no_commits_skips_aggregation(self, fake, api):
        fake.add("GET", "/repos/o/r/commits", json=[])
        report = await ops.get_code_changes_by_date(api, "o", "r", "2025-01-01")
        assert report.has_commits is False
        assert report.summary is None
        assert len(fake.requests) == 1

    async def test_full_report(self, fake, api):
        fake.add("GET", "/repos/o/r/commits", json=[commit_json("c2"), commit_json("c1"), commit_json("c0")])
        fake.add("GET", "/repos/o/r/commits/c2", json=commit_detail_json("c2", [
            file_json("a.txt", 3, 1, status="modified"),
        ]))
        fake.add("GET", "/repos/o/r/commits/c1", json=commit_detail_json("c1", [
            file_json("a.txt", 5, 0, status="added"),
            file_json("b.txt", 1, 1),
        ]))
        fake.add("GET", "/repos/o/r/commits/c0", status=404, json={"message": "Not Found"})

        executor = BatchExecutor(batch_size=2, sleep=_no_sleep)
        report = await ops.get_code_changes_by_date(
            api, "o", "r", "2025-01-01", until="2025-02-01", author="dev", executor=executor
        )

        assert [c.sha for c in report.commits] == ["c2", "c1", "c0"]
        assert report.failed_commits == ["c0"]
        stat = report.summary.files["a.txt"]
        assert (stat.additions, stat.deletions, stat.changes) == (8, 1, 9)
        assert stat.statuses == {"modified", "added"}
        assert report.summary.total_changes == 11
        assert report.summary.degraded_commits == 1

    async def test_listing_failure_propagates(self, fake, api):
        fake.add("GET", "/repos/o/r/commits", status=403, json={"message": "Forbidden"})
        with pytest.raises(Exception, match="403"):
            await ops.get_code_changes_by_date(api, "o", "r", "2025-01-01")

    async def test_truncated_listing_is_reported(self, fake):
        api = make_api(fake, max_pages=1)
        fake.add(
            "GET", "/repos/o/r/commits",
            json=[commit_json("c1")],
            headers={"link": f'<{API_BASE}/repos/o/r/commits?page=2>; rel="next"'},
        )
        fake.add("GET", "/repos/o/r/commits/c1", json=commit_detail_json("c1", []))
        report = await ops.get_code_changes_by_date(
            api, "o", "r", "2025-01-01", executor=BatchExecutor(sleep=_no_sleep)
        )
        assert report.truncated is True
        assert len(report.commits) == 1
