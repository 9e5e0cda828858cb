"""Tests for the pure per-file aggregation over commit details."""
from functools import reduce

from mcp_github.aggregation import ChangeSummary, aggregate_file_changes, fold_commit_detail
from mcp_github.models import Commit, CommitDetail

from .conftest import commit_detail_json, commit_json, file_json


def _detail(sha, *files):
    return CommitDetail.model_validate(commit_detail_json(sha, list(files)))


def _degraded(sha):
    return CommitDetail.degraded_from(Commit.model_validate(commit_json(sha)))


class TestFold:
    def test_same_file_across_two_commits(self):
        summary = aggregate_file_changes([
            _detail("c1", file_json("a.txt", additions=3, deletions=1, status="modified")),
            _detail("c2", file_json("a.txt", additions=5, deletions=0, status="added")),
        ])
        stat = summary.files["a.txt"]
        assert (stat.additions, stat.deletions, stat.changes) == (8, 1, 9)
        assert stat.statuses == {"modified", "added"}

    def test_statuses_are_deduplicated(self):
        summary = aggregate_file_changes([
            _detail("c1", file_json("a.txt", 1, status="modified")),
            _detail("c2", file_json("a.txt", 1, status="modified")),
        ])
        assert summary.files["a.txt"].statuses == frozenset({"modified"})

    def test_totals_equal_sum_over_non_degraded_files(self):
        details = [
            _detail("c1", file_json("a", 1, 2), file_json("b", 10, 0)),
            _degraded("c2"),
            _detail("c3", file_json("a", 4, 4), file_json("c", 0, 7, status="removed")),
        ]
        summary = aggregate_file_changes(details)
        files = [f for d in details if not d.degraded for f in d.files]
        assert summary.total_additions == sum(f.additions for f in files) == 15
        assert summary.total_deletions == sum(f.deletions for f in files) == 13
        assert summary.total_changes == sum(f.changes for f in files) == 28
        assert summary.commits_folded == 3
        assert summary.degraded_commits == 1

    def test_degraded_detail_contributes_nothing(self):
        base = aggregate_file_changes([_detail("c1", file_json("a", 2, 1))])
        after = fold_commit_detail(base, _degraded("c2"))
        assert after.files == base.files
        assert after.total_changes == base.total_changes

    def test_fold_does_not_mutate_accumulator(self):
        acc = ChangeSummary()
        out = fold_commit_detail(acc, _detail("c1", file_json("a", 1, 1)))
        assert acc.files == {}
        assert acc.total_changes == 0
        assert out.total_changes == 2

    def test_reduce_equals_aggregate(self):
        details = [_detail("c1", file_json("a", 1)), _detail("c2", file_json("b", 2))]
        assert reduce(fold_commit_detail, details, ChangeSummary()) == aggregate_file_changes(details)

    def test_empty_input(self):
        summary = aggregate_file_changes([])
        assert summary.files == {}
        assert summary.total_changes == 0


class TestRanking:
    def test_sorted_by_changes_descending(self):
        summary = aggregate_file_changes([
            _detail("c1", file_json("small", 1), file_json("big", 50), file_json("mid", 10)),
        ])
        assert [s.filename for s in summary.ranked_files()] == ["big", "mid", "small"]

    def test_ties_keep_first_appearance_order(self):
        summary = aggregate_file_changes([
            _detail("c1", file_json("z.txt", 2), file_json("a.txt", 2)),
            _detail("c2", file_json("m.txt", 2)),
        ])
        assert [s.filename for s in summary.ranked_files()] == ["z.txt", "a.txt", "m.txt"]
