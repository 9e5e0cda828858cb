"""
Per-file change statistics across a range of commits.

`fold_commit_detail` is a pure reducer: it never mutates the accumulator it
receives, so a summary can be built with `functools.reduce` and tested
without any network I/O.
"""
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Dict, FrozenSet, Iterable, List

from .models import CommitDetail, CommitFile


@dataclass(frozen=True)
class FileChangeStat:
    filename: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    statuses: FrozenSet[str] = frozenset()

    def add(self, file: CommitFile) -> "FileChangeStat":
        return replace(
            self,
            additions=self.additions + file.additions,
            deletions=self.deletions + file.deletions,
            changes=self.changes + file.changes,
            statuses=self.statuses | {file.status},
        )


@dataclass(frozen=True)
class ChangeSummary:
    # insertion order is first appearance of each filename
    files: Dict[str, FileChangeStat] = field(default_factory=dict)
    total_additions: int = 0
    total_deletions: int = 0
    total_changes: int = 0
    commits_folded: int = 0
    degraded_commits: int = 0

    def ranked_files(self) -> List[FileChangeStat]:
        """Files by descending accumulated changes; ties keep first-seen order."""
        return sorted(self.files.values(), key=lambda stat: stat.changes, reverse=True)


def fold_commit_detail(acc: ChangeSummary, detail: CommitDetail) -> ChangeSummary:
    if detail.degraded:
        return replace(
            acc,
            commits_folded=acc.commits_folded + 1,
            degraded_commits=acc.degraded_commits + 1,
        )

    files = dict(acc.files)
    additions = deletions = changes = 0
    for file in detail.files:
        files[file.filename] = files.get(file.filename, FileChangeStat(file.filename)).add(file)
        additions += file.additions
        deletions += file.deletions
        changes += file.changes

    return ChangeSummary(
        files=files,
        total_additions=acc.total_additions + additions,
        total_deletions=acc.total_deletions + deletions,
        total_changes=acc.total_changes + changes,
        commits_folded=acc.commits_folded + 1,
        degraded_commits=acc.degraded_commits,
    )


def aggregate_file_changes(details: Iterable[CommitDetail]) -> ChangeSummary:
    return reduce(fold_commit_detail, details, ChangeSummary())
