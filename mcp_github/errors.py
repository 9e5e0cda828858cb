"""Error taxonomy for GitHub API access."""
from typing import Optional


class GitHubError(Exception):
    """Base class for every failure raised by this package."""


class AuthError(GitHubError):
    """No usable credential is held (at startup or at dispatch time)."""


class ApiError(GitHubError):
    """The GitHub API answered with a non-2xx status."""

    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ShapeError(GitHubError):
    """A paginated endpoint returned something other than a JSON array."""


class PartialFetchError(GitHubError):
    """A single item of a batched fetch failed.

    Never raised to callers: the batch executor records it and substitutes
    a degraded result for the item.
    """

    def __init__(self, ref: str, cause: Optional[BaseException] = None):
        self.ref = ref
        self.cause = cause
        super().__init__(f"Failed to fetch {ref}: {cause}")
