"""
Batched fan-out with pacing between batches.

Items are sliced into fixed-size batches in input order. Every fetch in a
batch runs concurrently and the next batch starts only once all of them have
settled. A failing item is replaced by its fallback value, so one bad item
never aborts the run.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .config import Settings, settings
from .errors import PartialFetchError
from .github_client import GitHubAPI
from .logger import log_batch_progress
from .models import Commit, CommitDetail

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")

# batch index just completed (0-based) -> seconds to wait before the next one
DelayPolicy = Callable[[int], float]


def fixed_delay(seconds: float) -> DelayPolicy:
    return lambda _batch_index: seconds


def exponential_backoff(base: float, factor: float = 2.0, maximum: float = 10.0) -> DelayPolicy:
    return lambda batch_index: min(maximum, base * factor ** batch_index)


def delay_policy_from_settings(config: Optional[Settings] = None) -> DelayPolicy:
    config = config or settings
    base = config.batch_delay_ms / 1000.0
    if config.batch_backoff == "exponential":
        return exponential_backoff(base)
    return fixed_delay(base)


@dataclass
class BatchOutcome(Generic[ResultT]):
    """One result per input item, in input order, plus the recorded failures."""

    results: List[ResultT] = field(default_factory=list)
    failures: List[PartialFetchError] = field(default_factory=list)
    batches: int = 0


class BatchExecutor:
    """Run an async fetch over items, `batch_size` at a time."""

    def __init__(
        self,
        batch_size: int = 10,
        delay: Optional[DelayPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.batch_size = batch_size
        self.delay = delay or fixed_delay(0.1)
        self.sleep = sleep

    async def run(
        self,
        items: Sequence[ItemT],
        fetch: Callable[[ItemT], Awaitable[ResultT]],
        fallback: Callable[[ItemT], ResultT],
        describe: Callable[[ItemT], str] = str,
    ) -> BatchOutcome[ResultT]:
        outcome: BatchOutcome[ResultT] = BatchOutcome()
        total_batches = (len(items) + self.batch_size - 1) // self.batch_size

        async def _guarded(item: ItemT) -> Tuple[ResultT, Optional[PartialFetchError]]:
            try:
                return await fetch(item), None
            except Exception as exc:
                failure = PartialFetchError(describe(item), exc)
                logger.warning(str(failure))
                return fallback(item), failure

        for batch_index, start in enumerate(range(0, len(items), self.batch_size)):
            batch = items[start:start + self.batch_size]
            log_batch_progress(batch_index + 1, total_batches, f"{len(batch)} items", logger)

            # each task fills only its own slot; merged after the whole batch settles
            settled = await asyncio.gather(*(_guarded(item) for item in batch))
            for result, failure in settled:
                outcome.results.append(result)
                if failure is not None:
                    outcome.failures.append(failure)
            outcome.batches += 1

            if start + self.batch_size < len(items):
                await self.sleep(self.delay(batch_index))

        return outcome


async def fetch_commit_details(
    api: GitHubAPI,
    owner: str,
    repo: str,
    commits: Sequence[Commit],
    executor: Optional[BatchExecutor] = None,
) -> BatchOutcome[CommitDetail]:
    """Fetch the file-level detail of every commit; failures become degraded records."""
    executor = executor or BatchExecutor(
        batch_size=api.config.batch_size,
        delay=delay_policy_from_settings(api.config),
    )
    return await executor.run(
        commits,
        fetch=lambda c: api.get_commit(owner, repo, c.sha),
        fallback=CommitDetail.degraded_from,
        describe=lambda c: c.sha,
    )
