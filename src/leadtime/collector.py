"""
Bounded fan-out of status lookups.

One task is started per deployment. Each task waits on a shared semaphore
before its lookup, releases it as soon as the lookup returns, then publishes
a single ``StatusResult`` on a queue that the caller drains.
"""

import asyncio
import logging
from collections.abc import Sequence

from .models import Deployment, StatusMap, StatusResult
from .resolver import StatusResolver

logger = logging.getLogger(__name__)


async def _resolve_one(
    resolver: StatusResolver,
    deployment_id: int,
    gate: asyncio.Semaphore,
    results: asyncio.Queue,
) -> None:
    try:
        async with gate:
            try:
                status = await resolver.resolve(deployment_id)
            except Exception as e:
                outcome = StatusResult(deployment_id, error=e)
            else:
                outcome = StatusResult(deployment_id, status=status)
    except BaseException as e:
        # the task is going down; the orchestrator still expects one result from it
        results.put_nowait(StatusResult(deployment_id, error=e))
        raise
    await results.put(outcome)


async def collect_statuses(
    resolver: StatusResolver,
    deployments: Sequence[Deployment],
    max_concurrency: int = 10,
) -> StatusMap:
    """
    Resolve the success status of every deployment, at most
    ``max_concurrency`` lookups at a time.

    Returns a map with one entry per deployment id. If any lookup fails the
    first failure read off the result queue is raised once every task has
    finished, and no map is returned. When several lookups fail concurrently,
    which of them is raised depends on completion order. A lookup that dies
    with a non-``Exception`` (e.g. ``CancelledError`` raised by the resolver)
    counts as a failure and is raised the same way.
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
    if not deployments:
        logger.debug("No deployments to resolve")
        return {}

    gate = asyncio.Semaphore(max_concurrency)
    results: asyncio.Queue = asyncio.Queue()

    logger.info(
        f"Fetching statuses for {len(deployments)} deployments with {max_concurrency} workers"
    )
    tasks = [
        asyncio.create_task(_resolve_one(resolver, d.id, gate, results))
        for d in deployments
    ]

    statuses: StatusMap = {}
    first_error: BaseException | None = None
    try:
        for _ in range(len(tasks)):
            outcome: StatusResult = await results.get()
            if first_error is not None:
                continue
            if outcome.error is not None:
                first_error = outcome.error
                logger.debug(
                    f"Status lookup failed for deployment {outcome.deployment_id}: {outcome.error}"
                )
                continue
            statuses[outcome.deployment_id] = outcome.status
    finally:
        # only non-empty when the caller was cancelled mid-drain
        pending = [t for t in tasks if not t.done()]
        for t in pending:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    if first_error is not None:
        raise first_error

    logger.info(
        f"Resolved {len(statuses)} deployments, "
        f"{sum(1 for s in statuses.values() if s is not None)} with a success status"
    )
    return statuses
