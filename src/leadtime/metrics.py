import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from .models import Deployment, MetricsCallback, Stats, StatusMap
from .utils import duration_seconds

logger = logging.getLogger(__name__)


def split_by_cutoff(
    deployments: Iterable[Deployment], cutoff: datetime
) -> tuple[list[Deployment], list[Deployment]]:
    """Split into (older, newer); a deployment created exactly at the cutoff is newer."""
    older: list[Deployment] = []
    newer: list[Deployment] = []
    for deployment in deployments:
        if deployment.created_at < cutoff:
            older.append(deployment)
        else:
            newer.append(deployment)
    logger.debug(
        f"Split at {cutoff.isoformat()}: {len(older)} older, {len(newer)} newer"
    )
    return older, newer


def compute_durations(deployments: Iterable[Deployment], statuses: StatusMap) -> list[int]:
    durations = []
    for deployment in deployments:
        status = statuses.get(deployment.id)
        if status is None:
            continue
        duration = duration_seconds(deployment.created_at, status.created_at)
        if duration > 0:
            durations.append(duration)
        else:
            logger.debug(
                f"Dropping deployment {deployment.id}: non-positive duration {duration}s"
            )
    return durations


def stats_from_durations(
    durations: Sequence[int],
    metrics_callback: MetricsCallback | None = None,
    deployment_count: int | None = None,
) -> Stats:
    """Summarize already-filtered durations; ``deployment_count`` is only reported."""
    if deployment_count is None:
        deployment_count = len(durations)

    stats = Stats()
    if durations:
        total = len(durations)
        stats = Stats(
            total=total,
            avg_duration_secs=sum(durations) // total,
            min_duration_secs=min(durations),
            max_duration_secs=max(durations),
        )

    if metrics_callback:
        metrics_callback(
            {
                "deployments": deployment_count,
                "total": stats.total,
                "avg_duration_secs": stats.avg_duration_secs,
                "min_duration_secs": stats.min_duration_secs,
                "max_duration_secs": stats.max_duration_secs,
            }
        )

    if not stats.total:
        logger.warning(
            f"No successful deployments with a positive duration among {deployment_count}"
        )
    else:
        logger.info(
            f"Stats computed: total={stats.total}, avg={stats.avg_duration_secs}s, "
            f"min={stats.min_duration_secs}s, max={stats.max_duration_secs}s"
        )
    return stats


def compute_stats(
    deployments: Iterable[Deployment],
    statuses: StatusMap,
    metrics_callback: MetricsCallback | None = None,
) -> Stats:
    deployments = list(deployments)
    durations = compute_durations(deployments, statuses)
    return stats_from_durations(durations, metrics_callback, len(deployments))
