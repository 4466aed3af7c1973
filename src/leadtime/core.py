import logging
from datetime import datetime
from typing import Protocol

from .collector import collect_statuses
from .config import DEFAULT_MAX_CONCURRENCY, DEFAULT_TOTAL_DEPLOYMENTS
from .metrics import compute_durations, split_by_cutoff, stats_from_durations
from .models import (
    Deployment,
    DeploymentStatus,
    GroupReport,
    MetricsCallback,
    ProgressCallback,
    Report,
    StatusMap,
)
from .resolver import StatusResolver

logger = logging.getLogger(__name__)


class DeploymentSource(Protocol):
    async def list_deployments(
        self, owner: str, repo: str, environment: str, total_deployments: int = 0
    ) -> list[Deployment]: ...

    async def list_deployment_statuses(
        self, owner: str, repo: str, deployment_id: int
    ) -> list[DeploymentStatus]: ...


class LeadTimeReporter:
    def __init__(
        self,
        client: DeploymentSource,
        owner: str,
        repo: str,
        environment: str,
        cutoff: datetime | None = None,
        total_deployments: int = DEFAULT_TOTAL_DEPLOYMENTS,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        progress_callback: ProgressCallback | None = None,
        metrics_callback: MetricsCallback | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
        self.client = client
        self.owner = owner
        self.repo = repo
        self.environment = environment
        self.cutoff = cutoff
        self.total_deployments = total_deployments
        self.max_concurrency = max_concurrency
        self.metrics_callback = metrics_callback
        self.resolver = StatusResolver(client, owner, repo, progress_callback=progress_callback)

        logger.info(
            f"Initialized reporter for {owner}/{repo} ({environment}), "
            f"total_deployments={total_deployments or 'all'}, "
            f"max_concurrency={max_concurrency}"
        )

    async def fetch_deployments(self) -> list[Deployment]:
        return await self.client.list_deployments(
            self.owner, self.repo, self.environment, total_deployments=self.total_deployments
        )

    def _group(self, label: str, deployments: list[Deployment], statuses: StatusMap) -> GroupReport:
        durations = compute_durations(deployments, statuses)
        stats = stats_from_durations(durations, self.metrics_callback, len(deployments))
        return GroupReport(label, stats, durations)

    async def run(self, deployments: list[Deployment] | None = None) -> Report:
        """
        Fetch deployments (unless given), resolve their statuses and compute
        stats for all of them, or for the old/new cohorts when a cutoff is set.
        """
        if deployments is None:
            deployments = await self.fetch_deployments()

        statuses = await collect_statuses(self.resolver, deployments, self.max_concurrency)

        if self.cutoff is not None:
            older, newer = split_by_cutoff(deployments, self.cutoff)
            groups = [
                self._group("old", older, statuses),
                self._group("new", newer, statuses),
            ]
        else:
            groups = [self._group("", deployments, statuses)]

        logger.info(f"Run completed for {len(deployments)} deployments")
        return Report(self.environment, len(deployments), groups)
