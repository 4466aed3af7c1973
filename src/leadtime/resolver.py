import logging
from typing import Protocol

from .models import DeploymentStatus, ProgressCallback

logger = logging.getLogger(__name__)


class StatusSource(Protocol):
    async def list_deployment_statuses(
        self, owner: str, repo: str, deployment_id: int
    ) -> list[DeploymentStatus]: ...


class StatusResolver:
    """Finds the first ``success`` status recorded for a deployment."""

    def __init__(
        self,
        source: StatusSource,
        owner: str,
        repo: str,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.source = source
        self.owner = owner
        self.repo = repo
        self.progress_callback = progress_callback

    async def resolve(self, deployment_id: int) -> DeploymentStatus | None:
        statuses = await self.source.list_deployment_statuses(self.owner, self.repo, deployment_id)
        if self.progress_callback:
            try:
                self.progress_callback()
            except Exception as e:
                logger.warning(f"Progress callback failed for deployment {deployment_id}: {e}")

        # first match in the order GitHub returned them, not the earliest by time
        for status in statuses:
            if status.is_success:
                logger.debug(f"Deployment {deployment_id} succeeded at {status.created_at.isoformat()}")
                return status

        logger.debug(
            f"Deployment {deployment_id} has no success status "
            f"({len(statuses)} statuses: {', '.join(s.state for s in statuses) or 'none'})"
        )
        return None
