import asyncio
from datetime import datetime, timedelta, timezone

from leadtime.models import Deployment, DeploymentStatus

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(seconds: int) -> datetime:
    return T0 + timedelta(seconds=seconds)


def deployment(deployment_id: int, offset: int = 0) -> Deployment:
    return Deployment(id=deployment_id, created_at=at(offset))


def status(state: str, offset: int) -> DeploymentStatus:
    return DeploymentStatus(state=state, created_at=at(offset))


class FakeResolver:
    """Resolver double that records how many lookups run at once."""

    def __init__(self, statuses=None, failures=None, delay: float = 0.01):
        self.statuses = statuses or {}
        self.failures = failures or {}
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = []
        self.finished = []

    async def resolve(self, deployment_id):
        self.calls.append(deployment_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if deployment_id in self.failures:
                raise self.failures[deployment_id]
            return self.statuses.get(deployment_id)
        finally:
            self.in_flight -= 1
            self.finished.append(deployment_id)


class FakeGitHub:
    """Stands in for GitHubClient in reporter and CLI tests."""

    def __init__(self, deployments, statuses, errors=None):
        self.deployments = deployments
        self.statuses = statuses
        self.errors = errors or {}
        self.status_calls = []

    async def list_deployments(self, owner, repo, environment, total_deployments=0):
        if total_deployments > 0:
            return self.deployments[:total_deployments]
        return list(self.deployments)

    async def list_deployment_statuses(self, owner, repo, deployment_id):
        self.status_calls.append((owner, repo, deployment_id))
        await asyncio.sleep(0)
        if deployment_id in self.errors:
            raise self.errors[deployment_id]
        return list(self.statuses.get(deployment_id, []))
