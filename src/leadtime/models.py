from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict


class Deployment(BaseModel):
    """One deployment as returned by the GitHub deployments API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    created_at: datetime
    environment: Optional[str] = None
    sha: Optional[str] = None
    ref: Optional[str] = None


class DeploymentStatus(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    state: str
    created_at: datetime

    @property
    def is_success(self) -> bool:
        return self.state == "success"


@dataclass(frozen=True)
class StatusResult:
    deployment_id: int
    status: DeploymentStatus | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class Stats:
    total: int = 0
    avg_duration_secs: int = 0
    min_duration_secs: int = 0
    max_duration_secs: int = 0


@dataclass
class GroupReport:
    label: str
    stats: Stats
    durations: list[int] = field(default_factory=list)


@dataclass
class Report:
    environment: str
    deployment_count: int
    groups: list[GroupReport]


# deployment id -> first success status, None when the deployment never succeeded
StatusMap = dict[int, Optional[DeploymentStatus]]

# Progress sink: called once per completed status lookup
ProgressCallback = Callable[[], None]

# Metrics callback: callable accepting stats dict
MetricsCallback = Callable[[dict[str, Any]], None]
