__all__ = [
    "LeadTimeReporter",
    "GitHubClient",
    "StatusResolver",
    "collect_statuses",
    "compute_stats",
    "split_by_cutoff",
    "format_stats",
    "Deployment",
    "DeploymentStatus",
    "Stats",
]


from .collector import collect_statuses
from .core import LeadTimeReporter
from .github import GitHubClient
from .metrics import compute_stats, split_by_cutoff
from .models import Deployment, DeploymentStatus, Stats
from .rendering import format_stats
from .resolver import StatusResolver
