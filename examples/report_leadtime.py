"""
Library usage: lead time stats for one environment, split at a cutoff.
Run: uv run examples/report_leadtime.py octo-org octo-repo production 2024-03-01T00:00:00Z
"""
import asyncio
import sys

from leadtime import GitHubClient, LeadTimeReporter, format_stats
from leadtime.config import Settings
from leadtime.utils import parse_cutoff


async def main(owner: str, repo: str, environment: str, cutoff: str | None):
    settings = Settings.from_env()
    async with GitHubClient(settings.token, api_url=settings.api_url) as client:
        reporter = LeadTimeReporter(
            client,
            owner,
            repo,
            environment,
            cutoff=parse_cutoff(cutoff) if cutoff else None,
            total_deployments=200,
            max_concurrency=settings.max_concurrency,
        )
        report = await reporter.run()

    print(f"Fetched {report.deployment_count} deployments for {report.environment}:")
    for group in report.groups:
        print(format_stats(group.label, group.stats))

if __name__ == "__main__":
    if len(sys.argv) < 4:
        sys.exit("usage: report_leadtime.py <owner> <repo> <environment> [cutoff]")
    asyncio.run(main(*sys.argv[1:4], sys.argv[4] if len(sys.argv) > 4 else None))
