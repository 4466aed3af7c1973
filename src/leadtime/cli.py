#!/usr/bin/env python3
# cli.py: command line entry point for the lead-time report

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from leadtime.config import DEFAULT_TOTAL_DEPLOYMENTS, Settings
from leadtime.core import LeadTimeReporter
from leadtime.errors import LeadTimeError
from leadtime.github import GitHubClient
from leadtime.logging_config import setup_logging
from leadtime.rendering import format_stats, render_duration_histogram
from leadtime.utils import parse_cutoff

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="leadtime",
        description="Deployment lead time statistics for a GitHub repository environment",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("owner", help="GitHub repository owner")
    parser.add_argument("repo", help="GitHub repository name")
    parser.add_argument("environment", help="Deployment environment")

    parser.add_argument(
        "--cutoff",
        default=None,
        help="Cutoff timestamp in ISO8601 format to divide results in two groups",
    )
    parser.add_argument(
        "--deployments",
        type=int,
        default=DEFAULT_TOTAL_DEPLOYMENTS,
        help="Total number of deployments to consider (0 for all)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum concurrent status lookups (default: LEADTIME_MAX_CONCURRENCY or 10)",
    )
    parser.add_argument(
        "--histogram",
        action="store_true",
        help="Also print a histogram of lead times per group",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar while statuses are fetched",
    )

    # Logging & Debugging
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., leadtime.log)",
    )

    args = parser.parse_args(argv)
    if args.deployments < 0:
        parser.error("--deployments must be 0 (all) or a positive count")
    if args.concurrency is not None and args.concurrency < 1:
        parser.error("--concurrency must be at least 1")
    return args


async def run(args) -> None:
    # a malformed cutoff must fail before any request is made
    cutoff = parse_cutoff(args.cutoff) if args.cutoff else None
    settings = Settings.from_env()
    concurrency = args.concurrency or settings.max_concurrency

    async with GitHubClient(
        settings.token, api_url=settings.api_url, request_timeout_s=settings.request_timeout_s
    ) as client:
        progress = None
        task_id = None

        def advance():
            if progress is not None and task_id is not None:
                progress.advance(task_id)

        reporter = LeadTimeReporter(
            client,
            args.owner,
            args.repo,
            args.environment,
            cutoff=cutoff,
            total_deployments=args.deployments,
            max_concurrency=concurrency,
            progress_callback=advance,
        )

        deployments = await reporter.fetch_deployments()
        print(f"Fetched {len(deployments)} deployments for {args.environment}:")

        if not args.no_progress and deployments:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=Console(stderr=True),
                transient=True,
            )
            task_id = progress.add_task("[cyan]Fetching deployment statuses...", total=len(deployments))

        if progress is not None:
            with progress:
                report = await reporter.run(deployments)
        else:
            report = await reporter.run(deployments)

    for group in report.groups:
        print(format_stats(group.label, group.stats))
    if args.histogram:
        for group in report.groups:
            print()
            if group.label:
                print(f"[{group.label}]")
            print(render_duration_histogram(group.durations))


def main(argv=None):
    args = parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    setup_logging(level=log_level, log_file=args.log_file)

    try:
        asyncio.run(run(args))
    except LeadTimeError as e:
        logger.error(f"Run failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received. Aborting.")
        sys.exit(130)

if __name__ == "__main__":
    main()
