"""
Runtime settings for the lead-time reporter.

Values come from the process environment, after a project ``.env`` file has
been loaded once. The GitHub token falls back to the ``gh`` CLI when neither
``GITHUB_TOKEN`` nor ``GH_TOKEN`` is set.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REQUEST_TIMEOUT_S = 30.0
DEFAULT_MAX_CONCURRENCY = 10
DEFAULT_TOTAL_DEPLOYMENTS = 500


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_dotenv()


def token_from_gh_cli(host: str = "github.com") -> str | None:
    """Ask the GitHub CLI for its stored token; None if gh is unavailable."""
    gh = shutil.which("gh")
    if gh is None:
        logger.debug("gh CLI not found on PATH")
        return None
    try:
        result = subprocess.run(
            [gh, "auth", "token", "--hostname", host],
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Could not run gh auth token: {e}")
        return None
    if result.returncode != 0:
        logger.debug(f"gh auth token exited with {result.returncode}: {result.stderr.strip()}")
        return None
    return result.stdout.strip() or None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    token: str
    api_url: str = DEFAULT_API_URL
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    @classmethod
    def from_env(cls) -> "Settings":
        _load_env_once()

        token = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
        if token:
            logger.debug("Using GitHub token from environment")
        else:
            token = token_from_gh_cli()
        if not token:
            raise ConfigurationError(
                "Error getting GitHub auth token: set GITHUB_TOKEN or run `gh auth login`"
            )

        max_concurrency = _int_env("LEADTIME_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY)
        if max_concurrency < 1:
            raise ConfigurationError("LEADTIME_MAX_CONCURRENCY must be at least 1")

        return cls(
            token=token,
            api_url=(os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
            request_timeout_s=_float_env("LEADTIME_REQUEST_TIMEOUT_S", DEFAULT_REQUEST_TIMEOUT_S),
            max_concurrency=max_concurrency,
        )
