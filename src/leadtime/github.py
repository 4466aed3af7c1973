import asyncio
import logging
from typing import Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from .config import DEFAULT_API_URL, DEFAULT_REQUEST_TIMEOUT_S
from .errors import GitHubAPIError
from .models import Deployment, DeploymentStatus

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100
API_VERSION = "2022-11-28"
USER_AGENT = "leadtime (+https://docs.github.com/rest/deployments)"

_deployments_adapter = TypeAdapter(list[Deployment])
_statuses_adapter = TypeAdapter(list[DeploymentStatus])


def _next_page(resp: aiohttp.ClientResponse) -> int | None:
    link = resp.links.get("next")
    if not link:
        return None
    page = link["url"].query.get("page")
    try:
        return int(page) if page is not None else None
    except ValueError:
        logger.warning(f"Ignoring malformed next page link: {link['url']}")
        return None


class GitHubClient:
    """
    Thin async client for the two GitHub REST endpoints the report needs.

    Use as an async context manager so the underlying aiohttp session is
    always closed.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.request_timeout_s = request_timeout_s
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "GitHubClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self._session is None:
            # no connector limit: the collector's admission gate bounds concurrency
            connector = aiohttp.TCPConnector(limit=0)
            timeout = aiohttp.ClientTimeout(total=self.request_timeout_s)
            self._session = aiohttp.ClientSession(
                connector=connector, timeout=timeout, headers=self._headers
            )
            logger.debug(f"Opened GitHub session for {self.api_url}")

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("Closed GitHub session")

    # ────────────────────────────────
    # HTTP
    # ────────────────────────────────

    async def _get_json(self, path: str, params: dict[str, Any]) -> tuple[Any, int | None]:
        if self._session is None:
            raise RuntimeError("GitHubClient is not open; use 'async with GitHubClient(...)'")

        url = f"{self.api_url}{path}"
        try:
            async with self._session.get(url, params=params) as resp:
                if resp.status >= 400:
                    raise GitHubAPIError(await _error_message(resp), status=resp.status, url=url)
                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise GitHubAPIError(f"Error parsing response: {e}", status=resp.status, url=url) from e
                logger.debug(f"GET {url} {params}: status={resp.status}")
                return data, _next_page(resp)
        except aiohttp.ClientError as e:
            raise GitHubAPIError(f"Request error: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            raise GitHubAPIError(
                f"Request timed out after {self.request_timeout_s}s", url=url
            ) from e

    # ────────────────────────────────
    # Deployments
    # ────────────────────────────────

    async def list_deployments_page(
        self, owner: str, repo: str, environment: str, per_page: int = MAX_PER_PAGE, page: int = 1
    ) -> tuple[list[Deployment], int | None]:
        data, next_page = await self._get_json(
            f"/repos/{owner}/{repo}/deployments",
            {"environment": environment, "per_page": per_page, "page": page},
        )
        try:
            deployments = _deployments_adapter.validate_python(data)
        except ValidationError as e:
            raise GitHubAPIError(f"Unexpected deployments payload: {e}") from e
        return deployments, next_page

    async def list_deployments(
        self, owner: str, repo: str, environment: str, total_deployments: int = 0
    ) -> list[Deployment]:
        """
        Follow the deployments listing page by page.

        Stops when GitHub reports no next page or ``total_deployments`` have
        been collected, then trims any overshoot. A cap of 0 or less fetches
        every page.
        """
        per_page = MAX_PER_PAGE
        if 0 < total_deployments < MAX_PER_PAGE:
            per_page = total_deployments

        collected: list[Deployment] = []
        page: int | None = 1
        while page is not None:
            deployments, page = await self.list_deployments_page(
                owner, repo, environment, per_page=per_page, page=page
            )
            collected.extend(deployments)
            logger.debug(f"Fetched {len(deployments)} deployments (total so far {len(collected)})")
            if total_deployments > 0 and len(collected) >= total_deployments:
                break

        if total_deployments > 0 and len(collected) > total_deployments:
            collected = collected[:total_deployments]

        logger.info(f"Fetched {len(collected)} deployments for {owner}/{repo} ({environment})")
        return collected

    async def list_deployment_statuses(
        self, owner: str, repo: str, deployment_id: int
    ) -> list[DeploymentStatus]:
        data, _ = await self._get_json(
            f"/repos/{owner}/{repo}/deployments/{deployment_id}/statuses",
            {"per_page": MAX_PER_PAGE},
        )
        try:
            return _statuses_adapter.validate_python(data)
        except ValidationError as e:
            raise GitHubAPIError(f"Unexpected statuses payload for deployment {deployment_id}: {e}") from e


async def _error_message(resp: aiohttp.ClientResponse) -> str:
    try:
        body = await resp.json(content_type=None)
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return f"GitHub API error: {body['message']}"
    return f"GitHub API error: {resp.reason or 'unexpected response'}"
