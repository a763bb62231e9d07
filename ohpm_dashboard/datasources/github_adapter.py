from typing import Any, List, Optional

import httpx

from ..config import Settings, get_settings
from .base import ContributorRow, DataSourceError, RepoInfo, RepoSource


class GitHubAdapter(RepoSource):
    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or get_settings()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "ohpm-dashboard",
        }
        if self.settings.github_token:
            headers["Authorization"] = f"bearer {self.settings.github_token}"
        self.headers = headers
        if client is None:
            client_kwargs = {
                "base_url": str(self.settings.github_base_url),
                "timeout": self.settings.http_timeout,
            }
            if self.settings.github_proxy:
                client_kwargs["proxy"] = self.settings.github_proxy
            client = httpx.AsyncClient(**client_kwargs)
        self.client = client

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        try:
            resp = await self.client.get(path, params=params, headers=self.headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = exc.response.text
            status = exc.response.status_code
            raise DataSourceError(f"GitHub {status}: {body}") from exc
        except httpx.RequestError as exc:
            raise DataSourceError(f"GitHub request error: {type(exc).__name__} {repr(exc)}") from exc
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise DataSourceError(f"GitHub returned invalid JSON for {path}: {exc}") from exc

    async def get_repository(self, owner: str, repo: str) -> RepoInfo:
        """获取单个仓库的 star / fork / issue / license 信息"""
        item = await self._get_json(f"/repos/{owner}/{repo}")
        if not isinstance(item, dict):
            raise DataSourceError(f"GitHub returned unexpected repo payload for {owner}/{repo}")
        return RepoInfo(
            {
                "stargazers_count": item.get("stargazers_count") or 0,
                "forks_count": item.get("forks_count") or 0,
                "open_issues_count": item.get("open_issues_count") or 0,
                "license": (item.get("license") or {}).get("name"),
            }
        )

    async def list_contributors(self, owner: str, repo: str, per_page: int = 100) -> List[ContributorRow]:
        """获取仓库贡献者（仅第一页，最多 per_page 个）"""
        data = await self._get_json(
            f"/repos/{owner}/{repo}/contributors",
            params={"page": 1, "per_page": per_page},
        )
        # an empty repository answers 204 with no body
        if data is None:
            return []
        if not isinstance(data, list):
            raise DataSourceError(f"GitHub returned unexpected contributors payload for {owner}/{repo}")
        return [
            ContributorRow(
                {
                    "login": item.get("login") or "",
                    "id": item.get("id") or 0,
                    "avatar_url": item.get("avatar_url") or "",
                    "html_url": item.get("html_url") or "",
                    "type": item.get("type") or "",
                }
            )
            for item in data
            if isinstance(item, dict)
        ]

    async def aclose(self) -> None:
        await self.client.aclose()
