from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from ..config import Settings, get_settings
from .base import DataSourceError, PackageDetail, RegistrySource


def _body(data: Any) -> dict:
    if not isinstance(data, dict):
        return {}
    body = data.get("body")
    return body if isinstance(body, dict) else {}


def _rows(data: Any) -> List[dict]:
    rows = _body(data).get("rows") or []
    return [row for row in rows if isinstance(row, dict)]


class OhpmAdapter(RegistrySource):
    """OpenHarmony 三方库中心仓 (OHPM) open API."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or get_settings()
        self.headers = {"Accept": "application/json", "User-Agent": "ohpm-dashboard"}
        if client is None:
            client = httpx.AsyncClient(
                base_url=str(self.settings.ohpm_base_url),
                timeout=self.settings.http_timeout,
            )
        self.client = client

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        try:
            resp = await self.client.get(path, params=params, headers=self.headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise DataSourceError(f"OHPM {status}: {exc.response.text}") from exc
        except httpx.RequestError as exc:
            raise DataSourceError(f"OHPM request error: {type(exc).__name__} {repr(exc)}") from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise DataSourceError(f"OHPM returned invalid JSON for {path}: {exc}") from exc

    async def search_publisher_packages(self, publisher_id: str, page: int, page_size: int = 10) -> List[str]:
        """按 publisher 分页查询 package 名称，空列表表示没有更多数据

        One entry per returned row; rows without a name come back as "".
        """
        params = {
            "publisherId": publisher_id,
            "pageNum": page,
            "pageSize": page_size,
            "sortedType": "latest",
            "isHomePage": "false",
            "condition": "",
        }
        rows = _body(await self._get_json("/search", params=params)).get("rows") or []
        if not isinstance(rows, list):
            raise DataSourceError(f"OHPM returned unexpected rows for publisher {publisher_id}")
        return [(row.get("name") or "") if isinstance(row, dict) else "" for row in rows]

    async def get_package_detail(self, package_name: str) -> PackageDetail:
        # scoped names keep their "@" but the "/" must be escaped
        data = await self._get_json(f"/detail/{quote(package_name, safe='@')}")
        body = _body(data)
        return PackageDetail(
            {
                "name": body.get("name") or "",
                "version": body.get("version") or "",
                "license": body.get("license") or "",
                "homepage": body.get("homepage") or "",
                "repository": body.get("repository") or "",
                "publishTime": body.get("publishTime") or 0,
                "points": body.get("points") or 0,
                "likes": body.get("likes") or 0,
                "popularity": body.get("popularity") or 0,
                "downloads": body.get("downloads") or 0,
                "max_points": (body.get("pointDetail") or {}).get("point") or 0,
            }
        )

    async def search_description(self, package_name: str) -> str:
        params = {
            "condition": f"name:{package_name}",
            "pageNum": 1,
            "pageSize": 10,
            "sortedType": "relevancy",
            "isHomePage": "false",
        }
        rows = _rows(await self._get_json("/search", params=params))
        if rows:
            return rows[0].get("description") or ""
        return ""

    async def aclose(self) -> None:
        await self.client.aclose()
