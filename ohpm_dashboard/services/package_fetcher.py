import asyncio
from typing import Iterable, List, Optional

from loguru import logger
from pydantic import ValidationError

from ..datasources.base import DataSourceError, PackageDetail, RegistrySource
from ..schemas import PackageRecord, PackageStatus
from .github_enricher import GitHubEnricher


def record_from_detail(detail: PackageDetail, description: str = "") -> PackageRecord:
    return PackageRecord(
        name=detail["name"],
        status=PackageStatus.RESOLVED,
        version=detail.get("version", ""),
        license_name=detail.get("license", ""),
        description=description,
        homepage=detail.get("homepage", ""),
        repository_url=detail.get("repository", ""),
        publish_time_millis=detail.get("publishTime", 0),
        points=detail.get("points", 0),
        max_points=detail.get("max_points", 0),
        likes=detail.get("likes", 0),
        popularity=detail.get("popularity", 0),
        downloads=detail.get("downloads", 0),
    )


class PackageFetcher:
    """Builds one PackageRecord per package name.

    Fetches run concurrently up to ``concurrency`` at a time; the returned
    list follows the order of the input names.
    """

    def __init__(self, registry: RegistrySource, enricher: GitHubEnricher, concurrency: int = 1):
        self.registry = registry
        self.enricher = enricher
        self.concurrency = max(1, concurrency)

    async def fetch_all(self, names: Iterable[str]) -> List[PackageRecord]:
        names = list(names)
        logger.info(f"[Package] {names}")
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(name: str) -> PackageRecord:
            async with semaphore:
                return await self.fetch(name)

        return list(await asyncio.gather(*(_bounded(name) for name in names)))

    async def fetch(self, name: str) -> PackageRecord:
        logger.info(f"[Package] 开始获取 {name}")
        detail = await self._detail(name)
        if detail is None or not detail.get("name"):
            logger.warning(f"[Package] {name} 无法获取信息")
            return PackageRecord.unresolved(name)

        description = await self._description(detail["name"])
        try:
            record = record_from_detail(detail, description)
        except ValidationError as exc:
            logger.warning(f"[Package] {name} 详情字段无效: {exc}")
            return PackageRecord.unresolved(name)
        await self.enricher.enrich(record)
        logger.info(f"[Package] {name} 获取完成")
        return record

    async def _detail(self, name: str) -> Optional[PackageDetail]:
        try:
            return await self.registry.get_package_detail(name)
        except DataSourceError as exc:
            logger.warning(f"[Package] {name} 详情获取失败: {exc}")
            return None

    async def _description(self, name: str) -> str:
        try:
            return await self.registry.search_description(name)
        except DataSourceError as exc:
            logger.warning(f"[Package] {name} 描述获取失败: {exc}")
            return ""
