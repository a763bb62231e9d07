from typing import List

from loguru import logger

from ..datasources.base import DataSourceError, RegistrySource
from .dedup import split_unique, unique

PAGE_SIZE = 10


class PublisherResolver:
    """Collects every package name published by a list of publishers."""

    def __init__(self, registry: RegistrySource):
        self.registry = registry

    async def resolve(self, publisher_list: str | None) -> List[str]:
        publishers = split_unique(publisher_list)
        if not publishers:
            return []
        logger.info(f"[Publisher] {publishers}")
        names: List[str] = []
        for publisher_id in publishers:
            names.extend(await self.packages_of(publisher_id))
        return unique(names)

    async def packages_of(self, publisher_id: str) -> List[str]:
        names: List[str] = []
        page = 1
        while True:
            logger.info(f"[Publisher] 查询 publisher={publisher_id}, page={page}")
            try:
                rows = await self.registry.search_publisher_packages(publisher_id, page, PAGE_SIZE)
            except DataSourceError as exc:
                # a failed page ends pagination for this publisher only
                logger.warning(f"[Publisher] {publisher_id} page {page} 获取失败: {exc}")
                rows = []
            if not rows:
                break
            names.extend(name for name in rows if name)
            page += 1
        logger.info(f"[Publisher] {publisher_id} 共 {len(names)} 个 package")
        return names
