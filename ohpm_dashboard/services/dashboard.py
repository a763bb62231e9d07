from typing import Optional

from loguru import logger

from ..config import Settings, get_settings
from ..datasources.base import RegistrySource, RepoSource
from ..datasources.github_adapter import GitHubAdapter
from ..datasources.ohpm_adapter import OhpmAdapter
from ..schemas import DashboardResult
from .cache import InMemoryCache
from .dedup import split_unique, unique
from .github_enricher import GitHubEnricher
from .package_fetcher import PackageFetcher
from .publisher_resolver import PublisherResolver
from .renderer import MarkdownRenderer
from .sorter import sort_packages


class Dashboard:
    """resolve publishers -> fetch packages -> sort -> render"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[RegistrySource] = None,
        github: Optional[RepoSource] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or OhpmAdapter(self.settings)
        self.github = github or GitHubAdapter(self.settings)
        self.resolver = PublisherResolver(self.registry)
        self.fetcher = PackageFetcher(
            self.registry,
            GitHubEnricher(self.github, InMemoryCache(self.settings)),
            concurrency=self.settings.fetch_concurrency,
        )
        self.renderer = MarkdownRenderer(self.settings)

    async def build(
        self,
        publisher_list: str | None = "",
        package_list: str | None = "",
        sort_field: str = "name",
        sort_mode: str = "asc",
    ) -> DashboardResult:
        publisher_packages = await self.resolver.resolve(publisher_list)
        names = unique(publisher_packages + split_unique(package_list))
        records = await self.fetcher.fetch_all(names)
        records = sort_packages(records, sort_field, sort_mode)
        logger.info(f"[Dashboard] 共 {len(records)} 个 package, sort={sort_field} {sort_mode}")
        return DashboardResult(markdown=self.renderer.render(records, sort_field), total=len(records))

    async def aclose(self) -> None:
        for source in (self.registry, self.github):
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()


async def build_dashboard(
    publisher_list: str | None = "",
    package_list: str | None = "",
    sort_field: str = "name",
    sort_mode: str = "asc",
    settings: Optional[Settings] = None,
) -> DashboardResult:
    dashboard = Dashboard(settings)
    try:
        return await dashboard.build(publisher_list, package_list, sort_field, sort_mode)
    finally:
        await dashboard.aclose()
