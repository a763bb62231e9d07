import re
from typing import List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from ..datasources.base import ContributorRow, DataSourceError, RepoSource
from ..schemas import Contributor, GithubStats, PackageRecord
from .cache import InMemoryCache

GITHUB_LINK = re.compile(r"github\.com/.*")
CONTRIBUTORS_PER_PAGE = 100
TOP_CONTRIBUTORS = 3


def parse_github_url(value: str | None) -> Tuple[str, str]:
    """Return (owner, repo) for a URL containing ``github.com/owner/repo``.

    Both are empty when the URL holds no usable GitHub link.
    """
    match = GITHUB_LINK.search(value or "")
    if not match:
        return "", ""
    parts = match.group(0).split("/")
    if len(parts) < 3:
        return "", ""
    owner = parts[1]
    repo = re.split(r"[?#]", parts[2], maxsplit=1)[0]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        return "", ""
    return owner, repo


def resolve_github_repo(record: PackageRecord) -> Tuple[str, str]:
    owner, repo = parse_github_url(record.repository_url)
    if repo:
        return owner, repo
    return parse_github_url(record.homepage)


def top_human_contributors(rows: List[ContributorRow], limit: int = TOP_CONTRIBUTORS) -> List[Contributor]:
    humans = [row for row in rows if row.get("type") == "User"]
    return [
        Contributor(
            login=row.get("login", ""),
            id=row.get("id", 0),
            avatar_url=row.get("avatar_url", ""),
            profile_url=row.get("html_url", ""),
        )
        for row in humans[:limit]
    ]


class GitHubEnricher:
    def __init__(self, source: RepoSource, cache: Optional[InMemoryCache] = None):
        self.source = source
        self.cache = cache or InMemoryCache()

    async def enrich(self, record: PackageRecord) -> PackageRecord:
        """Attach GitHub stats and contributors to a resolved record in place."""
        if not record.resolved:
            return record
        owner, repo = resolve_github_repo(record)
        if not owner or not repo:
            logger.debug(f"[GitHub] {record.name} 没有 GitHub 链接，跳过")
            return record
        record.github_owner = owner
        record.github_repo = repo

        full_name = f"{owner}/{repo}"
        cached = self.cache.get(full_name)
        if cached is None:
            stats, contributors, complete = await self._fetch(owner, repo)
            # only a fully successful lookup is shared with other packages
            if complete:
                self.cache.set(full_name, (stats, contributors))
        else:
            stats, contributors = cached
        record.github_stats = stats.model_copy()
        record.top_contributors = [c.model_copy() for c in contributors]
        return record

    async def _fetch(self, owner: str, repo: str) -> Tuple[GithubStats, List[Contributor], bool]:
        full_name = f"{owner}/{repo}"
        stats = GithubStats()
        complete = True
        try:
            info = await self.source.get_repository(owner, repo)
            stats.stars = info.get("stargazers_count", 0)
            stats.forks = info.get("forks_count", 0)
            stats.open_issues = info.get("open_issues_count", 0)
            stats.license_name = info.get("license") or ""
        except DataSourceError as exc:
            logger.warning(f"[GitHub] {full_name} 仓库信息获取失败: {exc}")
            complete = False

        contributors: List[Contributor] = []
        try:
            rows = await self.source.list_contributors(owner, repo, per_page=CONTRIBUTORS_PER_PAGE)
            stats.contributors_total = len(rows)
            contributors = top_human_contributors(rows)
        except (DataSourceError, ValidationError) as exc:
            logger.warning(f"[GitHub] {full_name} 贡献者获取失败: {exc}")
            complete = False
        logger.debug(f"[GitHub] {full_name} stars={stats.stars}, contributors={stats.contributors_total}")
        return stats, contributors, complete
