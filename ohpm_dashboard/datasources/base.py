from typing import List, Optional, Protocol


class DataSourceError(RuntimeError):
    """Raised when a remote API call fails or returns an undecodable body."""


class PackageDetail(dict):
    """Lightweight mapping to hold the registry's package detail body."""

    name: str
    version: str
    license: str
    homepage: str
    repository: str
    publishTime: int
    points: int
    likes: int
    popularity: int
    downloads: int
    max_points: int


class RepoInfo(dict):
    """Lightweight mapping to hold repository metadata."""

    stargazers_count: int
    forks_count: int
    open_issues_count: int
    license: Optional[str]


class ContributorRow(dict):
    login: str
    id: int
    avatar_url: str
    html_url: str
    type: str


class RegistrySource(Protocol):
    async def search_publisher_packages(self, publisher_id: str, page: int, page_size: int = 10) -> List[str]:
        ...

    async def get_package_detail(self, package_name: str) -> PackageDetail:
        ...

    async def search_description(self, package_name: str) -> str:
        ...


class RepoSource(Protocol):
    async def get_repository(self, owner: str, repo: str) -> RepoInfo:
        ...

    async def list_contributors(self, owner: str, repo: str, per_page: int = 100) -> List[ContributorRow]:
        ...
