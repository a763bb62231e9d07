from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PackageStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


class Contributor(BaseModel):
    login: str
    id: int = 0
    avatar_url: str = ""
    profile_url: str = ""


class GithubStats(BaseModel):
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    license_name: str = ""
    contributors_total: int = 0  # single page of 100 at most


class PackageRecord(BaseModel):
    name: str
    status: PackageStatus = PackageStatus.UNRESOLVED
    version: str = ""
    license_name: str = ""
    description: str = ""
    homepage: str = ""
    repository_url: str = ""
    publish_time_millis: int = 0
    points: int = 0
    max_points: int = 0
    likes: int = 0
    popularity: int = 0
    downloads: int = 0
    github_owner: str = ""
    github_repo: str = ""
    github_stats: Optional[GithubStats] = None
    top_contributors: List[Contributor] = Field(default_factory=list, max_length=3)

    @property
    def resolved(self) -> bool:
        return self.status is PackageStatus.RESOLVED

    @property
    def github_full_name(self) -> str:
        if self.github_owner and self.github_repo:
            return f"{self.github_owner}/{self.github_repo}"
        return ""

    @classmethod
    def unresolved(cls, name: str) -> "PackageRecord":
        return cls(name=name, status=PackageStatus.UNRESOLVED)


class DashboardResult(BaseModel):
    markdown: str
    total: int
