import httpx
import pytest

from ohpm_dashboard.config import Settings
from ohpm_dashboard.datasources.github_adapter import GitHubAdapter
from ohpm_dashboard.datasources.ohpm_adapter import OhpmAdapter


@pytest.fixture
def settings():
    return Settings(_env_file=None, GITHUB_TOKEN="test-token", FETCH_CONCURRENCY=2)


class FakeOhpm:
    """In-memory stand-in for the OHPM open API."""

    def __init__(self, packages=None, publishers=None, descriptions=None, broken=()):
        self.packages = packages or {}
        self.publishers = publishers or {}
        self.descriptions = descriptions or {}
        self.broken = set(broken)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if "/detail/" in path:
            name = path.split("/detail/", 1)[1]
            if name in self.broken:
                return httpx.Response(500, text="boom")
            return httpx.Response(200, json={"body": self.packages.get(name)})
        if path.endswith("/search"):
            params = request.url.params
            if params.get("publisherId"):
                publisher = params["publisherId"]
                if publisher in self.broken:
                    return httpx.Response(200, text="<html>not json</html>")
                pages = self.publishers.get(publisher, [])
                page = int(params["pageNum"])
                rows = pages[page - 1] if page <= len(pages) else []
                return httpx.Response(200, json={"body": {"rows": [{"name": n} for n in rows]}})
            name = params["condition"].split("name:", 1)[1]
            description = self.descriptions.get(name)
            rows = [{"description": description}] if description is not None else []
            return httpx.Response(200, json={"body": {"rows": rows}})
        return httpx.Response(404)


class FakeGitHub:
    def __init__(self, repos=None, contributors=None):
        self.repos = repos or {}
        self.contributors = contributors or {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        full_name = "/".join(parts[1:3])
        if parts[-1] == "contributors":
            if full_name not in self.contributors:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=self.contributors[full_name])
        if full_name not in self.repos:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json=self.repos[full_name])


def ohpm_adapter(settings, fake):
    client = httpx.AsyncClient(base_url=str(settings.ohpm_base_url), transport=httpx.MockTransport(fake))
    return OhpmAdapter(settings, client=client)


def github_adapter(settings, fake):
    client = httpx.AsyncClient(base_url=str(settings.github_base_url), transport=httpx.MockTransport(fake))
    return GitHubAdapter(settings, client=client)


def package_body(name, **extra):
    body = {
        "name": name,
        "version": "1.0.0",
        "license": "Apache-2.0",
        "homepage": "",
        "repository": "",
        "publishTime": 1700000000000,
        "points": 90,
        "likes": 3,
        "popularity": 70,
        "downloads": 1200,
        "pointDetail": {"point": 100},
    }
    body.update(extra)
    return body


def contributor(login, kind="User", id=1):
    return {
        "login": login,
        "id": id,
        "avatar_url": f"https://avatars.githubusercontent.com/u/{id}",
        "html_url": f"https://github.com/{login}",
        "type": kind,
    }
