import asyncio

import pytest

from ohpm_dashboard.schemas import PackageRecord, PackageStatus
from ohpm_dashboard.services.cache import InMemoryCache
from ohpm_dashboard.services.github_enricher import (
    GitHubEnricher,
    parse_github_url,
    resolve_github_repo,
    top_human_contributors,
)

from .conftest import FakeGitHub, contributor, github_adapter


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://github.com/foo/bar.git", ("foo", "bar")),
        ("git+https://github.com/foo/bar", ("foo", "bar")),
        ("https://github.com/foo/bar/tree/main/library", ("foo", "bar")),
        ("https://github.com/foo/bar#readme", ("foo", "bar")),
        ("https://gitee.com/foo/bar", ("", "")),
        ("https://github.com/foo", ("", "")),
        ("https://github.com/foo/", ("", "")),
        ("", ("", "")),
        (None, ("", "")),
    ],
)
def test_parse_github_url(url, expected):
    assert parse_github_url(url) == expected


def test_repository_url_wins_over_homepage():
    record = PackageRecord(
        name="@a/b",
        status=PackageStatus.RESOLVED,
        homepage="https://github.com/home/page",
        repository_url="https://github.com/repo/url",
    )
    assert resolve_github_repo(record) == ("repo", "url")


def test_homepage_used_when_repository_has_no_github_link():
    record = PackageRecord(
        name="@a/b",
        status=PackageStatus.RESOLVED,
        homepage="https://github.com/home/page",
        repository_url="https://gitee.com/repo/url",
    )
    assert resolve_github_repo(record) == ("home", "page")


def test_top_human_contributors_skips_bots_and_keeps_three():
    rows = [
        contributor("bot", kind="Bot", id=1),
        contributor("a", id=2),
        contributor("org", kind="Organization", id=3),
        contributor("b", id=4),
        contributor("c", id=5),
        contributor("d", id=6),
    ]
    top = top_human_contributors(rows)
    assert [c.login for c in top] == ["a", "b", "c"]
    assert top[0].profile_url == "https://github.com/a"


def test_enrich_attaches_stats_and_contributors(settings):
    fake = FakeGitHub(
        repos={"foo/bar": {"stargazers_count": 42, "forks_count": 7, "open_issues_count": 3, "license": {"name": "MIT License"}}},
        contributors={"foo/bar": [contributor("dependabot[bot]", kind="Bot", id=9), contributor("alice", id=1)]},
    )
    enricher = GitHubEnricher(github_adapter(settings, fake), InMemoryCache(settings))
    record = PackageRecord(name="@a/b", status=PackageStatus.RESOLVED, repository_url="https://github.com/foo/bar.git")

    asyncio.run(enricher.enrich(record))

    assert (record.github_owner, record.github_repo) == ("foo", "bar")
    assert record.github_stats.stars == 42
    assert record.github_stats.forks == 7
    assert record.github_stats.open_issues == 3
    assert record.github_stats.license_name == "MIT License"
    assert record.github_stats.contributors_total == 2
    assert [c.login for c in record.top_contributors] == ["alice"]
    auth = fake.requests[0].headers["Authorization"]
    assert auth == "bearer test-token"
    assert fake.requests[0].headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert fake.requests[1].url.params["per_page"] == "100"


def test_enrich_skips_records_without_github_link(settings):
    fake = FakeGitHub()
    enricher = GitHubEnricher(github_adapter(settings, fake), InMemoryCache(settings))
    record = PackageRecord(name="@a/b", status=PackageStatus.RESOLVED, homepage="https://gitee.com/x/y")

    asyncio.run(enricher.enrich(record))

    assert fake.requests == []
    assert record.github_stats is None
    assert record.github_owner == ""


def test_enrich_leaves_zero_values_when_github_fails(settings):
    fake = FakeGitHub()  # every lookup answers 404
    enricher = GitHubEnricher(github_adapter(settings, fake), InMemoryCache(settings))
    record = PackageRecord(name="@a/b", status=PackageStatus.RESOLVED, repository_url="https://github.com/gone/away")

    asyncio.run(enricher.enrich(record))

    assert record.github_full_name == "gone/away"
    assert record.github_stats.stars == 0
    assert record.github_stats.contributors_total == 0
    assert record.top_contributors == []


def test_enrich_reuses_cached_repository(settings):
    fake = FakeGitHub(
        repos={"foo/bar": {"stargazers_count": 1}},
        contributors={"foo/bar": [contributor("alice")]},
    )
    enricher = GitHubEnricher(github_adapter(settings, fake), InMemoryCache(settings))
    first = PackageRecord(name="@a/one", status=PackageStatus.RESOLVED, repository_url="https://github.com/foo/bar")
    second = PackageRecord(name="@a/two", status=PackageStatus.RESOLVED, homepage="https://github.com/foo/bar")

    async def run():
        await enricher.enrich(first)
        await enricher.enrich(second)

    asyncio.run(run())

    assert len(fake.requests) == 2
    assert second.github_stats.stars == 1
    assert second.github_stats is not first.github_stats


def test_unresolved_records_are_not_enriched(settings):
    fake = FakeGitHub()
    enricher = GitHubEnricher(github_adapter(settings, fake), InMemoryCache(settings))
    record = PackageRecord.unresolved("@a/missing")

    asyncio.run(enricher.enrich(record))

    assert fake.requests == []
    assert record.github_stats is None


def test_failed_lookup_is_not_cached(settings):
    fake = FakeGitHub(contributors={"foo/bar": [contributor("alice")]})  # repo lookup 404s
    enricher = GitHubEnricher(github_adapter(settings, fake), InMemoryCache(settings))
    first = PackageRecord(name="@a/one", status=PackageStatus.RESOLVED, repository_url="https://github.com/foo/bar")
    second = PackageRecord(name="@a/two", status=PackageStatus.RESOLVED, repository_url="https://github.com/foo/bar")

    async def run():
        await enricher.enrich(first)
        fake.repos["foo/bar"] = {"stargazers_count": 8}
        await enricher.enrich(second)

    asyncio.run(run())

    assert first.github_stats.stars == 0
    assert second.github_stats.stars == 8
    assert len(fake.requests) == 4
    assert len(enricher.cache) == 1
