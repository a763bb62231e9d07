"""Markdown rendering of the dashboard table.

Every cell is plain markdown or inline HTML so the table renders on GitHub
without extra assets; badges are served by shields.io.
"""
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import quote

from ..config import Settings, get_settings
from ..schemas import Contributor, PackageRecord

UNRESOLVED_MARKER = "⁉️"
CONTRIBUTORS_CAP = 100

OHPM_LOGO = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAABQAAAAUCAMAAAC6V+0/AAAA6lBMVEUAAABswm92x09tw2pCq+xhvItMsM9Qs8FhvIxhvI9Bq+1mvn5rwm9OssdqwnFhvI1FreJTtLdowHdMsM1lvoJvxGJJr9hQssJ6yUNeupdXtq1auKJlvoNCq+tFrONJr9ZlvoJzxVlGreFwxGFQssNauKJMscxeuphErOVlvoN6yUNDq+lIrtpTtLdov3lLsM9hvIxAqvJhvI1ErOZwxGB6yUNTtLhAqvF6yUNwxGJ6yUNlvoJeupdzxVlwxGB6yUNHrt1swm1swm1swmxXtq1Xtq1yxVtpwHZvw2RwxGFnv3tnv3t6yUN6yUPKo5kKAAAATnRSTlMABRQL+Ho1JiMeGxoRCKL+/Pz8+PPz8fHx8Ovk4dPOzszGxcKsqqCYh4F/fXp3d2xoZ2VhWlZRR0dBNTEvLiUhFvy9taGgmI+Nf2loaGciFjA1AAAAo0lEQVQY02MgDfCy6bqqqhtxIIuxq4kLSklL8svo8cDF2OSFVczYOW0MFIT4mKBiXEpi+rxgFre7kwlUUFtAB6aHkZERqlBWzgHM4GDV5GbyNGGw0LJnMGfRgCpjFfFmVlZk9pEwZTBkMYZqZrbmZLCzZWSyYsIqiKLdC6TdV8IU1SJLUTeQRShO4nEWtcRwPJ+jByMWb/LgChBE0LmAg45kAADNURSuaNgr4QAAAABJRU5ErkJggg=="
DOWNLOAD_ICON = "data:image/svg+xml;base64,PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHZpZXdCb3g9IjAgMCAyNCAyNCIgZmlsbD0icmdiYSgyNTUsMjU1LDI1NSwxKSI+PHBhdGggZD0iTTMgMTlIMjFWMjFIM1YxOVpNMTMgOUgyMEwxMiAxN0w0IDlIMTFWMUgxM1Y5WiI+PC9wYXRoPjwvc3ZnPg=="
POPULARITY_ICON = "data:image/svg+xml;base64,PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHZpZXdCb3g9IjAgMCAyNCAyNCIgZmlsbD0icmdiYSgyNTUsMjU1LDI1NSwxKSI+PHBhdGggZmlsbD0ibm9uZSIgZD0iTTAgMGgyNHYyNEgweiI+PC9wYXRoPjxwYXRoIGQ9Ik0xMiAyM0M3Ljg1Nzg2IDIzIDQuNSAxOS42NDIxIDQuNSAxNS41QzQuNSAxMy4zNDYyIDUuNDA3ODYgMTEuNDA0NSA2Ljg2MTc5IDEwLjAzNjZDOC4yMDQwMyA4Ljc3Mzc1IDExLjUgNi40OTk1MSAxMSAxLjVDMTcgNS41IDIwIDkuNSAxNCAxNS41QzE1IDE1LjUgMTYuNSAxNS41IDE5IDEzLjAyOTZDMTkuMjY5NyAxMy44MDMyIDE5LjUgMTQuNjM0NSAxOS41IDE1LjVDMTkuNSAxOS42NDIxIDE2LjE0MjEgMjMgMTIgMjNaIj48L3BhdGg+PC9zdmc+"
POINT_ICON = "data:image/svg+xml;base64,PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHZpZXdCb3g9IjAgMCAyNCAyNCIgZmlsbD0icmdiYSgyNTUsMjU1LDI1NSwxKSI+PHBhdGggZD0iTTEuOTQ2MDcgOS4zMTU0M0MxLjQyMzUzIDkuMTQxMjUgMS40MTk0IDguODYwMjIgMS45NTY4MiA4LjY4MTA4TDIxLjA0MyAyLjMxOTAxQzIxLjU3MTUgMi4xNDI4NSAyMS44NzQ2IDIuNDM4NjYgMjEuNzI2NSAyLjk1Njk0TDE2LjI3MzMgMjIuMDQzMkMxNi4xMjIzIDIyLjU3MTYgMTUuODE3NyAyMi41OSAxNS41OTQ0IDIyLjA4NzZMMTEuOTk5OSAxNEwxNy45OTk5IDYuMDAwMDVMOS45OTk5MiAxMkwxLjk0NjA3IDkuMzE1NDNaIj48L3BhdGg+PC9zdmc+"

BADGE_GREEN = "5EDE2E"
# (ratio of max points, colour); the lowest threshold the score falls under wins
POINTS_TIERS = [
    (1.0, "95C30D"),
    (0.5, "9FA226"),
    (0.2, "D6AE22"),
    (0.1, "D66049"),
]

TABLE_HEADER = (
    "| <sub>Package</sub> | <sub>Stars/Likes</sub> | <sub>Downloads/Popularity / Points</sub> "
    "| <sub>Issues / Pull_requests</sub> | <sub>Contributors</sub> | \n"
    "|--------------------|------------------------|------------------------------"
    "|-----------------------------------|:-----------------------:| \n"
)


def format_timestamp(millis: int) -> str:
    """RFC 3339 (UTC) string for an epoch-milliseconds timestamp."""
    moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_cell(value: str) -> str:
    # a raw pipe would split the markdown cell
    return value.replace("\n", " ").replace("|", "丨")


def points_color(points: int, max_points: int) -> str:
    color = BADGE_GREEN
    for ratio, tier_color in POINTS_TIERS:
        if points < max_points * ratio:
            color = tier_color
    return color


def contributors_total_label(total: int) -> str:
    if total >= CONTRIBUTORS_CAP:
        return "99+"
    return str(total)


def _avatar(contributor: Contributor, width: str) -> str:
    return f'<a href="{contributor.profile_url}"><img width="{width}" src="{contributor.avatar_url}" /></a>'


def render_contributors(record: PackageRecord) -> str:
    """Mini avatar table for up to three contributors, empty when there are none."""
    contributors = record.top_contributors[:3]
    if not record.github_full_name or not contributors:
        return ""

    html = '<table align="center" border="0">'
    if len(contributors) == 1:
        html += f'<tr align="center"><td>{_avatar(contributors[0], "36px")}</td></tr>'
    elif len(contributors) == 2:
        html += '<tr align="center">'
        html += f'<td>{_avatar(contributors[0], "30px")}</td>'
        html += f'<td>{_avatar(contributors[1], "30px")}</td>'
        html += "</tr>"
    else:
        html += f'<tr align="center"><td colspan="2">{_avatar(contributors[0], "36px")}</td></tr>'
        html += '<tr align="center">'
        html += f'<td>{_avatar(contributors[1], "30px")}</td>'
        html += f'<td>{_avatar(contributors[2], "30px")}</td>'
        html += "</tr>"

    total = record.github_stats.contributors_total if record.github_stats else 0
    graph_url = f"https://github.com/{record.github_full_name}/graphs/contributors"
    html += '<tr align="center"><td colspan="2">'
    html += f'<a href="{graph_url}">Total: {contributors_total_label(total)}</a>'
    html += "</td></tr>"
    html += "</table>"
    return html


class MarkdownRenderer:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def detail_url(self, name: str) -> str:
        return self.settings.ohpm_web_url + quote(name, safe="@")

    def _ohpm_badge(self, alt: str, message: str, style: str, logo: str, extra: str, link: str) -> str:
        return f"[![{alt}](https://img.shields.io/badge/{message}-_?style={style}&logo={logo}&{extra})]({link})"

    def render_row(self, record: PackageRecord) -> str:
        if not record.resolved:
            return f"| {record.name} {UNRESOLVED_MARKER} | | | | | \n"

        link = self.detail_url(record.name)
        name = f"[{record.name}]({link})"
        license_name = f"<strong>License:</strong> {record.license_name or '-'}"
        publish_time = f"<strong>PublishTime:</strong> {format_timestamp(record.publish_time_millis)}"

        likes = self._ohpm_badge(
            "OHPM likes", str(record.likes), "social", OHPM_LOGO, "logoColor=168AFD&label=", link
        )
        green = f"logoColor=FFFFFF&labelColor={BADGE_GREEN}&color={BADGE_GREEN}"
        downloads = self._ohpm_badge("OHPM downloads", str(record.downloads), "flat", DOWNLOAD_ICON, green, link)
        popularity = self._ohpm_badge("OHPM popularity", str(record.popularity), "flat", POPULARITY_ICON, green, link)
        color = points_color(record.points, record.max_points)
        points = self._ohpm_badge(
            "OHPM points",
            f"{record.points}{quote('/', safe='')}{record.max_points}",
            "flat",
            POINT_ICON,
            f"logoColor=FFFFFF&labelColor={color}&color={color}",
            link,
        )

        stars, issues, pull_requests = "", "-", "-"
        full_name = record.github_full_name
        if full_name:
            repo_url = f"https://github.com/{full_name}"
            stars = (
                f"[![GitHub stars](https://img.shields.io/github/stars/{full_name}"
                f"?style=social&logo=github&logoColor=1F2328&label=)]({repo_url})"
            )
            issues = f"[![GitHub issues](https://img.shields.io/github/issues/{full_name}?label=)]({repo_url}/issues)"
            pull_requests = (
                f"[![GitHub pull requests](https://img.shields.io/github/issues-pr/{full_name}?label=)]({repo_url}/pulls)"
            )

        return (
            f"| {name} <sup><strong>v{record.version}</strong></sup> <br/> <sub>{format_cell(record.description)}</sub>"
            f" <br/> <sub>{license_name}</sub> <br/> <sub>{publish_time}</sub>"
            f" | {stars} <br/> {likes}"
            f" | {downloads} <br/> {popularity} <br/> {points}"
            f" | {issues} <br/> {pull_requests}"
            f" | {render_contributors(record)}"
            " | \n"
        )

    def render(self, records: List[PackageRecord], sort_field: str) -> str:
        markdown = f"<sub>Sort by {sort_field} | Total {len(records)}</sub> \n\n"
        markdown += TABLE_HEADER
        for record in records:
            markdown += self.render_row(record)
        return markdown


def render_markdown(records: List[PackageRecord], sort_field: str, settings: Optional[Settings] = None) -> str:
    return MarkdownRenderer(settings).render(records, sort_field)
