import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config import Settings, get_settings

TABLE_BEGIN = "<!-- md:OHPMDashboard begin -->"
TABLE_END = "<!-- md:OHPMDashboard end -->"
TOTAL_BEGIN = "<!-- md:OHPMDashboard-total begin -->"
TOTAL_END = "<!-- md:OHPMDashboard-total end -->"


class ReadmePatchError(RuntimeError):
    pass


def replace_between(text: str, begin: str, end: str, content: str) -> str:
    """Replace every ``begin ... end`` span (non-greedy, across lines) with ``begin + content + end``."""
    pattern = re.compile(re.escape(begin) + r"(.*?)" + re.escape(end), re.DOTALL)
    return pattern.sub(lambda _: begin + content + end, text)


def _rewrite(path: Path, begin: str, end: str, content: str, action: str) -> None:
    try:
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadmePatchError(f"{action}: error reading {path}: {exc}") from exc
    try:
        path.write_bytes(replace_between(text, begin, end, content).encode("utf-8"))
    except OSError as exc:
        raise ReadmePatchError(f"{action}: error writing {path}: {exc}") from exc
    logger.info(f"[README] {action}: success")


def update_markdown_table(
    path: str | Path,
    markdown: str,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> None:
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)
    updated_on = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    content = (
        " \n"
        + markdown
        + " \n"
        + f"Updated on {updated_on} by [Action]({settings.attribution_url}). \n"
    )
    _rewrite(Path(path), TABLE_BEGIN, TABLE_END, content, "updateMarkdownTable")


def update_package_total(path: str | Path, total: int) -> None:
    _rewrite(Path(path), TOTAL_BEGIN, TOTAL_END, str(total), "updateMarkdownPackageTotal")
