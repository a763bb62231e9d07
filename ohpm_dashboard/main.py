"""ohpm-dashboard command line entry point."""
import asyncio
import sys

import click
from loguru import logger

from .config import get_settings
from .services.dashboard import build_dashboard
from .services.readme_patcher import ReadmePatchError, update_markdown_table, update_package_total
from .services.sorter import SORT_FIELDS, SORT_MODES


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@click.command()
@click.version_option(version="0.1.0", prog_name="ohpm-dashboard")
@click.option("--github-token", "--githubToken", "github_token", default=None, help="GitHub token with repo permissions (defaults to $GITHUB_TOKEN).")
@click.option("--filename", default="README.md", show_default=True, help="Markdown file to patch.")
@click.option("--publisher-list", "--publisherList", "publisher_list", default="", help="Publisher IDs, comma separated.")
@click.option("--package-list", "--packageList", "package_list", default="", help="Package names, comma separated, e.g. @candies/extended_text,@bb/xx")
@click.option("--sort-field", "--sortField", "sort_field", default="name", show_default=True, help=" | ".join(SORT_FIELDS))
@click.option("--sort-mode", "--sortMode", "sort_mode", default="asc", show_default=True, help=" | ".join(SORT_MODES))
def cli(github_token, filename, publisher_list, package_list, sort_field, sort_mode):
    """Render an OHPM package dashboard table into a markdown file."""
    settings = get_settings()
    if github_token:
        settings = settings.model_copy(update={"github_token": github_token})

    configure_logging(settings.log_level)

    result = asyncio.run(
        build_dashboard(publisher_list, package_list, sort_field, sort_mode, settings=settings)
    )
    try:
        update_markdown_table(filename, result.markdown, settings=settings)
        update_package_total(filename, result.total)
    except ReadmePatchError as exc:
        logger.error(f"[README] {exc}")
        raise click.ClickException(str(exc)) from exc


if __name__ == "__main__":
    cli()
