import asyncio
import logging
from typing import Optional

import typer

from wiki_walk.config import WalkConfig
from wiki_walk.exceptions import WikiWalkException
from wiki_walk.logging_config import LOG_LEVELS, parse_level, setup_logging
from wiki_walk.walker import walk


app = typer.Typer(add_completion=False)


def _check_log_level(value: str) -> str:
    try:
        parse_level(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    return value.upper()


@app.command()
def main(
    start: str = typer.Argument(..., help="Title of the page to start from."),
    target: str = typer.Argument(..., help="Title of the page to reach."),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Wikipedia language edition to walk.",
    ),
    max_concurrency: Optional[int] = typer.Option(
        None,
        "--max-concurrency",
        "-c",
        min=1,
        help="Maximum number of concurrent API requests.",
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        "-d",
        min=0,
        help="Give up on paths longer than this many links.",
    ),
    retries: Optional[int] = typer.Option(
        None,
        "--retries",
        "-r",
        min=1,
        help="Attempts per request before a page is skipped.",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        callback=_check_log_level,
        help=f"Log level ({', '.join(LOG_LEVELS)}).",
    ),
    plain_logs: bool = typer.Option(False, "--plain-logs", help="Disable Rich log formatting even on a terminal."),
):
    """
    Print a shortest link path between two Wikipedia pages.
    """
    setup_logging(level=log_level, use_rich=False if plain_logs else None)
    logger = logging.getLogger(__name__)

    config = WalkConfig.from_env()
    overrides = {
        "language": language,
        "max_concurrent_requests": max_concurrency,
        "max_depth": max_depth,
        "max_retries": retries,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    try:
        result = asyncio.run(walk(start, target, config))
    except WikiWalkException as e:
        logger.error(e.message)
        raise typer.Exit(code=1)

    if not result.found:
        logger.error(f"no path exists between {start} and {target}")
        raise typer.Exit(code=1)

    typer.echo(str(result))


if __name__ == "__main__":
    app()
