"""
Logging for the wiki-walk command line.

The path is the only thing written to stdout; every log record goes to stderr
so the output can be piped. Rich formatting is used when stderr is a terminal.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Level each HTTP-stack logger is held at unless the walk itself is at DEBUG
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "backoff": logging.ERROR,
}


def parse_level(name: str) -> int:
    """Numeric level for a name in LOG_LEVELS, case-insensitive."""
    if name.upper() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{name}', expected one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, name.upper())


def _rich_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(file=sys.stderr),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        log_time_format="[%H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _plain_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    return handler


def setup_logging(level: str = "INFO", use_rich: Optional[bool] = None) -> None:
    """
    Route all logging to stderr for one CLI run.

    Args:
        level: One of LOG_LEVELS.
        use_rich: Force Rich formatting on or off. None picks Rich only when
            stderr is attached to a terminal.
    """
    numeric_level = parse_level(level)
    if use_rich is None:
        use_rich = sys.stderr.isatty()

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(_rich_handler() if use_rich else _plain_handler())
    root_logger.setLevel(numeric_level)

    for name, quiet_level in QUIET_LOGGERS.items():
        # At DEBUG the individual API requests are part of what was asked for
        logging.getLogger(name).setLevel(logging.INFO if numeric_level == logging.DEBUG else quiet_level)
