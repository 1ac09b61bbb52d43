"""Logging setup for the workflow engine and its scripts.

Engine modules log through logging.getLogger(__name__) under the
"lifecycle" namespace; this module only decides levels and output.
"""

import logging
import sys

from lifecycle.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str | None) -> int:
    settings = get_settings()
    name = level or settings.log_level
    if name:
        resolved = logging.getLevelName(name.upper())
        if isinstance(resolved, int):
            return resolved
    return logging.DEBUG if settings.debug else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """Send log records to stdout.

    The level is, in order of precedence: the level argument,
    settings.log_level, DEBUG when settings.debug, otherwise INFO. SQL
    statement logging stays at WARNING unless settings.database_echo is set.
    """
    logging.basicConfig(
        level=_resolve_level(level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not get_settings().database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for name (usually the caller's __name__)."""
    return logging.getLogger(name)
