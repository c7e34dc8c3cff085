"""Loguru sinks for langtutor."""

import sys

from loguru import logger

from .paths import LOG_FILE, ensure_state_dir


def setup_logging(verbose: bool = False) -> None:
    """Send debug output to the log file and warnings to stderr."""
    ensure_state_dir()
    logger.remove()
    logger.add(
        LOG_FILE,
        level="DEBUG",
        rotation="5 MB",
        retention=3,
        encoding="utf-8",
        format="[{time:YYYY-MM-DDTHH:mm:ss.SSS}] {level: <8} {name}:{function} | {message}",
    )
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<level>{message}</level>",
    )
