"""Logging setup for the casegen command line."""
import logging
import sys


def setup_logging(level: int = logging.WARNING) -> None:
    """
    Configures the 'casegen' package logger to write to stderr.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.WARNING)
    """
    logger = logging.getLogger("casegen")
    logger.setLevel(level)

    # Repeated main() calls (tests, embedding) must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
