"""Logging configuration."""

import logging

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
VERBOSE_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"


def setup_logging(level: str = "WARNING", verbose: bool = False) -> logging.Logger:
    """Attach a console handler to the payguard logger.

    Args:
        level: Level name used when not verbose
        verbose: Log everything at DEBUG with source locations

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("payguard")
    logger.setLevel(logging.DEBUG if verbose else level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt=VERBOSE_FORMAT if verbose else CONSOLE_FORMAT,
            datefmt="%H:%M:%S" if verbose else "%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
