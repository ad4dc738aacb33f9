"""
Logging setup for the Simplerity CLI.
"""

import logging

LOGGER_NAME = "simplerity"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    Setup logging for the CLI.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger
