"""
Logging setup for the SmartRecruit client.

Library modules only call logging.getLogger(__name__); scripts call
setup_logger() once at startup to attach handlers to the package logger.
"""
import logging
import os
from typing import Optional

from smartrecruit.config import get_settings


def setup_logger(name: str = "smartrecruit", level: Optional[str] = None) -> logging.Logger:
    """
    Set up the package logger.

    Args:
        name: Logger name
        level: Console level override (defaults to settings.log_level)

    Returns:
        Configured logger instance
    """
    settings = get_settings()

    # Create logs directory if it doesn't exist
    log_dir = os.path.dirname(settings.log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Scripts may call this more than once (e.g. --debug re-run)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    file_handler = logging.FileHandler(settings.log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
