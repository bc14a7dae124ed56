"""Logging configuration for the path analyzer."""

import logging
import sys
from typing import Optional

# Package logger
logger = logging.getLogger("aws_path_analyzer")


AWS_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(
    debug: bool = False,
    log_file: Optional[str] = None,
    quiet_aws: bool = True,
) -> logging.Logger:
    """Configure logging for the analyzer.

    Args:
        debug: Enable debug level logging (hop-by-hop traversal decisions)
        log_file: Optional file path for log output
        quiet_aws: Keep boto3/botocore/urllib3 at WARNING even in debug mode

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    logger.handlers.clear()

    if quiet_aws:
        for name in AWS_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Console handler (only warnings+ unless debug)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if debug else logging.WARNING)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for an engine component.

    Args:
        name: Component name (e.g., 'traverser', 'flowsim')

    Returns:
        Child logger instance
    """
    return logger.getChild(name)
