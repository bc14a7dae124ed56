"""Core utilities for the path analyzer"""

from .account import AccountAccessError, AccountContext, AWSCredentials
from .config import (
    get_flow_cache_ttl,
    get_role_arn_pattern,
    parse_ttl,
    set_flow_cache_ttl,
    set_role_arn_pattern,
)
from .logging import get_logger, logger, setup_logging
from .renderer import ResultRenderer

__all__ = [
    "AccountAccessError",
    "AccountContext",
    "AWSCredentials",
    "get_flow_cache_ttl",
    "get_role_arn_pattern",
    "parse_ttl",
    "set_flow_cache_ttl",
    "set_role_arn_pattern",
    "get_logger",
    "logger",
    "setup_logging",
    "ResultRenderer",
]
