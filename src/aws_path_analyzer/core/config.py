"""Analyzer configuration stored as a small JSON file"""

import json
import re
from pathlib import Path
from typing import Any, Optional

from .logging import get_logger

CONFIG_DIR = Path.home() / ".cache" / "aws-path-analyzer"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_FLOW_CACHE_TTL = 300  # 5 minutes
DEFAULT_ROLE_ARN_PATTERN = (
    "arn:aws:iam::{account_id}:role/ReachabilityAnalyzerCrossAccountRole"
)

log = get_logger("config")


def parse_ttl(value: str) -> int:
    """Parse TTL string like '90s', '15m', '1h', '2d' to seconds"""
    match = re.match(r"^(\d+)([smhd]?)$", value.strip().lower())
    if not match:
        raise ValueError(
            f"Invalid TTL format: {value}. Use number with optional s/m/h/d suffix"
        )
    num = int(match.group(1))
    unit = match.group(2) or "m"
    multipliers = {"s": 1, "m": 60, "h": 3600, "d": 86400}
    return num * multipliers[unit]


def _load_config() -> dict:
    if not CONFIG_FILE.exists():
        return {}
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (OSError, ValueError) as e:
        log.debug("Ignoring unreadable config %s: %s", CONFIG_FILE, e)
        return {}


def _update_config(key: str, value: Any) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    config = _load_config()
    config[key] = value
    CONFIG_FILE.write_text(json.dumps(config))


def get_flow_cache_ttl() -> int:
    """Get flow simulation cache TTL in seconds from config or use default"""
    ttl = _load_config().get("flow_cache_ttl", DEFAULT_FLOW_CACHE_TTL)
    if not isinstance(ttl, int) or ttl <= 0:
        return DEFAULT_FLOW_CACHE_TTL
    return ttl


def set_flow_cache_ttl(ttl_seconds: int) -> None:
    """Set flow simulation cache TTL in config"""
    if ttl_seconds <= 0:
        raise ValueError(f"TTL must be positive, got {ttl_seconds}")
    _update_config("flow_cache_ttl", ttl_seconds)


def get_role_arn_pattern(override: Optional[str] = None) -> str:
    """Cross-account role ARN pattern; must contain an {account_id} placeholder"""
    if override:
        return override
    return _load_config().get("role_arn_pattern") or DEFAULT_ROLE_ARN_PATTERN


def set_role_arn_pattern(pattern: str) -> None:
    if "{account_id}" not in pattern:
        raise ValueError("Role ARN pattern must contain '{account_id}'")
    _update_config("role_arn_pattern", pattern)
