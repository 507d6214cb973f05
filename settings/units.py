"""Size and duration strings used in environment config."""

import re
import time

_SIZE_UNITS = {"KB": 1024, "MB": 1024**2, "GB": 1024**3}
_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

_SIZE_RE = re.compile(r"^(\d+)(KB|MB|GB)$", re.IGNORECASE)
_DURATION_RE = re.compile(r"^(\d+)(s|m|h|d)$", re.IGNORECASE)

DEFAULT_SIZE = 100 * 1024**2
DEFAULT_DURATION = 24 * 3600


def parse_size(value: str) -> int:
    """Parse '100MB', '1GB' into bytes. Falls back to 100MB."""
    match = _SIZE_RE.match(value.strip())
    if not match:
        return DEFAULT_SIZE
    return int(match.group(1)) * _SIZE_UNITS[match.group(2).upper()]


def parse_duration(value: str) -> float:
    """Parse '30s', '1h', '7d' into seconds. Falls back to 24h."""
    match = _DURATION_RE.match(value.strip())
    if not match:
        return DEFAULT_DURATION
    return int(match.group(1)) * _DURATION_UNITS[match.group(2).lower()]


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value, i = float(size), 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 1):g} {units[i]}"


def format_age(timestamp_ms: int, now: float | None = None) -> str:
    """Age of a millisecond timestamp, e.g. '2d 3h'."""
    now_ms = (time.time() if now is None else now) * 1000
    minutes = max(int((now_ms - timestamp_ms) // 60000), 0)
    hours, days = minutes // 60, minutes // 1440

    if days > 0:
        return f"{days}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    return f"{minutes}m"
