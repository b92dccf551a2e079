"""Human-readable units for byte counts, uptimes, timestamps and percents.

Everything here is pure: no I/O, no state. Timestamps are rendered in the
local timezone of the process.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")
_KIB = 1024

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"


def format_bytes(num: int | float | None) -> str:
    """``1536 -> "1.5 KB"``; one decimal, trailing ``.0`` dropped."""
    if num is None:
        return NOT_AVAILABLE
    if num == 0:
        return "0 B"
    sign = "-" if num < 0 else ""
    size = float(abs(num))
    unit = 0
    while size >= _KIB and unit < len(_BYTE_UNITS) - 1:
        size /= _KIB
        unit += 1
    return f"{sign}{_trim(round(size, 1))} {_BYTE_UNITS[unit]}"


def format_uptime(seconds: int | None) -> str:
    """``90061 -> "1d 1h 1m"`` (seconds are truncated)."""
    if not seconds:
        return UNKNOWN
    days, hours, minutes = _split_uptime(seconds)
    return f"{days}d {hours}h {minutes}m"


def format_uptime_short(seconds: int | None) -> str:
    """Two most significant units only, as shown in the host list."""
    if not seconds:
        return UNKNOWN
    days, hours, minutes = _split_uptime(seconds)
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_time_label(ts: datetime) -> str:
    """Short axis label, e.g. ``"14:05:09"``."""
    return ts.astimezone().strftime("%H:%M:%S")


def format_timestamp(ts: datetime | None) -> str:
    if ts is None:
        return NOT_AVAILABLE
    return ts.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_percent(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.1f}%"


def format_count(value: int | None) -> str:
    """Thousands separators: ``1234567 -> "1,234,567"``."""
    if value is None:
        return NOT_AVAILABLE
    return f"{value:,}"


def format_load_average(load: Sequence[float] | None) -> str:
    if not load:
        return NOT_AVAILABLE
    return ", ".join(f"{v:.2f}" for v in load)


def format_hours(hours: int) -> str:
    return f"{hours} hour" if hours == 1 else f"{hours} hours"


def usage_level(percent: float) -> str:
    """Severity bucket for a usage bar: success < 50 <= warning < 80 <= error."""
    if percent < 50:
        return "success"
    if percent < 80:
        return "warning"
    return "error"


def clamp_percent(percent: float) -> float:
    return max(0.0, min(100.0, percent))


# ── internals ───────────────────────────────────────


def _split_uptime(seconds: int) -> tuple[int, int, int]:
    seconds = int(seconds)
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    return days, hours, minutes


def _trim(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return f"{value:.1f}"
