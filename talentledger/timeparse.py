"""
Time value normalization.

Work records carry talk/wait/break/meeting time either as a number of
minutes or as an "HH:MM:SS" string. Everything is reduced to minutes here;
values that cannot be read contribute zero rather than raising.
"""

import math
import re
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(part: str) -> int:
    m = _LEADING_INT.match(part)
    if not m:
        return 0
    return int(m.group(1))


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def normalize_to_minutes(value: Any) -> float:
    """
    Convert a time value to minutes, never below zero.

    Numbers are already minutes. Strings must have exactly three
    colon-separated fields (H:M:S); each field is clamped to >= 0 and
    seconds are rounded to the nearest minute. Anything else yields 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return 0
        return max(0, value)
    if isinstance(value, str):
        parts = value.split(":")
        if len(parts) == 3:
            hours = max(0, _leading_int(parts[0]))
            minutes = max(0, _leading_int(parts[1]))
            seconds = max(0, _leading_int(parts[2]))
            return hours * 60 + minutes + _round_half_up(seconds / 60)
    return 0


def normalize_to_hours(value: Any) -> float:
    return normalize_to_minutes(value) / 60


def format_minutes_as_time(minutes: float) -> str:
    """Render a minute count as HH:MM."""
    minutes = max(0, minutes)
    hours = int(minutes // 60)
    mins = _round_half_up(minutes % 60)
    if mins == 60:
        hours, mins = hours + 1, 0
    return f"{hours:02d}:{mins:02d}"
