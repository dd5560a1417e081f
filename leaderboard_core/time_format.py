"""Duration text codec shared by the ranking engine and its callers.

Durations travel as ``M:SS`` text at the UI/import boundary and as integer
seconds everywhere else. Parsing never raises: anything that does not match
the grammar degrades to ``0`` ("no result").
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^(\d{1,3}):(\d{2})$", re.ASCII)
_RAW_SECONDS_RE = re.compile(r"^\d+$", re.ASCII)


def is_valid_duration_text(text: Any) -> bool:
    """Return True if ``text`` is a well-formed ``M:SS`` duration.

    Empty or all-whitespace strings are valid and mean "no result".
    ``None`` and non-string values are invalid.
    """
    if not isinstance(text, str):
        return False
    stripped = text.strip()
    if not stripped:
        return True
    match = _DURATION_RE.match(stripped)
    if match is None:
        return False
    return int(match.group(2)) < 60


def parse_duration(text: Any) -> int:
    """Parse duration text to total seconds.

    Args:
        text: ``"M:SS"`` (1-3 minute digits, 2 second digits) or a bare
            non-negative integer string of raw seconds.

    Returns:
        Total seconds as int, or 0 if the text is empty or malformed.

    Examples:
        - "12:34" → 754
        - "120:30" → 7230
        - "300" → 300
        - "5:60" → 0
        - "-5:30" → 0
        - "" → 0
    """
    if not isinstance(text, str):
        return 0
    stripped = text.strip()
    if not stripped:
        return 0
    if ":" in stripped:
        if not is_valid_duration_text(stripped):
            logger.debug(f"Rejected duration text {text!r}")
            return 0
        minutes, seconds = stripped.split(":")
        return int(minutes) * 60 + int(seconds)
    if _RAW_SECONDS_RE.match(stripped):
        return int(stripped)
    return 0


def _whole_seconds(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value < 0:
        return None
    return int(value)


def format_duration(seconds: Any) -> str:
    """Format total seconds as ``M:SS``; 0, None, NaN and negatives give ""."""
    total = _whole_seconds(seconds)
    if not total:
        return ""
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def format_time_cap(seconds: Any) -> str:
    # Unlike results, a zero cap is still a cap and renders as "0:00".
    total = _whole_seconds(seconds)
    if total is None:
        return ""
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"
