"""Time formatting for caption ranges and the player clock."""

from __future__ import annotations


def format_short_time(seconds: float) -> str:
    """Format seconds as m:ss.s (e.g. 65.3 -> "1:05.3").

    Rounds to tenths before splitting minutes so 59.96 becomes "1:00.0"
    rather than "0:60.0". Negative values clamp to zero.
    """
    tenths = max(0, round(seconds * 10))
    minutes, rem = divmod(tenths, 600)
    return f"{minutes}:{rem // 10:02d}.{rem % 10}"
