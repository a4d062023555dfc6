"""Display-only caption length hints for one-line Reels subtitles."""

from __future__ import annotations

GOOD_MIN_CHARS = 18
GOOD_MAX_CHARS = 26
HARD_MAX_CHARS = 30


def length_hint(text: str) -> str:
    """Classify caption length for the list badge.

    Returns "good" for 18-26 characters, "long" above 30, "warn" otherwise.
    Never used to reject text.
    """
    n = len(text)
    if n > HARD_MAX_CHARS:
        return "long"
    if GOOD_MIN_CHARS <= n <= GOOD_MAX_CHARS:
        return "good"
    return "warn"
