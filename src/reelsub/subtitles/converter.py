"""Caption export to subtitle files.

SRT, VTT and ASS go through pysubs2; TXT is one caption per line.
"""

from __future__ import annotations

from pathlib import Path

import pysubs2

from reelsub.core.models import Caption

FORMATS = ("vtt", "srt", "ass", "txt")


def _to_ssa(captions: list[Caption]) -> pysubs2.SSAFile:
    subs = pysubs2.SSAFile()
    for caption in captions:
        subs.events.append(
            pysubs2.SSAEvent(
                start=pysubs2.make_time(s=caption.start),
                end=pysubs2.make_time(s=caption.end),
                text=caption.text,
            )
        )
    return subs


def captions_to_string(captions: list[Caption], fmt: str = "vtt") -> str:
    """Render captions in a subtitle format.

    Raises:
        ValueError: If fmt is not one of FORMATS.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format: '{fmt}'. Use one of: {', '.join(FORMATS)}.")
    if fmt == "txt":
        return "\n".join(c.text for c in captions if c.text.strip())
    return _to_ssa(captions).to_string(fmt)


def save_captions(captions: list[Caption], path: Path, fmt: str = "vtt") -> Path:
    """Save captions to a subtitle file.

    Args:
        captions: Captions in list order.
        path: Output file path.
        fmt: Format — "srt", "vtt", "ass", or "txt".

    Returns:
        The path the file was written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(captions_to_string(captions, fmt), encoding="utf-8")
    return path
