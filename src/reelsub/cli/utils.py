"""Shared CLI utilities."""

from __future__ import annotations

from pathlib import Path

from reelsub.core.media import guess_mime_type

_WILDCARDS = "*?["


def is_video_path(path: Path) -> bool:
    """Whether the extension maps to a video MIME type."""
    return guess_mime_type(path).startswith("video/")


def _read_list(list_file: Path) -> list[str]:
    """Video paths from a list file: one per line, blanks and # comments skipped."""
    entries = []
    for line in list_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            entries.append(line)
    return entries


def expand_inputs(inputs: list[str]) -> list[str]:
    """Turn CLI arguments into the video files to caption, in argument order.

    - ``*.mp4`` style patterns expand to matching video files only, so ``*``
      over a folder skips subtitles and notes next to the clips.
    - An existing ``.txt`` file is a list of paths.
    - Anything else is passed through untouched, so a missing or unreadable
      file still reaches the session and fails there with its own message.

    Duplicates are dropped, keeping the first occurrence.
    """
    expanded: list[str] = []
    for inp in inputs:
        path = Path(inp)

        if path.suffix == ".txt" and path.is_file():
            expanded.extend(_read_list(path))
        elif any(c in inp for c in _WILDCARDS):
            matches = [m for m in sorted(Path(".").glob(inp)) if m.is_file() and is_video_path(m)]
            if matches:
                expanded.extend(str(m) for m in matches)
            else:
                # Keep the literal so the user sees which pattern failed
                expanded.append(inp)
        else:
            expanded.append(inp)

    return list(dict.fromkeys(expanded))
