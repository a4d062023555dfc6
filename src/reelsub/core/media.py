"""Media acquisition — accepting files, reading them and building local handles."""

from __future__ import annotations

import base64
import mimetypes
import uuid
from pathlib import Path
from typing import BinaryIO

from reelsub.core.errors import LocalReadFailure, TranscriptionFailure
from reelsub.core.models import MediaFile, MediaHandle

# File picker restricts to these; drag-and-drop accepts any video/*
PICKER_MIME_TYPES = ("video/mp4", "video/quicktime")

_MIME_MAP = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
    ".avi": "video/x-msvideo",
}

_CHUNK = 1 << 20  # 1 MB


def guess_mime_type(path: Path) -> str:
    """Guess a video MIME type from the file extension."""
    mime = _MIME_MAP.get(Path(path).suffix.lower())
    if mime is None:
        mime, _ = mimetypes.guess_type(Path(path).name)
    return mime or "application/octet-stream"


def _extension_for(mime_type: str) -> str:
    for ext, mime in _MIME_MAP.items():
        if mime == mime_type:
            return ext
    return mimetypes.guess_extension(mime_type) or ""


def normalize_mime_type(mime_type: str) -> str:
    """Strip parameters and case from a MIME type ("Video/MP4; codecs=x" -> "video/mp4")."""
    return mime_type.split(";", 1)[0].strip().lower()


def is_acceptable(mime_type: str, source: str = "picker") -> bool:
    """Whether media acquisition accepts a file of this type.

    Args:
        mime_type: The file's MIME type.
        source: "picker" (file dialog) or "drop" (drag-and-drop).
    """
    mime_type = normalize_mime_type(mime_type)
    if source == "drop":
        return mime_type.startswith("video/")
    return mime_type in PICKER_MIME_TYPES


def local_file(path: Path, mime_type: str | None = None) -> MediaFile:
    """Accept a file that already exists on disk (not owned by ReelSub)."""
    path = Path(path)
    return MediaFile(path=path, mime_type=mime_type or guess_mime_type(path))


def receive_upload(
    stream: BinaryIO,
    length: int,
    mime_type: str,
    media_dir: Path,
    name: str = "",
) -> MediaFile:
    """Stream an uploaded body of known length into a private file.

    Raises:
        LocalReadFailure: If the body is truncated or cannot be stored.
    """
    mime_type = normalize_mime_type(mime_type)
    stored = Path(media_dir) / f"{uuid.uuid4().hex}{_extension_for(mime_type)}"
    try:
        stored.parent.mkdir(parents=True, exist_ok=True)
        remaining = length
        with open(stored, "wb") as f:
            while remaining > 0:
                chunk = stream.read(min(remaining, _CHUNK))
                if not chunk:
                    raise LocalReadFailure(f"Upload truncated: {remaining} bytes missing")
                f.write(chunk)
                remaining -= len(chunk)
    except OSError as e:
        stored.unlink(missing_ok=True)
        raise LocalReadFailure(f"Cannot store upload: {e}") from e
    except LocalReadFailure:
        stored.unlink(missing_ok=True)
        raise
    return MediaFile(path=stored, mime_type=mime_type, name=name or stored.name, owned=True)


def create_handle(media: MediaFile) -> MediaHandle:
    """Build the playable handle for a media file.

    Uploaded files are served by the player under /media/<name>; files the
    user pointed at on disk are referenced by file URI.
    """
    path = media.path.resolve()
    url = f"/media/{path.name}" if media.owned else path.as_uri()
    return MediaHandle(path=path, url=url, mime_type=media.mime_type, owned=media.owned)


def read_media_bytes(media: MediaFile, max_bytes: int | None = None) -> bytes:
    """Load the file's bytes into memory.

    Args:
        media: The file to read.
        max_bytes: Refuse files larger than this before reading them.

    Raises:
        LocalReadFailure: If the file is missing or unreadable.
        TranscriptionFailure: If the file exceeds max_bytes.
    """
    try:
        size = media.path.stat().st_size
        if max_bytes is not None and size > max_bytes:
            raise TranscriptionFailure(
                f"Video is {size / (1024 * 1024):.1f} MB, exceeding the "
                f"{max_bytes // (1024 * 1024)} MB inline limit."
            )
        return media.path.read_bytes()
    except OSError as e:
        raise LocalReadFailure(f"Cannot read {media.path}: {e}") from e


def encode_media(data: bytes) -> str:
    """Base64-encode media bytes for transmission."""
    return base64.b64encode(data).decode("ascii")
