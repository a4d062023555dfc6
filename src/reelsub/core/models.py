"""Shared data models for ReelSub."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Phase(str, Enum):
    """Coarse lifecycle stage of a session."""

    IDLE = "idle"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


@dataclass
class Cue:
    """A timed text segment as returned by the transcription service (no id yet)."""

    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass
class Caption:
    """One subtitle cue owned by a session."""

    id: str
    start: float  # seconds
    end: float  # seconds
    text: str

    def contains(self, position: float) -> bool:
        """Inclusive range check on both ends."""
        return self.start <= position <= self.end

    def to_dict(self) -> dict:
        return {"id": self.id, "start": self.start, "end": self.end, "text": self.text}


@dataclass
class MediaFile:
    """A media file accepted by media acquisition, not yet read into memory.

    owned is True when the file was written by ReelSub (e.g. an HTTP upload)
    and may be deleted once the session is done with it.
    """

    path: Path
    mime_type: str
    name: str = ""
    owned: bool = False

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if not self.name:
            self.name = self.path.name


@dataclass
class MediaHandle:
    """Locally resolvable reference to a loaded video, distinct from its bytes."""

    path: Path
    url: str
    mime_type: str
    owned: bool = False
    released: bool = False

    def release(self) -> None:
        """Release the backing resource. Safe to call twice."""
        if self.released:
            return
        if self.owned:
            self.path.unlink(missing_ok=True)
        self.released = True


@dataclass
class Notice:
    """Transient message with an absolute expiry on the monotonic clock."""

    message: str
    expires_at: float


@dataclass
class Session:
    """Root aggregate for one user run.

    Created once per run and replaced wholesale on reset.
    """

    phase: Phase = Phase.IDLE
    media: MediaHandle | None = None
    captions: list[Caption] = field(default_factory=list)
    position: float = 0.0
    playing: bool = False
    active_caption_id: str | None = None
    error: str | None = None

    def caption(self, caption_id: str) -> Caption | None:
        for caption in self.captions:
            if caption.id == caption_id:
                return caption
        return None
