"""Session state controller — owns the phase and every legal transition.

    IDLE -> UPLOADING -> PROCESSING -> READY
                             |
                             +-----> ERROR
    READY / ERROR -> (reset) -> IDLE

Reset does not roll fields back: it releases the media handle and replaces
the whole Session with a fresh one.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from reelsub.core.config import ReelsubConfig
from reelsub.core.editor import CaptionEditor
from reelsub.core.errors import (
    InvalidTransition,
    LocalReadFailure,
    ReelsubError,
    TranscriptionFailure,
)
from reelsub.core.events import EventCallback, SessionEvent
from reelsub.core.media import create_handle, encode_media, read_media_bytes
from reelsub.core.models import Caption, Cue, MediaFile, Notice, Phase, Session
from reelsub.core.notifier import ClipboardWriter, Notifier, Scheduler
from reelsub.core.sync import CaptionSynchronizer
from reelsub.utils.console import console

Transcriber = Callable[[str, str], list[Cue]]
"""(base64 media, mime type) -> cues in transcription order."""

_TRANSITIONS: dict[Phase, set[Phase]] = {
    Phase.IDLE: {Phase.UPLOADING},
    Phase.UPLOADING: {Phase.PROCESSING},
    Phase.PROCESSING: {Phase.READY, Phase.ERROR},
    Phase.READY: {Phase.IDLE},
    Phase.ERROR: {Phase.IDLE},
}


def _default_transcriber(config: ReelsubConfig) -> Transcriber:
    from reelsub.transcriber.gemini import transcribe

    def run(video_base64: str, mime_type: str) -> list[Cue]:
        return transcribe(video_base64, mime_type, config.transcription)

    return run


class SessionController:
    """Mediates all session transitions and owns the media handle."""

    def __init__(
        self,
        config: ReelsubConfig | None = None,
        transcriber: Transcriber | None = None,
        clipboard: ClipboardWriter | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_event: EventCallback | None = None,
    ) -> None:
        self.config = config or ReelsubConfig()
        self._transcriber = transcriber or _default_transcriber(self.config)
        self._on_event = on_event
        self.notifier = Notifier(
            duration=self.config.notifier.duration,
            message=self.config.notifier.message,
            clipboard=clipboard,
            scheduler=scheduler,
            clock=clock,
            on_event=on_event,
        )
        self._new_session()

    def _new_session(self) -> None:
        self.session = Session()
        self._token = uuid.uuid4().hex[:8]
        self.synchronizer = CaptionSynchronizer(self.session, on_event=self._on_event)
        self.editor = CaptionEditor(self.session, on_event=self._on_event)

    def _emit(self, kind: str, message: str, data: dict | None = None) -> None:
        if self._on_event:
            self._on_event(SessionEvent(kind=kind, message=message, data=data))

    @property
    def phase(self) -> Phase:
        return self.session.phase

    def _advance(self, phase: Phase) -> None:
        current = self.session.phase
        if phase not in _TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot go from {current.value} to {phase.value}")
        self.session.phase = phase
        self._emit("phase", f"Phase: {phase.value}", {"phase": phase.value})

    def _require(self, *phases: Phase) -> None:
        if self.session.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidTransition(
                f"Operation needs phase {allowed}, session is {self.session.phase.value}"
            )

    # Transitions

    def begin(self, media: MediaFile) -> str | None:
        """Accept a file and prepare it for transcription.

        Moves IDLE -> UPLOADING (handle built) -> PROCESSING (bytes read and
        base64-encoded). A local read failure, or a file over the inline size
        limit, moves on to ERROR.

        Returns:
            The base64 payload, or None if the read failed.

        Raises:
            InvalidTransition: If the session is not IDLE. A new file is only
                accepted after an explicit reset.
        """
        if self.session.phase is not Phase.IDLE:
            raise InvalidTransition(
                f"A {self.session.phase.value} session must be reset before accepting a new file"
            )
        self._advance(Phase.UPLOADING)
        self.session.media = create_handle(media)

        self._advance(Phase.PROCESSING)
        limit = self.config.transcription.max_file_mb * 1024 * 1024
        try:
            data = read_media_bytes(media, max_bytes=limit)
        except (LocalReadFailure, TranscriptionFailure) as e:
            self.fail(e)
            return None
        return encode_media(data)

    def complete(self, cues: list[Cue]) -> list[Caption]:
        """Store the transcription result and move PROCESSING -> READY.

        Each cue gets an id unique within the session. A cue breaking
        0 <= start < end fails the whole result; nothing is kept.
        """
        self._require(Phase.PROCESSING)
        for cue in cues:
            if not 0 <= cue.start < cue.end:
                self.fail(TranscriptionFailure(f"Invalid cue range {cue.start}-{cue.end}"))
                return []

        self.session.captions = [
            Caption(id=f"sub-{i}-{self._token}", start=cue.start, end=cue.end, text=cue.text)
            for i, cue in enumerate(cues)
        ]
        self._advance(Phase.READY)
        return self.session.captions

    def fail(self, error: ReelsubError) -> None:
        """Move PROCESSING -> ERROR with the fixed message for the failure kind."""
        self._require(Phase.PROCESSING)
        console.print(f"[red]{type(error).__name__}:[/red] {error}")
        if isinstance(error, LocalReadFailure):
            self.session.error = LocalReadFailure.user_message
        else:
            self.session.error = TranscriptionFailure.user_message
        self.session.captions = []
        self._advance(Phase.ERROR)

    def process(self, media: MediaFile) -> Session:
        """Run the whole flow for one file: begin, transcribe, complete or fail."""
        payload = self.begin(media)
        if payload is None:
            return self.session
        try:
            cues = self.transcribe(payload, media.mime_type)
        except TranscriptionFailure as e:
            self.fail(e)
        else:
            self.complete(cues)
        return self.session

    def transcribe(self, payload: str, mime_type: str) -> list[Cue]:
        """Call the transcriber without touching session state.

        Callers may run this without holding the lock that serialises the
        other operations, then hand the result to complete() or fail().

        Raises:
            TranscriptionFailure: For any failure of the transcriber.
        """
        try:
            return self._transcriber(payload, mime_type)
        except TranscriptionFailure:
            raise
        except Exception as e:
            raise TranscriptionFailure(str(e)) from e

    def reset(self) -> None:
        """Discard the session (READY or ERROR only) and start a fresh IDLE one."""
        self._require(Phase.READY, Phase.ERROR)
        if self.session.media is not None:
            self.session.media.release()
        self.notifier.dismiss()
        self._new_session()
        self._emit("reset", "Session reset", {"phase": Phase.IDLE.value})

    # Ready-phase operations

    def update_position(self, position: float) -> bool:
        """Feed one playback position sample; True means scroll into view."""
        self._require(Phase.READY)
        return self.synchronizer.update(position)

    def seek(self, caption_id: str) -> float:
        self._require(Phase.READY)
        return self.synchronizer.seek(caption_id)

    def commit_edit(self, caption_id: str, text: str) -> Caption:
        self._require(Phase.READY)
        return self.editor.commit(caption_id, text)

    def copy(self, text: str) -> Notice:
        return self.notifier.copy(text)

    def snapshot(self) -> dict:
        """Read-only view of everything the presentation layer renders."""
        session = self.session
        notice = self.notifier.notice
        return {
            "phase": session.phase.value,
            "media_url": session.media.url if session.media else None,
            "captions": [c.to_dict() for c in session.captions],
            "position": session.position,
            "playing": session.playing,
            "active_caption_id": session.active_caption_id,
            "editing_id": self.editor.editing_id,
            "error": session.error,
            "notice": notice.message if notice else None,
        }
