"""Playback-to-caption synchronization.

Maps each playback position sample to the caption on screen at that instant.
Captions may overlap; the earliest caption in list order wins, so list order
is the tie-break key and must never be changed by sorting.
"""

from __future__ import annotations

from reelsub.core.errors import UnknownCaption
from reelsub.core.events import EventCallback, SessionEvent
from reelsub.core.models import Caption, Session


def find_active_caption(captions: list[Caption], position: float) -> Caption | None:
    """Return the first caption whose inclusive range contains position."""
    for caption in captions:
        if caption.contains(position):
            return caption
    return None


class CaptionSynchronizer:
    """Keeps a session's active caption in step with playback."""

    def __init__(self, session: Session, on_event: EventCallback | None = None) -> None:
        self.session = session
        self._on_event = on_event

    def _emit(self, kind: str, message: str, data: dict | None = None) -> None:
        if self._on_event:
            self._on_event(SessionEvent(kind=kind, message=message, data=data))

    def update(self, position: float) -> bool:
        """Consume one position sample.

        Returns:
            True if the list view should bring the new active caption into
            view, i.e. the active caption changed to a non-empty one.
        """
        session = self.session
        session.position = position

        active = find_active_caption(session.captions, position)
        active_id = active.id if active else None
        if active_id == session.active_caption_id:
            return False

        session.active_caption_id = active_id
        self._emit("active", "Active caption changed", {"id": active_id})
        if active_id is None:
            return False

        self._emit("scroll", "Bring caption into view", {"id": active_id})
        return True

    def seek(self, caption_id: str) -> float:
        """Jump playback to a caption's start and resume playing.

        Returns:
            The new playback position.

        Raises:
            UnknownCaption: If no caption has this id.
        """
        caption = self.session.caption(caption_id)
        if caption is None:
            raise UnknownCaption(caption_id)
        # The target may sit inside an earlier overlapping caption; that one wins
        self.update(caption.start)
        self.session.playing = True
        return caption.start
