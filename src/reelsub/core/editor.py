"""In-place caption text editing."""

from __future__ import annotations

from reelsub.core.errors import UnknownCaption
from reelsub.core.events import EventCallback, SessionEvent
from reelsub.core.models import Caption, Session


class CaptionEditor:
    """Toggles a caption into edit mode and commits new text.

    Commits overwrite unconditionally: no validation, no undo, empty text is
    accepted. The editing id is UI state only; the data model does not stop
    two captions from being committed back to back.
    """

    def __init__(self, session: Session, on_event: EventCallback | None = None) -> None:
        self.session = session
        self.editing_id: str | None = None
        self._on_event = on_event

    def _lookup(self, caption_id: str) -> Caption:
        caption = self.session.caption(caption_id)
        if caption is None:
            raise UnknownCaption(caption_id)
        return caption

    def begin_edit(self, caption_id: str) -> str:
        """Enter edit mode; returns the text to prefill the input with."""
        caption = self._lookup(caption_id)
        self.editing_id = caption_id
        return caption.text

    def cancel_edit(self) -> None:
        self.editing_id = None

    def commit(self, caption_id: str, text: str) -> Caption:
        """Overwrite a caption's text (on blur or Enter) and leave edit mode."""
        caption = self._lookup(caption_id)
        caption.text = text
        if self.editing_id == caption_id:
            self.editing_id = None
        if self._on_event:
            self._on_event(SessionEvent(kind="edit", message="Caption updated", data={"id": caption_id}))
        return caption
