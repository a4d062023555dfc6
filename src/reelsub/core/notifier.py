"""Clipboard copy with a transient, self-dismissing notice.

Only one notice exists at a time. Showing a new one cancels the pending
expiry of the previous one, so an old timer can never clear a newer notice.
Reads additionally compare the deadline against the monotonic clock, which
keeps the notice absent from the deadline on even if the timer runs late.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Protocol

from reelsub.core.events import EventCallback, SessionEvent
from reelsub.core.models import Notice
from reelsub.utils.console import console

ClipboardWriter = Callable[[str], None]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    """Runs delayed callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Notifier:
    """Copies text and shows a notice for a fixed duration."""

    def __init__(
        self,
        duration: float = 2.0,
        message: str = "Copied!",
        clipboard: ClipboardWriter | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_event: EventCallback | None = None,
    ) -> None:
        self.duration = duration
        self.message = message
        self._clipboard = clipboard
        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock
        self._on_event = on_event
        self._lock = threading.Lock()
        self._notice: Notice | None = None
        self._handle: Cancellable | None = None

    @property
    def notice(self) -> Notice | None:
        """The live notice, or None once its deadline has passed."""
        with self._lock:
            if self._notice is not None and self._clock() >= self._notice.expires_at:
                self._notice = None
            return self._notice

    def copy(self, text: str) -> Notice:
        """Copy text to the clipboard (best-effort) and show the copy notice."""
        if self._clipboard is not None:
            try:
                self._clipboard(text)
            except Exception as e:
                console.print(f"[yellow]Clipboard write failed:[/yellow] {e}")
        return self.show(self.message)

    def show(self, message: str) -> Notice:
        """Show a notice, superseding any current one and restarting the timer."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            notice = Notice(message=message, expires_at=self._clock() + self.duration)
            self._notice = notice
            self._handle = self._scheduler.call_later(self.duration, lambda: self._expire(notice))
        if self._on_event:
            self._on_event(SessionEvent(kind="notice", message=message))
        return notice

    def dismiss(self) -> None:
        """Clear the notice now and cancel its pending expiry."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._handle = None
            self._notice = None

    def _expire(self, notice: Notice) -> None:
        with self._lock:
            # A newer notice owns the slot; leave it alone
            if self._notice is notice:
                self._notice = None
                self._handle = None
