"""Session event system for pushing state changes to views.

The controller and its collaborators emit events through a single callback.
Views (the web player, CLI progress output) register a callback to react
without the core knowing how they render.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class SessionEvent:
    """A change emitted by the session core.

    Attributes:
        kind: Event kind (phase, active, scroll, edit, notice, reset).
        message: Human-readable status message.
        data: Optional payload (e.g. phase name, caption id).
    """

    kind: str
    message: str
    data: dict | None = field(default=None)


EventCallback = Callable[[SessionEvent], None]
