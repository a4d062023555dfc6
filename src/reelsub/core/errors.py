"""Error types raised across ReelSub.

Only two failures ever reach the user: the file could not be read locally,
or the transcription service did not return a usable result. Each maps to a
fixed message shown in the error view.
"""

from __future__ import annotations


class ReelsubError(Exception):
    """Base class for ReelSub errors."""


class LocalReadFailure(ReelsubError):
    """The selected file could not be loaded into memory."""

    user_message = "Failed to read the video file."


class TranscriptionFailure(ReelsubError):
    """The transcription service did not return a usable caption list."""

    user_message = (
        "AI processing failed. Please try again with a shorter video or check your API key."
    )


class InvalidTransition(ReelsubError):
    """An operation was requested in a phase that does not allow it."""


class UnknownCaption(ReelsubError, KeyError):
    """No caption with the given id exists in the session."""
