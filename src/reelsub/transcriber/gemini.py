"""Bilingual video transcription via a multimodal model (Gemini by default).

The whole video is sent inline, base64-encoded, in a single request. The
model does the segmentation; this module only builds the request and turns
the JSON reply into cues. Every failure, whatever its cause, surfaces as
TranscriptionFailure.
"""

from __future__ import annotations

import base64
import binascii

from reelsub.core.config import TranscriptionConfig
from reelsub.core.errors import TranscriptionFailure
from reelsub.core.languages import language_name
from reelsub.core.models import Cue
from reelsub.llm.client import complete
from reelsub.llm.prompts import (
    build_video_message,
    format_system_prompt,
    parse_subtitles_response,
)
from reelsub.utils.console import console


def _decoded_size(video_base64: str) -> int:
    try:
        return len(base64.b64decode(video_base64, validate=True))
    except (binascii.Error, ValueError) as e:
        raise TranscriptionFailure(f"Media payload is not valid base64: {e}") from e


def transcribe(video_base64: str, mime_type: str, config: TranscriptionConfig) -> list[Cue]:
    """Transcribe a video into one-line subtitle cues.

    Args:
        video_base64: Base64-encoded media bytes.
        mime_type: Media MIME type (e.g. video/mp4).
        config: Transcription configuration with a LiteLLM model string.

    Returns:
        Cues in the order the model returned them.

    Raises:
        TranscriptionFailure: On oversize input, provider/network errors,
            or a reply that cannot be parsed into valid cues.
    """
    size = _decoded_size(video_base64)
    limit = config.max_file_mb * 1024 * 1024
    if size > limit:
        raise TranscriptionFailure(
            f"Video is {size / (1024 * 1024):.1f} MB, exceeding the "
            f"{config.max_file_mb} MB inline limit."
        )

    languages = [language_name(code) for code in config.languages]
    messages = [
        {"role": "system", "content": format_system_prompt(languages)},
        build_video_message(video_base64, mime_type, languages),
    ]

    console.print(f"[bold]Transcribing via API:[/bold] {config.model}")
    try:
        import litellm

        # Drop params a provider does not support instead of failing the call
        litellm.drop_params = True
        response = complete(messages, config, response_format={"type": "json_object"})
    except Exception as e:
        raise TranscriptionFailure(f"Transcription request failed: {e}") from e

    try:
        cues = parse_subtitles_response(response)
    except ValueError as e:
        raise TranscriptionFailure(str(e)) from e

    console.print(f"[green]Transcription complete:[/green] {len(cues)} captions")
    return cues
