"""Prompt templates and response parsing for bilingual Reels transcription."""

from __future__ import annotations

import json
import re

from pydantic import BaseModel, ValidationError, model_validator

from reelsub.core.models import Cue

TRANSCRIPTION_SYSTEM = """\
You are a professional subtitle editor for Instagram Reels. \
Your task is to transcribe the video, which may contain speech in {languages}.

Rules:
- Language: transcribe everything accurately in the language it is spoken in. \
Do NOT translate.
- Line structure: exactly ONE line per subtitle. No line breaks.
- Character count: target {target_min}-{target_max} characters per subtitle. \
Minimum {min_chars}, maximum {max_chars} characters.
- Timing: minimum duration {min_dur} seconds, maximum duration {max_dur} seconds.
- Linguistic logic: do not end a subtitle with a preposition \
(RU: в, на, с, у; FR: à, de, en, avec) or an article \
(FR: le, la, les, un, une, des) if possible.
- Segmentation: split by logical pauses, punctuation, or when character limits are reached.
- Return ONLY a JSON object in the format below, with times in seconds.

Output format:
{{
  "subtitles": [
    {{"start": 0.0, "end": 1.5, "text": "Привет всем друзьям"}},
    {{"start": 1.5, "end": 3.2, "text": "Bonjour tout le monde"}}
  ]
}}
"""

TRANSCRIPTION_USER = """\
Transcribe this video into one-line subtitles ({languages}).
"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class CuePayload(BaseModel):
    start: float
    end: float
    text: str

    @model_validator(mode="after")
    def _check_range(self) -> CuePayload:
        if self.start < 0 or self.start >= self.end:
            raise ValueError(f"invalid cue range {self.start}-{self.end}")
        return self


class TranscriptionPayload(BaseModel):
    subtitles: list[CuePayload]


def format_system_prompt(languages: list[str]) -> str:
    """Fill the system prompt with language names and segmentation limits."""
    return TRANSCRIPTION_SYSTEM.format(
        languages=" and ".join(languages),
        target_min=18,
        target_max=26,
        min_chars=5,
        max_chars=30,
        min_dur=1.0,
        max_dur=2.2,
    )


def build_video_message(video_base64: str, mime_type: str, languages: list[str]) -> dict:
    """Build the user message carrying the inline video as a data URL."""
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": TRANSCRIPTION_USER.format(languages="/".join(languages))},
            {
                "type": "image_url",
                "image_url": {"url": f"data:{mime_type};base64,{video_base64}"},
            },
        ],
    }


def parse_subtitles_response(response: str) -> list[Cue]:
    """Parse the model's JSON reply into cues, in the order returned.

    Tolerates a markdown code fence around the JSON.

    Raises:
        ValueError: If the reply is not valid JSON, does not match the
            expected shape, or contains a cue with start < 0 or start >= end.
    """
    text = (response or "").strip()
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Response is not JSON: {e}") from e

    # Some models drop the wrapper object and return the bare list
    if isinstance(data, list):
        data = {"subtitles": data}

    try:
        payload = TranscriptionPayload.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Unexpected response shape: {e}") from e

    return [Cue(start=c.start, end=c.end, text=c.text) for c in payload.subtitles]
