"""Languages the transcription prompt can name.

The model itself is multilingual; this table only maps the configured codes
to the names written into the prompt and validates CLI input.
"""

from __future__ import annotations

# fmt: off
PROMPT_LANGUAGES: dict[str, str] = {
    "ru": "Russian",     "fr": "French",      "en": "English",
    "de": "German",      "es": "Spanish",     "it": "Italian",
    "pt": "Portuguese",  "uk": "Ukrainian",   "pl": "Polish",
    "nl": "Dutch",       "tr": "Turkish",     "ar": "Arabic",
    "ja": "Japanese",    "ko": "Korean",      "zh": "Chinese",
}
# fmt: on


def language_name(code: str) -> str:
    """Get the language name for a code, or the code itself if unknown."""
    return PROMPT_LANGUAGES.get(code, code)


def validate_language(code: str) -> str:
    """Validate a language code and return it, raising ValueError if invalid."""
    if code not in PROMPT_LANGUAGES:
        raise ValueError(
            f"Unsupported language: '{code}'. "
            f"Supported: {', '.join(sorted(PROMPT_LANGUAGES))}."
        )
    return code
