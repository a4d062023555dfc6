"""Unified LLM client via LiteLLM."""

from __future__ import annotations

from reelsub.core.config import TranscriptionConfig


def complete(
    messages: list[dict],
    config: TranscriptionConfig,
    **kwargs: object,
) -> str:
    """Send a chat completion request via LiteLLM.

    Args:
        messages: Chat messages in OpenAI format. User content may be a list
            of parts (text and inline media).
        config: Transcription configuration (model, endpoint, sampling).
        **kwargs: Additional kwargs passed to litellm.completion.

    Returns:
        The assistant's response text.
    """
    try:
        from litellm import completion
    except ImportError:
        raise ImportError("LiteLLM is not installed. Install with: pip install litellm")

    call_kwargs: dict = {
        "model": config.model,
        "messages": messages,
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }
    if config.api_base:
        call_kwargs["api_base"] = config.api_base
    call_kwargs.update(kwargs)

    response = completion(**call_kwargs)
    return response.choices[0].message.content
