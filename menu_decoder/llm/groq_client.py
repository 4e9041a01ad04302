from __future__ import annotations

import logging

import groq
from groq import AsyncGroq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """The LLM could not produce a usable reply."""


async def chat_completion(
    system_prompt: str,
    user_prompt: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """
    Send one system + user exchange to the chat-completion endpoint.

    Returns the reply text (possibly empty).
    Raises ``LLMError`` when no key is configured or the call fails; there is
    no retry.
    """
    if not config.api_key:
        raise LLMError("GROQ_API_KEY is not configured")

    client = AsyncGroq(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout,
    )
    try:
        response = await client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
    except groq.GroqError as exc:
        logger.warning("Groq chat completion failed: %s", exc)
        raise LLMError(f"LLM request failed: {exc}") from exc

    if not response.choices:
        return ""
    return response.choices[0].message.content or ""
