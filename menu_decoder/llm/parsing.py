from __future__ import annotations

import json
import re
from typing import Any

from .groq_client import LLMError

_THINK_RE = re.compile(r"<think>.*?</think>", re.DOTALL)
_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class LLMResponseError(LLMError):
    """The LLM reply did not contain the expected JSON."""


def extract_json(raw: str) -> str:
    """Strip thinking blocks, then unwrap the first fenced code block if any."""
    cleaned = _THINK_RE.sub("", raw).strip()
    fence = _FENCE_RE.search(cleaned)
    if fence:
        cleaned = fence.group(1).strip()
    return cleaned


def parse_json_list(raw: str) -> list[dict[str, Any]]:
    """Parse an LLM reply into a list of JSON objects or raise ``LLMResponseError``."""
    text = extract_json(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"LLM reply is not valid JSON: {exc}") from exc

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise LLMResponseError("LLM reply is not a JSON array of objects")
    return data
