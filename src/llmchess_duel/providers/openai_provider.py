"""
OpenAI chat completions wire format.

Requests go through the openai SDK (see llm_client.OpenAIChatTransport), so the
descriptor carries no header builder: the SDK sets the bearer token itself.
The endpoint is the SDK base_url, which makes any OpenAI-compatible gateway usable.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..prompting import GenerationParams
from .base import ProviderDescriptor

FAMILY = "openai"


def _body(model: str, prompt: str, params: GenerationParams) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": params.max_output_tokens,
        "temperature": params.temperature,
    }


def extract_text(envelope: Any) -> Optional[str]:
    """Return choices[0].message.content (string or list of text parts), or None."""
    if not isinstance(envelope, dict):
        return None
    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    msg = choices[0].get("message")
    if not isinstance(msg, dict):
        return None
    content = msg.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for c in content:
            if isinstance(c, dict) and c.get("type") == "text" and isinstance(c.get("text"), str):
                parts.append(c["text"])
        if parts:
            return "\n".join(parts)
    return None


def openai_descriptor(model: str, base_url: str) -> ProviderDescriptor:
    return ProviderDescriptor(
        family=FAMILY,
        model=model,
        endpoint=base_url,
        build_body=_body,
        extract_text=extract_text,
    )
