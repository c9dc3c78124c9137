"""Gemini generateContent wire format (native REST, key in x-goog-api-key)."""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..prompting import GenerationParams
from .base import ProviderDescriptor

FAMILY = "gemini"


def _headers(credential: str) -> Dict[str, str]:
    return {"Content-Type": "application/json", "x-goog-api-key": credential}


def _body(model: str, prompt: str, params: GenerationParams) -> Dict[str, Any]:
    # model travels in the endpoint path, not the body
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "maxOutputTokens": params.max_output_tokens,
            "temperature": params.temperature,
        },
    }


def extract_text(envelope: Any) -> Optional[str]:
    """Return candidates[0].content.parts[0].text, or None if the envelope has another shape."""
    if not isinstance(envelope, dict):
        return None
    candidates = envelope.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


def gemini_descriptor(model: str, base_url: str) -> ProviderDescriptor:
    return ProviderDescriptor(
        family=FAMILY,
        model=model,
        endpoint=f"{base_url.rstrip('/')}/models/{model}:generateContent",
        build_body=_body,
        extract_text=extract_text,
        build_headers=_headers,
    )
