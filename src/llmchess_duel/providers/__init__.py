from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from ..config import SETTINGS, Settings
from .base import ProviderConfig, ProviderDescriptor, ProviderKind
from .gemini import gemini_descriptor
from .openai_provider import openai_descriptor

# Short names offered by the original model pickers, mapped to (family, model).
_ALIASES: Dict[str, Tuple[str, str]] = {
    "gpt-4": ("openai", "gpt-4"),
    "gpt-4o": ("openai", "gpt-4o"),
    "gpt-4o-mini": ("openai", "gpt-4o-mini"),
    "gemini-pro": ("gemini", "gemini-2.0-flash"),
    "gemini-flash": ("gemini", "gemini-2.0-flash"),
}


def _base_url(family: str, settings: Settings) -> str:
    return settings.gemini_base_url if family == "gemini" else settings.openai_base_url


_FAMILIES: Dict[str, Callable[[str, str], ProviderDescriptor]] = {
    "openai": openai_descriptor,
    "gemini": gemini_descriptor,
}


def resolve_descriptor(name: str, settings: Settings = SETTINGS) -> Optional[ProviderDescriptor]:
    """Resolve 'gpt-4' / 'gemini-pro' aliases or explicit 'family/model' names. None if unknown."""
    key = (name or "").strip()
    if key.lower() in _ALIASES:
        family, model = _ALIASES[key.lower()]
    elif "/" in key:
        family, model = key.split("/", 1)
        family = family.lower()
    else:
        return None
    factory = _FAMILIES.get(family)
    if factory is None or not model:
        return None
    return factory(model, _base_url(family, settings))


def provider_config(name: str, credential: str = "", settings: Settings = SETTINGS) -> ProviderConfig:
    """Build the ProviderConfig for a CLI/config provider name ('random' or a model name)."""
    if (name or "").strip().lower() == "random":
        return ProviderConfig.random()
    return ProviderConfig(
        kind=ProviderKind.REMOTE_TEXT_MODEL,
        model=name,
        credential=credential,
        descriptor=resolve_descriptor(name, settings),
    )


__all__ = [
    "ProviderConfig",
    "ProviderDescriptor",
    "ProviderKind",
    "provider_config",
    "resolve_descriptor",
]
