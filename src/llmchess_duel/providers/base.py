"""
Provider configuration and wire descriptors.

A ProviderConfig is a tagged variant: RANDOM, or REMOTE_TEXT_MODEL carrying a
ProviderDescriptor. The descriptor is resolved once, when the config is
built, and holds everything wire-specific as data: endpoint, header and body
builders, and the extractor that pulls reply text out of the JSON envelope.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..prompting import GenerationParams


class ProviderKind(str, Enum):
    RANDOM = "random"
    REMOTE_TEXT_MODEL = "remote_text_model"


@dataclass(frozen=True)
class ProviderDescriptor:
    family: str
    model: str
    endpoint: str
    build_body: Callable[[str, str, GenerationParams], Dict[str, Any]]
    extract_text: Callable[[Any], Optional[str]]
    build_headers: Optional[Callable[[str], Dict[str, str]]] = None

    def headers(self, credential: str) -> Dict[str, str]:
        return self.build_headers(credential) if self.build_headers else {}


@dataclass(frozen=True)
class ProviderConfig:
    kind: ProviderKind
    model: str = "random"
    credential: str = ""
    descriptor: Optional[ProviderDescriptor] = None

    @classmethod
    def random(cls) -> "ProviderConfig":
        return cls(kind=ProviderKind.RANDOM)

    @property
    def is_remote(self) -> bool:
        return self.kind == ProviderKind.REMOTE_TEXT_MODEL

    def label(self) -> str:
        return "Random" if not self.is_remote else self.model

    def with_credential(self, credential: str) -> "ProviderConfig":
        return replace(self, credential=credential)
