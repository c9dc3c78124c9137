"""
Configuration and environment loading for LLM Chess Duel.

- Loads settings.yml (YAML) from repo root if present; falls back to environment variables.
- Exposes SETTINGS with keys used across the project (API key, endpoints, pacing and transport knobs).
"""
from dataclasses import dataclass
import logging
import os
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger("config")


def _repo_root() -> str:
    # this file: src/llmchess_duel/config.py → repo root is two levels up
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _load_yaml(path: str) -> dict:
    if not os.path.isfile(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        log.warning("Ignoring unreadable settings file %s", path, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


_cfg = _load_yaml(os.path.join(_repo_root(), "settings.yml"))


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    if name in _cfg:
        val = _cfg[name]
        return cast(val) if cast else val
    env = os.environ.get(name)
    if env is not None:
        return cast(env) if cast else env
    return default


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    # Auth / endpoints
    llm_api_key: str
    openai_base_url: str
    gemini_base_url: str

    # Pacing (perceptibility only, never correctness)
    turn_delay_s: float
    think_delay_s: float

    # Remote provider knobs
    request_timeout_s: float
    transport_retries: int
    max_output_tokens: int
    temperature: float

    # Session policy
    max_plies: int
    require_verified_credential: bool


SETTINGS = Settings(
    llm_api_key=_get("LLMCHESS_LLM_API_KEY", ""),
    openai_base_url=_get("LLMCHESS_OPENAI_BASE_URL", "https://api.openai.com/v1"),
    gemini_base_url=_get("LLMCHESS_GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"),
    turn_delay_s=float(_get("LLMCHESS_TURN_DELAY_S", 0.5, cast=float)),
    think_delay_s=float(_get("LLMCHESS_THINK_DELAY_S", 0.5, cast=float)),
    request_timeout_s=float(_get("LLMCHESS_REQUEST_TIMEOUT_S", 60.0, cast=float)),
    transport_retries=int(_get("LLMCHESS_TRANSPORT_RETRIES", 0, cast=int)),
    max_output_tokens=int(_get("LLMCHESS_MAX_OUTPUT_TOKENS", 100, cast=int)),
    temperature=float(_get("LLMCHESS_TEMPERATURE", 0.2, cast=float)),
    max_plies=int(_get("LLMCHESS_MAX_PLIES", 0, cast=int)),
    require_verified_credential=bool(_get("LLMCHESS_REQUIRE_VERIFIED_KEY", False, cast=_as_bool)),
)
