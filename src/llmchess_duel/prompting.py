"""
Prompt builders and config for remote move requests.

Callers supply a template string with placeholders that are substituted per
turn. The default template asks for the two-line MOVE/REASON reply that
response_parser understands.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

DEFAULT_MOVE_TEMPLATE = (
    "You are a chess AI. Given the current chess position in FEN format: {FEN}. "
    "It is {SIDE_TO_MOVE}'s turn. Please provide only your best move in UCI format "
    "(e.g., 'e2e4', 'a7a8q' for promotion) and a brief explanation for the move. "
    "Format your response strictly as:\n"
    "MOVE: [your UCI move]\n"
    "REASON: [your brief explanation]\n"
)

PROBE_PROMPT = "Respond with 'OK' if you are working."


@dataclass(frozen=True)
class PromptConfig:
    """Template used to build the per-turn user prompt."""

    template: str = DEFAULT_MOVE_TEMPLATE


@dataclass(frozen=True)
class GenerationParams:
    max_output_tokens: int = 100
    temperature: float = 0.2


def render_custom_prompt(template: str, values: Dict[str, str]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", val)
    return rendered


def build_move_prompt(fen: str, side_label: str, prompt_cfg: PromptConfig | None = None) -> str:
    cfg = prompt_cfg or PromptConfig()
    return render_custom_prompt(cfg.template, {"FEN": fen, "SIDE_TO_MOVE": side_label})
