"""
Response parsing for free-form provider replies.

Providers are asked to answer with two lines, ``MOVE: <uci>`` and
``REASON: <text>``. Models do not always comply, so the parser looks for the
keywords anywhere in the reply instead of enforcing the layout.
"""
from __future__ import annotations

import re

from .outcomes import Failure, FailureKind, MoveProposal

MOVE_RE = re.compile(r"MOVE:\s*([a-h][1-8][a-h][1-8][qrbn]?)", re.I)
REASON_RE = re.compile(r"REASON:\s*(.*)", re.I | re.S)
NO_REASON = "No reason provided."


def parse(raw_text: str) -> MoveProposal | Failure:
    """Extract a MoveProposal from raw provider text.

    Returns Failure(UNPARSABLE_RESPONSE) carrying the original text when no
    ``MOVE:`` token is present; a proposal is never half-filled.
    """
    text = raw_text or ""
    move_match = MOVE_RE.search(text)
    if not move_match:
        return Failure(FailureKind.UNPARSABLE_RESPONSE, text)
    reason_match = REASON_RE.search(text)
    rationale = reason_match.group(1).strip() if reason_match else ""
    return MoveProposal(move=move_match.group(1).lower(), rationale=rationale or NO_REASON)
