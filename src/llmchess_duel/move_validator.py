"""
Move validation and application on top of the Referee.

Legality is decided by python-chess through the referee; this module never
re-implements chess rules and never repairs or retries a rejected move.
"""
from __future__ import annotations

import re

from .outcomes import AppliedMove, Failure, FailureKind, MoveProposal, Side
from .referee import Referee

UCI_RE = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$", re.I)


class MoveApplier:
    def __init__(self, referee: Referee):
        self.referee = referee

    def apply(self, proposal: MoveProposal, side: Side) -> AppliedMove | Failure:
        """Commit the proposal if legal, otherwise Failure(ILLEGAL_MOVE) with the position unchanged."""
        move = proposal.move
        if not UCI_RE.fullmatch(move):
            return Failure(FailureKind.ILLEGAL_MOVE, move)
        ok, san = self.referee.apply_move(move.lower())
        if not ok or san is None:
            return Failure(FailureKind.ILLEGAL_MOVE, move)
        return AppliedMove(
            move=move.lower(),
            notation=san,
            resulting_position=self.referee.fen(),
            side=side,
            rationale=proposal.rationale,
        )
