"""
GameLog: append-only record of what happened during a session.

Every event is timestamped and mirrored to the "game_log" logger so console
runs show the game as it is played. Consumers (CLI, tests) read `entries`.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .outcomes import AppliedMove, Failure, Side, TerminalReached

SESSION_START = "session_start"
TURN_START = "turn_start"
RAW_RESPONSE = "raw_response"
MOVE_APPLIED = "move_applied"
FAILURE = "failure"
TERMINAL = "terminal"


@dataclass(frozen=True)
class GameEvent:
    kind: str
    timestamp: float
    side: Optional[Side] = None
    data: Dict[str, Any] = field(default_factory=dict)


class GameLog:
    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or logging.getLogger("game_log")
        self.entries: List[GameEvent] = []

    def _append(self, kind: str, side: Optional[Side] = None, /, **data: Any) -> GameEvent:
        evt = GameEvent(kind=kind, timestamp=time.time(), side=side, data=data)
        self.entries.append(evt)
        return evt

    def clear(self) -> None:
        self.entries = []

    def of_kind(self, kind: str) -> List[GameEvent]:
        return [e for e in self.entries if e.kind == kind]

    # ---------------- Event helpers -----------------
    def session_start(self, white: str, black: str) -> None:
        self._append(SESSION_START, white=white, black=black)
        self.log.info("Game started: %s (White) vs %s (Black)", white, black)

    def turn_start(self, side: Side, provider: str, ply: int) -> None:
        self._append(TURN_START, side, provider=provider, ply=ply)
        self.log.info("[ply %d] %s AI (%s) is thinking...", ply, side.label, provider)

    def raw_response(self, side: Side, provider: str, raw: str) -> None:
        self._append(RAW_RESPONSE, side, provider=provider, raw=raw)
        raw_short = (raw or "").replace("\n", " ")
        if len(raw_short) > 140:
            raw_short = raw_short[:140] + "…"
        self.log.info("Raw AI response from %s: '%s'", provider, raw_short)

    def move_applied(self, move: AppliedMove, provider: str) -> None:
        self._append(MOVE_APPLIED, move.side, provider=provider, uci=move.move,
                     notation=move.notation, fen=move.resulting_position, rationale=move.rationale)
        self.log.info("%s AI (%s) moved: %s", move.side.label, provider, move.notation)
        if move.rationale:
            self.log.info("Reason: %s", move.rationale)

    def failure(self, side: Optional[Side], failure: Failure) -> None:
        self._append(FAILURE, side, kind=failure.kind.value, detail=failure.detail)
        who = f"{side.label} AI" if side else "Session"
        self.log.error("%s failed (%s): %s", who, failure.kind.value, failure.detail)

    def terminal(self, reason: str, result: str) -> None:
        self._append(TERMINAL, reason=reason, result=result)
        self.log.info("Game over: %s (result %s)", reason, result)

    def terminal_reached(self, outcome: TerminalReached) -> None:
        self.terminal(outcome.reason.value, outcome.result)
