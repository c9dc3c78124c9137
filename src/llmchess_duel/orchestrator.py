"""
TurnOrchestrator: drives one session from the first move to a terminal state.

Phases: IDLE -> AWAITING_PROVIDER -> RESOLVING -> (IDLE | TERMINAL).

- run(): the turn loop. Waits turn_delay_s in IDLE, then calls step() until the
  game ends or the session is halted.
- step(): one turn. Refused (returns None) when a query is already in flight,
  the session is not running, or the position is already terminal.
- Fail-fast: any Failure halts the session. No retry, no substitute move.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, Optional, Union

from .events import GameLog
from .gateway import ProviderGateway
from .outcomes import AppliedMove, Failure, FailureKind, Side, TerminalReached, TerminalReason, TurnOutcome
from .providers import ProviderConfig
from .referee import Referee
from .session_state import SessionState

log = logging.getLogger("orchestrator")

FinalOutcome = Union[TerminalReached, Failure]


class Phase(str, Enum):
    IDLE = "idle"
    AWAITING_PROVIDER = "awaiting_provider"
    RESOLVING = "resolving"
    TERMINAL = "terminal"


class TurnOrchestrator:
    def __init__(
        self,
        referee: Referee,
        gateway: ProviderGateway,
        state: SessionState,
        configs: Dict[Side, ProviderConfig],
        events: GameLog,
        turn_delay_s: float = 0.5,
        max_plies: int = 0,
    ):
        self.referee = referee
        self.gateway = gateway
        self.state = state
        self.configs = configs
        self.events = events
        self.turn_delay_s = turn_delay_s
        self.max_plies = max_plies
        self.phase = Phase.IDLE
        self.final: Optional[FinalOutcome] = None

    async def run(self) -> Optional[FinalOutcome]:
        while self.phase is not Phase.TERMINAL:
            await asyncio.sleep(self.turn_delay_s)
            if not self.state.running:
                break
            reached = self._terminal_check()
            if reached:
                self._finish(reached)
                break
            if await self.step() is None:
                break
        return self.final

    async def step(self) -> Optional[TurnOutcome]:
        if self.state.in_flight or not self.state.running or self.phase is Phase.TERMINAL:
            log.debug("Turn request ignored (in_flight=%s status=%s)", self.state.in_flight, self.state.status.value)
            return None
        if self.referee.terminal_reason() is not None:
            return None

        side = self.referee.side_to_move()
        self.state.set_active(side)
        config = self.configs[side]
        self.phase = Phase.AWAITING_PROVIDER
        self.events.turn_start(side, config.label(), self.referee.plies() + 1)
        with self.state.flight():
            try:
                outcome = await self.gateway.request_move(self.referee.fen(), side, config)
            except Exception as e:
                log.exception("Provider gateway raised for %s", config.label())
                outcome = Failure(FailureKind.TRANSPORT_ERROR, f"{type(e).__name__}: {e}")
        self.phase = Phase.RESOLVING
        return self._resolve(side, config, outcome)

    def abort(self) -> None:
        if self.final is not None:
            return
        self.state.halt()
        self.final = TerminalReached(TerminalReason.ABORTED, "*")
        self.referee.set_result("*", TerminalReason.ABORTED.value)
        self.events.terminal_reached(self.final)
        if not self.state.in_flight:
            self.phase = Phase.TERMINAL

    # ---------------- Resolution -----------------
    def _resolve(self, side: Side, config: ProviderConfig, outcome: TurnOutcome) -> Optional[TurnOutcome]:
        if not self.state.running:
            if isinstance(outcome, AppliedMove):
                self.referee.undo()
            log.info("Discarding %s turn resolved after the session halted", side.value)
            self.phase = Phase.TERMINAL
            return None

        if isinstance(outcome, Failure):
            self.events.failure(side, outcome)
            self._finish(outcome)
            return outcome

        if isinstance(outcome, TerminalReached):
            self._finish(outcome)
            return outcome

        self.events.move_applied(outcome, config.label())
        reached = self._terminal_check()
        if reached:
            self._finish(reached)
            return reached
        self.phase = Phase.IDLE
        return outcome

    def _terminal_check(self) -> Optional[TerminalReached]:
        reason = self.referee.terminal_reason()
        if reason is not None:
            return TerminalReached(reason, self.referee.outcome_result())
        if self.max_plies and self.referee.plies() >= self.max_plies:
            return TerminalReached(TerminalReason.MAX_PLIES, "1/2-1/2")
        return None

    def _finish(self, final: FinalOutcome) -> None:
        self.final = final
        self.phase = Phase.TERMINAL
        self.state.halt()
        if isinstance(final, TerminalReached):
            self.referee.set_result(final.result, final.reason.value)
            self.events.terminal_reached(final)
        else:
            self.referee.set_result("*", final.kind.value)
            self.events.terminal(final.kind.value, "*")
