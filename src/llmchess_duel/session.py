"""
SessionController: lifecycle of a duel (start / abort / wait) and its configuration.

The controller is the only component with externally triggered entry points.
Provider configs are checked before anything is reset, frozen for the session,
and handed to a fresh TurnOrchestrator running as an asyncio task.
"""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

from .config import SETTINGS, Settings
from .events import GameLog
from .gateway import ProviderGateway
from .llm_client import Transport
from .orchestrator import TurnOrchestrator
from .outcomes import Failure, FailureKind, Side, TerminalReached
from .providers import ProviderConfig
from .referee import Referee
from .session_state import SessionState

log = logging.getLogger("session")


class ConfigurationError(ValueError):
    """A session could not start; `failure` says why."""

    def __init__(self, failure: Failure):
        super().__init__(failure.describe())
        self.failure = failure


class SessionBusyError(RuntimeError):
    """start() was called while the previous session task has not settled."""


@dataclass(frozen=True)
class SessionSummary:
    result: str
    termination: Optional[str]
    plies: int
    pgn: str
    failure: Optional[Failure] = None


class SessionController:
    def __init__(
        self,
        referee: Referee | None = None,
        events: GameLog | None = None,
        gateway: ProviderGateway | None = None,
        transports: Optional[Dict[str, Transport]] = None,
        rng: random.Random | None = None,
        settings: Settings = SETTINGS,
        turn_delay_s: float | None = None,
        think_delay_s: float | None = None,
        max_plies: int | None = None,
    ):
        self.referee = referee or Referee()
        self.events = events or GameLog()
        self.gateway = gateway or ProviderGateway(
            self.referee,
            events=self.events,
            transports=transports,
            rng=rng,
            settings=settings,
            think_delay_s=think_delay_s,
        )
        self.settings = settings
        self.turn_delay_s = settings.turn_delay_s if turn_delay_s is None else turn_delay_s
        self.max_plies = settings.max_plies if max_plies is None else max_plies
        self.state = SessionState()
        self.orchestrator: TurnOrchestrator | None = None
        self._task: asyncio.Task | None = None
        self._verified: set[tuple[str, str]] = set()

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    # ---------------- Credentials -----------------
    async def verify_credential(self, config: ProviderConfig) -> Failure | None:
        """Probe the provider once; a passing probe marks (model, credential) as verified."""
        failure = await self.gateway.probe(config)
        key = (config.model, config.credential)
        if failure is None:
            self._verified.add(key)
            log.info("Key is valid for %s", config.label())
        else:
            self._verified.discard(key)
            log.warning("Key test failed for %s: %s", config.label(), failure.describe())
        return failure

    def _check_config(self, side: Side, config: ProviderConfig) -> None:
        if not config.is_remote:
            return
        if not config.credential:
            raise ConfigurationError(Failure(FailureKind.NO_CREDENTIAL, f"API key is required for {config.label()} ({side.label})"))
        if config.descriptor is None:
            raise ConfigurationError(Failure(FailureKind.PROVIDER_UNCONFIGURED, f"no endpoint configured for {config.model} ({side.label})"))
        if self.settings.require_verified_credential and (config.model, config.credential) not in self._verified:
            raise ConfigurationError(Failure(FailureKind.PROVIDER_UNCONFIGURED, f"API key for {config.label()} has not been tested"))

    # ---------------- Lifecycle -----------------
    def start(self, white: ProviderConfig, black: ProviderConfig, credential: str | None = None) -> asyncio.Task:
        """Validate configs, reset the board and schedule the turn loop. Must be called inside a running loop.

        Raises SessionBusyError while the previous task is still running, including
        right after abort() while its provider call is pending; await wait() first.
        Raises ConfigurationError when a provider config cannot be used.
        """
        if self.active:
            raise SessionBusyError("A session is already running (or still settling after abort)")
        if credential:
            white = white if white.credential else white.with_credential(credential)
            black = black if black.credential else black.with_credential(credential)
        configs = {Side.WHITE: white, Side.BLACK: black}
        for side, cfg in configs.items():
            self._check_config(side, cfg)

        self.referee.reset()
        self.referee.set_headers(white=white.label(), black=black.label())
        self.events.clear()
        self.state = SessionState()
        self.state.begin()
        self.orchestrator = TurnOrchestrator(
            referee=self.referee,
            gateway=self.gateway,
            state=self.state,
            configs=configs,
            events=self.events,
            turn_delay_s=self.turn_delay_s,
            max_plies=self.max_plies,
        )
        self.events.session_start(white.label(), black.label())
        self._task = asyncio.get_running_loop().create_task(self.orchestrator.run())
        return self._task

    def abort(self) -> None:
        if self.orchestrator is None:
            return
        log.info("Abort requested")
        self.orchestrator.abort()

    async def wait(self) -> SessionSummary:
        if self._task is None:
            raise RuntimeError("No session has been started")
        await self._task
        return self.summary()

    async def play(self, white: ProviderConfig, black: ProviderConfig, credential: str | None = None) -> SessionSummary:
        self.start(white, black, credential)
        return await self.wait()

    def summary(self) -> SessionSummary:
        final = self.orchestrator.final if self.orchestrator else None
        if isinstance(final, TerminalReached):
            termination, failure = final.reason.value, None
        elif isinstance(final, Failure):
            termination, failure = final.kind.value, final
        else:
            termination, failure = None, None
        return SessionSummary(
            result=self.referee.status(),
            termination=termination,
            plies=self.referee.plies(),
            pgn=self.referee.pgn(),
            failure=failure,
        )
