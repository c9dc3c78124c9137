"""
ProviderGateway: ask one provider for one move.

- Random strategy: draws uniformly from the referee's legal moves after a short
  thinking delay and applies it directly (no parsing needed).
- Remote strategy: builds the prompt, sends it through the transport for the
  descriptor's wire family, classifies what comes back, parses the reply and
  applies the proposal through MoveApplier.

Every path returns a TurnOutcome value; nothing here raises for provider
misbehaviour. The gateway keeps no state between calls.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, Optional

from .config import SETTINGS, Settings
from .events import GameLog
from .llm_client import Transport, TransportError, TransportRequest, TransportResponse, default_transports
from .move_validator import MoveApplier
from .outcomes import Failure, FailureKind, MoveProposal, Side, TurnOutcome
from .prompting import PROBE_PROMPT, GenerationParams, PromptConfig, build_move_prompt
from .providers import ProviderConfig
from .referee import Referee
from .response_parser import parse

log = logging.getLogger("gateway")

RANDOM_REASON = "Chose a random legal move."
PROBE_PARAMS = GenerationParams(max_output_tokens=10, temperature=0.0)


class ProviderGateway:
    def __init__(
        self,
        referee: Referee,
        events: GameLog | None = None,
        transports: Optional[Dict[str, Transport]] = None,
        rng: random.Random | None = None,
        settings: Settings = SETTINGS,
        think_delay_s: float | None = None,
        prompt_cfg: PromptConfig | None = None,
    ):
        self.referee = referee
        self.applier = MoveApplier(referee)
        self.events = events or GameLog()
        self.transports = transports if transports is not None else default_transports()
        self.rng = rng or random.Random()
        self.think_delay_s = settings.think_delay_s if think_delay_s is None else think_delay_s
        self.request_timeout_s = settings.request_timeout_s
        self.transport_retries = max(0, settings.transport_retries)
        self.generation = GenerationParams(settings.max_output_tokens, settings.temperature)
        self.prompt_cfg = prompt_cfg or PromptConfig()

    async def request_move(self, position: str, side: Side, config: ProviderConfig) -> TurnOutcome:
        if config.is_remote:
            return await self._remote_move(position, side, config)
        return await self._random_move(side)

    async def probe(self, config: ProviderConfig) -> Failure | None:
        """Send a tiny prompt to check that the credential and endpoint work. None means usable."""
        if not config.is_remote:
            return None
        reply = await self._query(config, PROBE_PROMPT, PROBE_PARAMS)
        if isinstance(reply, Failure):
            return reply
        if "OK" not in reply.upper():
            return Failure(FailureKind.UNPARSABLE_RESPONSE, f"probe reply did not acknowledge: {reply}")
        return None

    # ---------------- Strategies -----------------
    async def _random_move(self, side: Side) -> TurnOutcome:
        await asyncio.sleep(self.think_delay_s)
        legal = self.referee.legal_moves()
        if not legal:
            return Failure(FailureKind.NO_LEGAL_MOVES, f"{side.label} has no legal moves")
        choice = self.rng.choice(legal)
        return self.applier.apply(MoveProposal(move=choice, rationale=RANDOM_REASON), side)

    async def _remote_move(self, position: str, side: Side, config: ProviderConfig) -> TurnOutcome:
        prompt = build_move_prompt(position, side.label, self.prompt_cfg)
        reply = await self._query(config, prompt, self.generation)
        if isinstance(reply, Failure):
            return reply
        self.events.raw_response(side, config.label(), reply)
        proposal = parse(reply)
        if isinstance(proposal, Failure):
            return proposal
        log.debug("%s proposed %s", config.label(), proposal.move)
        return self.applier.apply(proposal, side)

    # ---------------- Transport -----------------
    async def _query(self, config: ProviderConfig, prompt: str, params: GenerationParams) -> str | Failure:
        if not config.credential:
            return Failure(FailureKind.NO_CREDENTIAL, f"API key is required for {config.label()}")
        desc = config.descriptor
        if desc is None:
            return Failure(FailureKind.PROVIDER_UNCONFIGURED, f"no endpoint configured for {config.model}")
        transport = self.transports.get(desc.family)
        if transport is None:
            return Failure(FailureKind.PROVIDER_UNCONFIGURED, f"no transport for provider family '{desc.family}'")
        request = TransportRequest(
            endpoint=desc.endpoint,
            credential=config.credential,
            body=desc.build_body(desc.model, prompt, params),
            headers=desc.headers(config.credential),
            timeout_s=self.request_timeout_s,
        )
        rsp = await self._send(transport, request)
        if isinstance(rsp, Failure):
            return rsp
        if not rsp.ok:
            return Failure(FailureKind.HTTP_ERROR, f"{rsp.status} {rsp.text}".strip())
        text = desc.extract_text(rsp.payload)
        if text is None:
            log.debug("Unexpected envelope from %s: %r", desc.model, rsp.payload)
            return Failure(FailureKind.UNPARSABLE_RESPONSE, "unexpected response structure")
        return text.strip()

    async def _send(self, transport: Transport, request: TransportRequest) -> TransportResponse | Failure:
        delay = 0.5
        for attempt in range(self.transport_retries + 1):
            try:
                return await transport.send(request)
            except TransportError as e:
                if attempt >= self.transport_retries:
                    log.warning("Transport failed after %d attempts: %s", attempt + 1, e)
                    return Failure(FailureKind.TRANSPORT_ERROR, str(e))
                sleep_s = delay * (2 ** attempt) * (0.8 + 0.4 * random.random())
                await asyncio.sleep(min(sleep_s, 10.0))
        return Failure(FailureKind.TRANSPORT_ERROR, "no attempt made")
