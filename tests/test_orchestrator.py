import asyncio
import unittest
from unittest.mock import AsyncMock

from llmchess_duel.events import FAILURE, MOVE_APPLIED, TERMINAL, TURN_START, GameLog
from llmchess_duel.gateway import ProviderGateway
from llmchess_duel.orchestrator import Phase, TurnOrchestrator
from llmchess_duel.outcomes import Failure, FailureKind, Side, TerminalReached, TerminalReason
from llmchess_duel.providers import ProviderConfig, provider_config
from llmchess_duel.referee import Referee
from llmchess_duel.session_state import SessionState, SessionStatus
from llmchess_duel.llm_client import TransportResponse

from fakes import FAST, FOOLS_MATE_FEN, BlockingTransport, ScriptedTransport, openai_reply


class OrchestratorTests(unittest.IsolatedAsyncioTestCase):
    def build(self, white, black, transport=None, starting_fen=None, max_plies=0, gateway=None):
        self.referee = Referee(starting_fen=starting_fen)
        self.events = GameLog()
        self.state = SessionState()
        self.state.begin()
        self.gateway = gateway or ProviderGateway(
            self.referee,
            events=self.events,
            transports={"openai": transport or ScriptedTransport()},
            settings=FAST,
        )
        self.orch = TurnOrchestrator(
            referee=self.referee,
            gateway=self.gateway,
            state=self.state,
            configs={Side.WHITE: white, Side.BLACK: black},
            events=self.events,
            turn_delay_s=0.0,
            max_plies=max_plies,
        )
        return self.orch

    async def test_checkmating_move_ends_session(self):
        transport = ScriptedTransport(openai_reply("MOVE: d8h4\nREASON: mate"))
        orch = self.build(ProviderConfig.random(), provider_config("gpt-4", "sk", FAST), transport, FOOLS_MATE_FEN)
        final = await orch.run()
        self.assertEqual(final, TerminalReached(TerminalReason.CHECKMATE, "0-1"))
        self.assertIs(orch.phase, Phase.TERMINAL)
        self.assertEqual(self.state.status, SessionStatus.HALTED)
        self.assertEqual(len(self.events.of_kind(TURN_START)), 1)
        self.assertEqual(self.events.of_kind(MOVE_APPLIED)[0].data["notation"], "Qh4#")
        self.assertEqual(self.events.of_kind(TERMINAL)[0].data["reason"], "checkmate")
        self.assertEqual(len(transport.requests), 1)
        self.assertIsNone(await orch.step())

    async def test_http_error_halts_without_further_queries(self):
        transport = ScriptedTransport(TransportResponse(status=401, text="unauthorized"))
        orch = self.build(provider_config("gpt-4", "sk", FAST), ProviderConfig.random(), transport)
        final = await orch.run()
        self.assertIsInstance(final, Failure)
        self.assertEqual(final.kind, FailureKind.HTTP_ERROR)
        self.assertIn("401", final.detail)
        self.assertEqual(self.state.status, SessionStatus.HALTED)
        self.assertEqual([e.kind for e in self.events.entries], [TURN_START, FAILURE, TERMINAL])
        self.assertEqual(self.referee.status(), "*")
        self.assertEqual(len(transport.requests), 1)

    async def test_second_step_while_in_flight_is_rejected(self):
        transport = BlockingTransport(openai_reply("MOVE: e2e4"))
        orch = self.build(provider_config("gpt-4", "sk", FAST), ProviderConfig.random(), transport)
        first = asyncio.create_task(orch.step())
        while not transport.requests:
            await asyncio.sleep(0)
        self.assertTrue(self.state.in_flight)
        self.assertIs(orch.phase, Phase.AWAITING_PROVIDER)
        self.assertIsNone(await orch.step())
        self.assertEqual(len(transport.requests), 1)
        transport.release.set()
        outcome = await first
        self.assertEqual(outcome.notation, "e4")
        self.assertFalse(self.state.in_flight)
        self.assertIs(orch.phase, Phase.IDLE)

    async def test_in_flight_released_when_gateway_raises(self):
        gateway = AsyncMock(spec=ProviderGateway)
        gateway.request_move.side_effect = RuntimeError("boom")
        orch = self.build(ProviderConfig.random(), ProviderConfig.random(), gateway=gateway)
        outcome = await orch.step()
        self.assertEqual(outcome.kind, FailureKind.TRANSPORT_ERROR)
        self.assertIn("boom", outcome.detail)
        self.assertFalse(self.state.in_flight)
        self.assertEqual(self.state.status, SessionStatus.HALTED)

    async def test_halted_session_never_reaches_gateway(self):
        gateway = AsyncMock(spec=ProviderGateway)
        orch = self.build(ProviderConfig.random(), ProviderConfig.random(), gateway=gateway)
        self.state.halt()
        self.assertIsNone(await orch.step())
        self.assertIsNone(await orch.run())
        gateway.request_move.assert_not_awaited()

    async def test_resolution_after_abort_is_discarded(self):
        transport = BlockingTransport(openai_reply("MOVE: e2e4"))
        orch = self.build(provider_config("gpt-4", "sk", FAST), ProviderConfig.random(), transport)
        pending = asyncio.create_task(orch.step())
        while not transport.requests:
            await asyncio.sleep(0)
        orch.abort()
        self.assertIs(orch.phase, Phase.AWAITING_PROVIDER)
        transport.release.set()
        self.assertIsNone(await pending)
        self.assertEqual(self.referee.plies(), 0)
        self.assertEqual(orch.final, TerminalReached(TerminalReason.ABORTED, "*"))
        self.assertIs(orch.phase, Phase.TERMINAL)
        self.assertEqual(self.events.of_kind(MOVE_APPLIED), [])

    async def test_max_plies_cap(self):
        orch = self.build(ProviderConfig.random(), ProviderConfig.random(), max_plies=4)
        final = await orch.run()
        self.assertEqual(final, TerminalReached(TerminalReason.MAX_PLIES, "1/2-1/2"))
        self.assertEqual(self.referee.plies(), 4)
        self.assertEqual(len(self.events.of_kind(MOVE_APPLIED)), 4)

    async def test_terminal_start_position_issues_no_query(self):
        gateway = AsyncMock(spec=ProviderGateway)
        orch = self.build(ProviderConfig.random(), ProviderConfig.random(),
                          starting_fen="7k/5Q2/6K1/8/8/8/8/8 b - - 0 1", gateway=gateway)
        final = await orch.run()
        self.assertEqual(final.reason, TerminalReason.STALEMATE)
        gateway.request_move.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
