"""
LLM Chess Duel package.

Components:
- session: SessionController (start/abort/wait) and ConfigurationError
- orchestrator: TurnOrchestrator, the async turn loop and its fail-fast policy
- gateway: ProviderGateway with Random and remote text-model strategies
- response_parser/move_validator: MOVE/REASON parsing and rule-checked application
- providers/llm_client: wire descriptors (OpenAI chat, Gemini) and their transports
- referee: python-chess rules engine and PGN export
"""
from .outcomes import AppliedMove, Failure, FailureKind, MoveProposal, Side, TerminalReached, TerminalReason
from .providers import ProviderConfig, ProviderKind, provider_config
from .session import ConfigurationError, SessionBusyError, SessionController, SessionSummary

__all__ = [
    "AppliedMove",
    "ConfigurationError",
    "Failure",
    "FailureKind",
    "MoveProposal",
    "ProviderConfig",
    "ProviderKind",
    "SessionBusyError",
    "SessionController",
    "SessionSummary",
    "Side",
    "TerminalReached",
    "TerminalReason",
    "provider_config",
]
