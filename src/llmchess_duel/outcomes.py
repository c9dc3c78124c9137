"""
Value types passed between the gateway, the applier and the orchestrator.

Every turn resolves to exactly one TurnOutcome: an AppliedMove, a Failure, or a
TerminalReached marker. All of them are frozen so they can cross await points
without anyone mutating them underneath the orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

import chess


class Side(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @classmethod
    def from_turn(cls, turn: chess.Color) -> "Side":
        return cls.WHITE if turn == chess.WHITE else cls.BLACK

    @property
    def label(self) -> str:
        return self.value.capitalize()


class FailureKind(str, Enum):
    NO_CREDENTIAL = "no_credential"
    PROVIDER_UNCONFIGURED = "provider_unconfigured"
    TRANSPORT_ERROR = "transport_error"
    HTTP_ERROR = "http_error"
    UNPARSABLE_RESPONSE = "unparsable_response"
    ILLEGAL_MOVE = "illegal_move"
    NO_LEGAL_MOVES = "no_legal_moves"


class TerminalReason(str, Enum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_REPETITION = "draw_repetition"
    INSUFFICIENT_MATERIAL = "insufficient_material"
    DRAW_FIFTY_MOVES = "draw_fifty_moves"
    MAX_PLIES = "max_plies"
    ABORTED = "aborted"


@dataclass(frozen=True)
class MoveProposal:
    """Unvalidated candidate move (lowercase UCI) plus the provider's rationale."""

    move: str
    rationale: str


@dataclass(frozen=True)
class AppliedMove:
    move: str
    notation: str
    resulting_position: str
    side: Side
    rationale: str = ""


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    detail: str

    def describe(self) -> str:
        return f"{self.kind.value}: {self.detail}"


@dataclass(frozen=True)
class TerminalReached:
    reason: TerminalReason
    result: str = "*"


TurnOutcome = Union[AppliedMove, Failure, TerminalReached]
