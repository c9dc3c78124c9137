"""
Referee: the rules engine behind a duel.

- Owns a python-chess Board; the only place the position is mutated.
- apply_move() validates a UCI move and returns its SAN, or rejects it leaving the board untouched.
- terminal_reason() maps python-chess outcomes onto TerminalReason. Repetition and fifty-move draws
  count once they have actually occurred (third occurrence, halfmove clock 100), never one move ahead.
- Manages PGN headers, result overrides and an optional termination comment for export.
"""
from __future__ import annotations
import datetime
from typing import Optional

import chess
import chess.pgn

from .outcomes import Side, TerminalReason

_TERMINATIONS = {
    chess.Termination.CHECKMATE: TerminalReason.CHECKMATE,
    chess.Termination.STALEMATE: TerminalReason.STALEMATE,
    chess.Termination.INSUFFICIENT_MATERIAL: TerminalReason.INSUFFICIENT_MATERIAL,
    chess.Termination.FIVEFOLD_REPETITION: TerminalReason.DRAW_REPETITION,
    chess.Termination.SEVENTYFIVE_MOVES: TerminalReason.DRAW_FIFTY_MOVES,
}


class Referee:
    """Plain chess referee around python-chess Board and PGN export."""

    def __init__(self, starting_fen: str | None = None):
        self.starting_fen = starting_fen or chess.STARTING_FEN
        self.board = chess.Board(fen=self.starting_fen)
        self._headers: dict[str, str] = {}
        self._result_override: Optional[str] = None
        self._termination_comment: Optional[str] = None

    def reset(self) -> None:
        self.board = chess.Board(fen=self.starting_fen)
        self._headers = {}
        self._result_override = None
        self._termination_comment = None

    # ---------------- Position queries -----------------
    def fen(self) -> str:
        return self.board.fen()

    def side_to_move(self) -> Side:
        return Side.from_turn(self.board.turn)

    def legal_moves(self) -> list[str]:
        return sorted(mv.uci() for mv in self.board.legal_moves)

    def plies(self) -> int:
        return len(self.board.move_stack)

    def terminal_reason(self) -> TerminalReason | None:
        outcome = self.board.outcome()
        if outcome is not None:
            return _TERMINATIONS[outcome.termination]
        if self.board.is_repetition(3):
            return TerminalReason.DRAW_REPETITION
        if self.board.halfmove_clock >= 100:
            return TerminalReason.DRAW_FIFTY_MOVES
        return None

    def outcome_result(self) -> str:
        outcome = self.board.outcome()
        if outcome is not None:
            return outcome.result()
        return "1/2-1/2" if self.terminal_reason() is not None else "*"

    # ---------------- Move Application -----------------
    def apply_move(self, uci: str) -> tuple[bool, str | None]:
        try:
            mv = chess.Move.from_uci(uci)
        except ValueError:
            return False, None
        if mv not in self.board.legal_moves:
            return False, None
        san = self.board.san(mv)
        self.board.push(mv)
        return True, san

    def undo(self) -> str | None:
        if not self.board.move_stack:
            return None
        return self.board.pop().uci()

    # ---------------- Header / Result Management -----------------
    def set_headers(self, event: str = "LLM Chess Duel", site: str = "?", date: Optional[str] = None,
                    round_: str = "?", white: str = "?", black: str = "?") -> None:
        date = date or datetime.date.today().strftime("%Y.%m.%d")
        self._headers.update({
            "Event": event,
            "Site": site,
            "Date": date,
            "Round": round_,
            "White": white,
            "Black": black,
        })

    def set_result(self, result: str, termination_reason: Optional[str] = None) -> None:
        self._result_override = result
        if termination_reason:
            self._termination_comment = f"Termination: {termination_reason}"

    # ---------------- PGN / Status -----------------
    def status(self) -> str:
        if self._result_override:
            return self._result_override
        return self.outcome_result()

    def pgn(self) -> str:
        game = chess.pgn.Game()
        for k, v in self._headers.items():
            game.headers[k] = v
        if self.starting_fen != chess.STARTING_FEN:
            game.setup(chess.Board(fen=self.starting_fen))
        game.headers["Result"] = self.status()
        node = game
        for mv in list(self.board.move_stack):
            node = node.add_variation(mv)
        if self._termination_comment:
            game.comment = self._termination_comment
        exporter = chess.pgn.StringExporter(headers=True, variations=False, comments=bool(self._termination_comment))
        return game.accept(exporter)
