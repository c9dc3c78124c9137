import unittest

from llmchess_duel.move_validator import MoveApplier
from llmchess_duel.outcomes import AppliedMove, Failure, FailureKind, MoveProposal, Side, TerminalReason
from llmchess_duel.referee import Referee

from fakes import FOOLS_MATE_FEN


class MoveApplierTests(unittest.TestCase):
    def setUp(self):
        self.referee = Referee()
        self.applier = MoveApplier(self.referee)

    def test_legal_move_advances_side_to_move(self):
        result = self.applier.apply(MoveProposal("e2e4", "center"), Side.WHITE)
        self.assertIsInstance(result, AppliedMove)
        self.assertEqual(result.notation, "e4")
        self.assertEqual(result.side, Side.WHITE)
        self.assertEqual(result.resulting_position, self.referee.fen())
        self.assertEqual(self.referee.side_to_move(), Side.BLACK)

    def test_illegal_move_leaves_position_unchanged(self):
        before = self.referee.fen()
        result = self.applier.apply(MoveProposal("e2e5", "too far"), Side.WHITE)
        self.assertEqual(result, Failure(FailureKind.ILLEGAL_MOVE, "e2e5"))
        self.assertEqual(self.referee.fen(), before)
        self.assertEqual(self.referee.side_to_move(), Side.WHITE)

    def test_malformed_move_is_illegal(self):
        result = self.applier.apply(MoveProposal("castle", ""), Side.WHITE)
        self.assertEqual(result.kind, FailureKind.ILLEGAL_MOVE)

    def test_promotion(self):
        referee = Referee(starting_fen="8/P7/8/8/8/8/8/k6K w - - 0 1")
        result = MoveApplier(referee).apply(MoveProposal("a7a8q", "promote"), Side.WHITE)
        self.assertTrue(result.notation.startswith("a8=Q"))


class RefereeTests(unittest.TestCase):
    def test_checkmate_is_terminal(self):
        referee = Referee(starting_fen=FOOLS_MATE_FEN)
        self.assertIsNone(referee.terminal_reason())
        ok, san = referee.apply_move("d8h4")
        self.assertTrue(ok)
        self.assertEqual(san, "Qh4#")
        self.assertEqual(referee.terminal_reason(), TerminalReason.CHECKMATE)
        self.assertEqual(referee.outcome_result(), "0-1")

    def test_stalemate_and_insufficient_material(self):
        self.assertEqual(Referee("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1").terminal_reason(), TerminalReason.STALEMATE)
        self.assertEqual(Referee("8/8/8/8/8/8/8/K6k w - - 0 1").terminal_reason(), TerminalReason.INSUFFICIENT_MATERIAL)

    def test_repetition_is_terminal_only_on_third_occurrence(self):
        referee = Referee()
        for uci in ["g1f3", "g8f6", "f3g1", "f6g8", "g1f3", "g8f6", "f3g1"]:
            self.assertTrue(referee.apply_move(uci)[0])
        # twice so far, even though f6g8 would repeat it a third time
        self.assertIsNone(referee.terminal_reason())
        self.assertEqual(referee.outcome_result(), "*")
        self.assertTrue(referee.apply_move("f6g8")[0])
        self.assertEqual(referee.terminal_reason(), TerminalReason.DRAW_REPETITION)
        self.assertEqual(referee.outcome_result(), "1/2-1/2")

    def test_fifty_move_rule_at_halfmove_clock_100(self):
        referee = Referee("8/8/8/8/8/5k2/8/K1R5 w - - 99 80")
        self.assertIsNone(referee.terminal_reason())
        self.assertTrue(referee.apply_move("a1b2")[0])
        self.assertEqual(referee.terminal_reason(), TerminalReason.DRAW_FIFTY_MOVES)
        self.assertEqual(referee.outcome_result(), "1/2-1/2")

    def test_reset_and_undo(self):
        referee = Referee()
        referee.apply_move("e2e4")
        self.assertEqual(referee.undo(), "e2e4")
        self.assertEqual(referee.plies(), 0)
        self.assertIsNone(referee.undo())
        referee.apply_move("d2d4")
        referee.set_result("*", "aborted")
        referee.reset()
        self.assertEqual(referee.plies(), 0)
        self.assertEqual(referee.status(), "*")

    def test_pgn_carries_headers_and_termination(self):
        referee = Referee()
        referee.set_headers(white="Random", black="gpt-4")
        referee.apply_move("e2e4")
        referee.set_result("*", "http_error")
        pgn = referee.pgn()
        self.assertIn('[White "Random"]', pgn)
        self.assertIn('[Black "gpt-4"]', pgn)
        self.assertIn("Termination: http_error", pgn)
        self.assertIn("1. e4", pgn)


if __name__ == "__main__":
    unittest.main()
