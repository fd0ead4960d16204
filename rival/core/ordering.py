"""Move ordering: hash move first, then MVV-LVA captures, then quiet moves."""

from typing import Iterable, List, Optional

import chess

HASH_MOVE = 0
CAPTURE = 1
QUIET = 2


def mvv_lva(board: chess.Board, move: chess.Move) -> int:
    """Most valuable victim first, least valuable attacker as tie-breaker."""
    attacker = board.piece_at(move.from_square)
    if board.is_en_passant(move):
        victim_type = chess.PAWN
    else:
        victim = board.piece_at(move.to_square)
        victim_type = victim.piece_type if victim else 0
    attacker_type = attacker.piece_type if attacker else 0
    return victim_type * 10 - attacker_type


class MoveOrderer:
    """Stateless; the same inputs always give the same order."""

    def order(
        self,
        board: chess.Board,
        moves: Iterable[chess.Move],
        tt_move: Optional[chess.Move] = None,
    ) -> List[chess.Move]:
        keyed = []
        for i, move in enumerate(moves):
            if tt_move is not None and move == tt_move:
                keyed.append(((HASH_MOVE, 0, i), move))
            elif board.is_capture(move):
                keyed.append(((CAPTURE, -mvv_lva(board, move), i), move))
            else:
                keyed.append(((QUIET, 0, i), move))
        keyed.sort(key=lambda km: km[0])
        return [m for _, m in keyed]

    def captures(self, board: chess.Board) -> List[chess.Move]:
        """Legal captures ordered by MVV-LVA, for quiescence."""
        return self.order(board, board.generate_legal_captures())
