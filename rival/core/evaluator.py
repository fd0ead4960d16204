"""Loop-based static evaluator: material, piece-square tables and a few positional terms."""

from typing import Optional

import chess
from rival.config import CONFIG, EvalConfig


def _tapered(mg: int, eg: int, phase: int, max_phase: int) -> int:
    """Blend middlegame and endgame scores, rounding toward zero."""
    total = mg * phase + eg * (max_phase - phase)
    q = abs(total) // max_phase
    return q if total >= 0 else -q


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, board: chess.Board) -> int:
        """Return static eval in centipawns, positive favors side to move.

        Terminal states (mate, stalemate, draws by rule) are the search's
        business; this only looks at the pieces.
        """
        white = self.evaluate_white(board)
        score = white if board.turn == chess.WHITE else -white
        return score + self.cfg.tempo_bonus

    def evaluate_white(self, board: chess.Board) -> int:
        """Static eval from White's point of view, without the tempo bonus."""
        cfg = self.cfg
        mg_score = 0
        eg_score = 0
        phase = 0

        for sq, piece in board.piece_map().items():
            name = chess.piece_name(piece.piece_type).upper()
            phase += cfg.phase_weights.get(name, 0)

            material = 0 if piece.piece_type == chess.KING else cfg.piece_values[name]
            idx = sq ^ 56 if piece.color == chess.WHITE else sq
            mg = material + cfg.pst_mg[name][idx]
            eg = material + cfg.pst_eg[name][idx]

            if piece.color == chess.WHITE:
                mg_score += mg
                eg_score += eg
            else:
                mg_score -= mg
                eg_score -= eg

        # Bishop pair.
        for color, sign in ((chess.WHITE, 1), (chess.BLACK, -1)):
            if len(board.pieces(chess.BISHOP, color)) >= 2:
                mg_score += sign * cfg.bishop_pair_bonus
                eg_score += sign * cfg.bishop_pair_bonus

        # Pawn structure: half weight in the middlegame.
        w_pawns = self._eval_pawns(board, chess.WHITE)
        b_pawns = self._eval_pawns(board, chess.BLACK)
        mg_score += w_pawns // 2 - b_pawns // 2
        eg_score += w_pawns - b_pawns

        mob = self._eval_mobility(board, chess.WHITE) - self._eval_mobility(board, chess.BLACK)
        mg_score += mob
        eg_score += mob

        # King shelter only matters while there is material to attack with.
        mg_score += self._eval_king_shield(board, chess.WHITE) - self._eval_king_shield(board, chess.BLACK)

        phase = min(phase, cfg.max_phase)
        return _tapered(mg_score, eg_score, phase, cfg.max_phase)

    def _eval_pawns(self, board: chess.Board, color: chess.Color) -> int:
        """Score isolated and passed pawns for one side (positive is good for it)."""
        score = 0
        own = board.pieces(chess.PAWN, color)
        enemy = board.pieces(chess.PAWN, not color)
        own_files = {chess.square_file(sq) for sq in own}

        for sq in own:
            file = chess.square_file(sq)
            rank = chess.square_rank(sq)

            if (file - 1) not in own_files and (file + 1) not in own_files:
                score += self.cfg.isolated_pawn_penalty

            if self._is_passed(enemy, file, rank, color):
                relative_rank = rank if color == chess.WHITE else 7 - rank
                score += self.cfg.passed_pawn_bonus[relative_rank]

        return score

    @staticmethod
    def _is_passed(enemy_pawns, file: int, rank: int, color: chess.Color) -> bool:
        """True if no enemy pawn stands ahead on this or an adjacent file."""
        for sq in enemy_pawns:
            if abs(chess.square_file(sq) - file) > 1:
                continue
            enemy_rank = chess.square_rank(sq)
            if color == chess.WHITE and enemy_rank > rank:
                return False
            if color == chess.BLACK and enemy_rank < rank:
                return False
        return True

    def _eval_mobility(self, board: chess.Board, color: chess.Color) -> int:
        """Reward pieces for the squares they attack."""
        score = 0
        for pt in (chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN):
            weight = self.cfg.mobility_weights[chess.piece_name(pt).upper()]
            for sq in board.pieces(pt, color):
                score += len(board.attacks(sq)) * weight
        return score

    def _eval_king_shield(self, board: chess.Board, color: chess.Color) -> int:
        """Penalize missing pawns on the three squares in front of the king."""
        king_sq = board.king(color)
        if king_sq is None:
            return 0

        f, r = chess.square_file(king_sq), chess.square_rank(king_sq)
        front_r = r + 1 if color == chess.WHITE else r - 1
        if not 0 <= front_r <= 7:
            return 0

        shield = 0
        for df in (-1, 0, 1):
            if 0 <= f + df <= 7:
                p = board.piece_at(chess.square(f + df, front_r))
                if p and p.piece_type == chess.PAWN and p.color == color:
                    shield += 1

        if shield < 2:
            return -(2 - shield) * self.cfg.missing_shield_penalty
        return 0
