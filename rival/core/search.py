import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import chess

from rival.config import CONFIG, SearchTuning
from rival.core.evaluator import Evaluator
from rival.core.ordering import MoveOrderer
from rival.core.transposition import NodeType, TranspositionTable, TTEntry
from rival.errors import SearchTimeout

INF = 1000000
MATE_SCORE = 900000
# anything this close to MATE_SCORE is a forced mate, not material
MATE_THRESHOLD = MATE_SCORE - 1000
DRAW_SCORE = 0


def is_mate_score(score: int) -> bool:
    return abs(score) >= MATE_THRESHOLD


def score_to_tt(score: int, ply: int) -> int:
    """Re-base a mate score from distance-to-root to distance-to-this-node."""
    if is_mate_score(score):
        return score + ply if score > 0 else score - ply
    return score


def score_from_tt(score: int, ply: int) -> int:
    if is_mate_score(score):
        return score - ply if score > 0 else score + ply
    return score


def is_draw_by_rule(board: chess.Board) -> bool:
    return (
        board.is_insufficient_material()
        or board.halfmove_clock >= 100
        or board.is_repetition(3)
    )


def terminal_score(board: chess.Board, ply: int) -> Optional[int]:
    """Score for a node that ends the game, or None if play continues.

    A side with no legal moves is mated if in check and stalemated
    otherwise; the mate score shrinks with ply so quicker mates rank higher.
    Draw rules are ignored at the root, where the caller asked for a move.
    """
    if not any(board.generate_legal_moves()):
        if board.is_check():
            return -(MATE_SCORE - ply)
        return DRAW_SCORE
    if ply > 0 and is_draw_by_rule(board):
        return DRAW_SCORE
    return None


@dataclass
class SearchStats:
    nodes: int = 0
    q_nodes: int = 0
    beta_cutoffs: int = 0
    tt_probes: int = 0
    tt_hits: int = 0
    tt_cutoffs: int = 0
    completed_depth: int = 0
    elapsed_ms: float = 0.0


class SearchEngine:
    """Negamax with alpha-beta pruning over one transposition table.

    The board is mutated with push/pop during the search and is always back
    in its original state when ``negamax`` returns or raises.
    """

    def __init__(
        self,
        tt: TranspositionTable,
        evaluator: Optional[Evaluator] = None,
        orderer: Optional[MoveOrderer] = None,
        quiescence: bool = False,
        tuning: Optional[SearchTuning] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.tt = tt
        self.evaluator = evaluator or Evaluator()
        self.orderer = orderer or MoveOrderer()
        self.quiescence = quiescence
        self.tuning = tuning or CONFIG.search
        self.clock = clock
        self.stats = SearchStats()
        # clock reading; None disables the in-tree clock poll
        self.deadline: Optional[float] = None
        self.root_move: Optional[chess.Move] = None
        self.root_score: int = -INF

    def _poll_clock(self):
        if self.deadline is None:
            return
        if self.stats.nodes % self.tuning.time_check_nodes == 0 and self.clock() >= self.deadline:
            raise SearchTimeout(f"time budget exhausted after {self.stats.nodes} nodes")

    def negamax(self, board: chess.Board, depth: int, alpha: int, beta: int, ply: int = 0) -> int:
        self.stats.nodes += 1
        self._poll_clock()

        terminal = terminal_score(board, ply)
        if terminal is not None:
            return terminal

        if depth <= 0:
            if self.quiescence:
                return self._quiescence(board, alpha, beta, ply, 0)
            return self.evaluator.evaluate(board)

        # TT Lookup
        key = self.tt.key(board)
        self.stats.tt_probes += 1
        entry = self.tt.lookup(key)
        tt_move = None

        if entry is not None:
            self.stats.tt_hits += 1
            tt_move = entry.best_move
            # the root always searches so it can report its own best move
            if ply > 0 and entry.depth >= depth:
                tt_score = score_from_tt(entry.score, ply)
                if entry.node_type == NodeType.EXACT:
                    self.stats.tt_cutoffs += 1
                    return tt_score
                if entry.node_type == NodeType.LOWER_BOUND:
                    alpha = max(alpha, tt_score)
                elif entry.node_type == NodeType.UPPER_BOUND:
                    beta = min(beta, tt_score)
                if alpha >= beta:
                    self.stats.tt_cutoffs += 1
                    return tt_score

        alpha_orig = alpha
        best_score = -INF
        best_move = None

        for move in self.orderer.order(board, board.legal_moves, tt_move):
            board.push(move)
            try:
                score = -self.negamax(board, depth - 1, -beta, -alpha, ply + 1)
            finally:
                board.pop()

            if score > best_score:
                best_score = score
                best_move = move

            if score > alpha:
                alpha = score
            if alpha >= beta:
                self.stats.beta_cutoffs += 1
                break

        if best_score <= alpha_orig:
            node_type = NodeType.UPPER_BOUND
        elif best_score >= beta:
            node_type = NodeType.LOWER_BOUND
        else:
            node_type = NodeType.EXACT

        self.tt.store(key, TTEntry(
            key=key,
            depth=depth,
            score=score_to_tt(best_score, ply),
            node_type=node_type,
            best_move=best_move,
            generation=self.tt.generation,
        ))

        if ply == 0:
            self.root_move = best_move
            self.root_score = best_score
        return best_score

    def _quiescence(self, board: chess.Board, alpha: int, beta: int, ply: int, qdepth: int) -> int:
        """Captures-only search below the nominal depth (stand-pat, fail-soft).

        A side in check may not stand pat: every evasion is searched instead,
        so a mate right past the horizon is still seen.
        """
        if qdepth > 0:
            self.stats.nodes += 1
            self._poll_clock()
            terminal = terminal_score(board, ply)
            if terminal is not None:
                return terminal
        self.stats.q_nodes += 1

        if board.is_check() and qdepth < self.tuning.q_max_depth:
            best = -INF
            moves = self.orderer.order(board, board.legal_moves)
        else:
            best = self.evaluator.evaluate(board)
            if best >= beta or qdepth >= self.tuning.q_max_depth:
                return best
            if best > alpha:
                alpha = best
            moves = self.orderer.captures(board)

        for move in moves:
            board.push(move)
            try:
                score = -self._quiescence(board, -beta, -alpha, ply + 1, qdepth + 1)
            finally:
                board.pop()

            if score > best:
                best = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break

        return best

    def pv_line(self, board: chess.Board, depth: int) -> List[chess.Move]:
        """Follow stored best moves from ``board``; stops on a miss, illegal move or cycle."""
        pv_moves = []
        curr_board = board.copy(stack=False)
        seen = {self.tt.key(curr_board)}

        for _ in range(depth):
            entry = self.tt.lookup(self.tt.key(curr_board))
            if not entry or not entry.best_move:
                break

            move = entry.best_move
            if move not in curr_board.legal_moves:
                break

            pv_moves.append(move)
            curr_board.push(move)

            key = self.tt.key(curr_board)
            if key in seen:
                break
            seen.add(key)

        return pv_moves
