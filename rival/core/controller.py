"""Iterative-deepening driver: turns a position and a budget into one move."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import chess

from rival.config import CONFIG, SearchTuning
from rival.core.difficulty import SearchConfig
from rival.core.evaluator import Evaluator
from rival.core.ordering import MoveOrderer
from rival.core.search import INF, MATE_SCORE, MATE_THRESHOLD, SearchEngine, SearchStats
from rival.core.transposition import TranspositionTable
from rival.core.utils import format_info
from rival.errors import GameOverError, SearchTimeout

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    move: chess.Move
    score: int
    depth: int
    pv: List[chess.Move] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)


class SearchController:
    """Runs negamax at depth 1, 2, ... and keeps the last depth that finished.

    Each call builds its own transposition table and search engine, so one
    controller can serve several games and several controllers can run side
    by side.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        orderer: Optional[MoveOrderer] = None,
        tuning: Optional[SearchTuning] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.evaluator = evaluator or Evaluator()
        self.orderer = orderer or MoveOrderer()
        self.tuning = tuning or CONFIG.search
        self.clock = clock

    def select_move(self, board: chess.Board, config: SearchConfig) -> chess.Move:
        return self.search(board, config).move

    def search(self, board: chess.Board, config: SearchConfig) -> SearchResult:
        """Search ``board`` within ``config``; the caller's board is not touched.

        Raises:
            GameOverError: the side to move has no legal moves.
        """
        legal = list(board.legal_moves)
        if not legal:
            raise GameOverError(board.fen(), "checkmate" if board.is_check() else "stalemate")

        start = self.clock()
        if len(legal) == 1:
            logger.debug("Only move %s, search skipped", legal[0].uci())
            return SearchResult(move=legal[0], score=0, depth=0, pv=[legal[0]])

        tt = TranspositionTable(config.table_capacity)
        tt.new_search()
        engine = SearchEngine(
            tt,
            evaluator=self.evaluator,
            orderer=self.orderer,
            quiescence=config.quiescence,
            tuning=self.tuning,
            clock=self.clock,
        )
        search_board = board.copy()
        deadline = start + config.time_budget_ms / 1000.0

        best_move: Optional[chess.Move] = None
        best_score = 0
        completed = 0
        pv_moves: List[chess.Move] = []

        for d in range(1, config.max_depth + 1):
            # depth 1 always runs so there is a move to return
            if d > 1:
                if self.clock() >= deadline:
                    logger.debug("Budget spent before depth %d", d)
                    break
                engine.deadline = deadline

            try:
                score = engine.negamax(search_board, d, -INF, INF, 0)
            except SearchTimeout:
                logger.debug("Depth %d interrupted after %d nodes, keeping depth %d", d, engine.stats.nodes, completed)
                break

            best_move = engine.root_move
            best_score = score
            completed = d

            pv_moves = engine.pv_line(search_board, d)
            if not pv_moves or pv_moves[0] != best_move:
                pv_moves = [best_move]

            elapsed_ms = (self.clock() - start) * 1000
            logger.info(format_info(d, score, engine.stats.nodes, elapsed_ms, pv_moves, MATE_SCORE, MATE_THRESHOLD))

        stats = engine.stats
        stats.completed_depth = completed
        stats.elapsed_ms = (self.clock() - start) * 1000
        return SearchResult(move=best_move, score=best_score, depth=completed, pv=pv_moves, stats=stats)
