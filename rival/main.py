from typing import Union

import chess

from rival.core.board import ChessBoard
from rival.core.controller import SearchController, SearchResult
from rival.core.difficulty import Difficulty, config_for
from rival.core.evaluator import Evaluator


def select_move(board: chess.Board, difficulty: Union[str, Difficulty]) -> chess.Move:
    """Pick the computer's move for ``board`` at the given difficulty.

    Raises GameOverError if the side to move has no legal moves.
    """
    return SearchController().select_move(board, config_for(difficulty))


class Engine:
    """A game in progress plus the opponent that plays in it."""

    def __init__(self, difficulty: Union[str, Difficulty] = Difficulty.MEDIUM, fen: str = None):
        self.board = ChessBoard(fen)
        self.difficulty = Difficulty.parse(difficulty)
        self.controller = SearchController(Evaluator())

    def set_difficulty(self, difficulty: Union[str, Difficulty]):
        self.difficulty = Difficulty.parse(difficulty)

    def think(self) -> SearchResult:
        return self.controller.search(self.board.board, config_for(self.difficulty))

    def get_best_move(self):
        result = self.think()
        return result.move.uci(), result.score

    def play_best_move(self) -> chess.Move:
        """Search and push the chosen move onto the game board."""
        move = self.think().move
        self.board.push(move)
        return move

    def make_move(self, move_str: str) -> bool:
        return self.board.make_move(move_str)
