"""Board wrapper over python-chess used by the game loop: history, legality, outcome."""

from typing import List, Optional

import chess


class ChessBoard:
    def __init__(self, fen: Optional[str] = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.move_history: List[str] = []

    def reset(self):
        self.board.reset()
        self.move_history.clear()

    def set_fen(self, fen: str):
        """Set board state from a FEN string; raises ValueError on bad input."""
        self.board.set_fen(fen)
        self.move_history.clear()

    def get_fen(self) -> str:
        return self.board.fen()

    def parse_move(self, move_str: str) -> Optional[chess.Move]:
        """Parse UCI ('e2e4') or SAN ('Nf3'); None if unparseable or illegal."""
        move_str = move_str.strip()
        if not move_str:
            return None
        try:
            move = chess.Move.from_uci(move_str)
        except ValueError:
            try:
                return self.board.parse_san(move_str)
            except ValueError:
                return None
        return move if move in self.board.legal_moves else None

    def make_move(self, move_str: str) -> bool:
        """Push a UCI or SAN move. Returns True if legal."""
        move = self.parse_move(move_str)
        if move is None:
            return False
        self.push(move)
        return True

    def push(self, move: chess.Move):
        self.board.push(move)
        self.move_history.append(move.uci())

    def undo_move(self):
        """Pop the last move."""
        if self.move_history:
            self.board.pop()
            self.move_history.pop()

    def get_legal_moves(self) -> List[str]:
        return [m.uci() for m in self.board.legal_moves]

    def is_game_over(self) -> bool:
        return self.board.is_game_over()

    def result(self) -> str:
        return self.board.result()

    def turn_name(self) -> str:
        return "white" if self.board.turn == chess.WHITE else "black"

    def render(self) -> str:
        """ASCII diagram followed by the side to move."""
        return f"{self.board}\n{self.turn_name()} to move"
