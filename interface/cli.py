"""Terminal game loop: play against the engine or watch it play itself."""

import argparse
import logging
import sys
from typing import Callable, Optional

import chess

from rival.config import CONFIG
from rival.core.difficulty import Difficulty
from rival.main import Engine


def play(engine: Engine, human_color: chess.Color = chess.WHITE,
         read: Callable[[str], str] = input, write: Callable[[str], None] = print) -> str:
    """Human vs engine until the game ends or the human types 'quit'."""
    while not engine.board.is_game_over():
        write(engine.board.render())
        write("----------------------------")

        if engine.board.board.turn == human_color:
            user_move = read("Enter your move (uci or san, e.g. e2e4): ")
            if user_move.strip() in ("quit", "exit"):
                return "*"
            if user_move.strip() == "undo":
                # take back the engine's reply and our own move
                engine.board.undo_move()
                engine.board.undo_move()
                continue
            if not engine.make_move(user_move):
                write("Illegal move, try again.")
        else:
            result = engine.think()
            engine.board.push(result.move)
            write(f"Engine plays: {result.move.uci()} | depth {result.depth} | eval {result.score}")

    write(engine.board.render())
    write(f"Game Over. Result: {engine.board.result()}")
    return engine.board.result()


def selfplay(engine: Engine, move_limit: Optional[int] = None,
             write: Callable[[str], None] = print) -> str:
    """Let the engine play both sides, printing the board after every move."""
    move_limit = move_limit or CONFIG.ui.selfplay_move_limit
    write(engine.board.render())
    plies = 0
    while not engine.board.is_game_over() and plies < move_limit:
        move = engine.play_best_move()
        plies += 1
        write(f"{plies}. {move.uci()}")
        write(engine.board.render())

    result = engine.board.result() if engine.board.is_game_over() else "*"
    write(f"Game Over. Result: {result}")
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rival", description="Play chess against the Rival engine.")
    parser.add_argument("--log-level", default=CONFIG.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    difficulties = [d.value for d in Difficulty]
    p_play = sub.add_parser("play", help="play against the engine")
    p_play.add_argument("--difficulty", choices=difficulties, default=CONFIG.search.default_difficulty)
    p_play.add_argument("--color", choices=["white", "black"], default="white")
    p_play.add_argument("--fen", default=None)

    p_self = sub.add_parser("selfplay", help="engine plays itself")
    p_self.add_argument("--difficulty", choices=difficulties, default=CONFIG.search.default_difficulty)
    p_self.add_argument("--fen", default=None)
    p_self.add_argument("--moves", type=int, default=None, help="stop after this many plies")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    engine = Engine(args.difficulty, fen=args.fen)
    if args.command == "play":
        play(engine, chess.WHITE if args.color == "white" else chess.BLACK)
    else:
        selfplay(engine, args.moves)
    return 0


if __name__ == "__main__":
    sys.exit(main())
