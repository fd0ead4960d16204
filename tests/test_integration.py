"""
Integration tests for Rival.

Tests the complete pipeline from position + difficulty to a played move:
- Search controller: iterative deepening, budgets, shortcuts, determinism
- End-to-end scenarios (opening move, forced mate played out)
- Engine wrapper and top-level select_move
- Terminal game loop (scripted human input, self-play)
- REST API endpoints
"""

import logging
import threading

import chess
import pytest

from rival import GameOverError, select_move
from rival.config import SearchTuning
from rival.core.controller import SearchController
from rival.core.difficulty import Difficulty, SearchConfig
from rival.core.search import MATE_SCORE
from rival.main import Engine
from interface import cli

MATE_IN_ONE = "k7/8/1K6/8/8/8/8/7R w - - 0 1"
MATE_IN_TWO = "k7/8/2K5/8/8/8/8/7R w - - 0 1"
ONLY_MOVE = "R6k/5K2/8/8/8/8/8/8 b - - 0 1"         # Kh7 is forced
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1"
STALEMATE = "5k2/5P2/5K2/8/8/8/8/8 b - - 0 1"

GENEROUS_MS = 600_000


def cfg(depth, budget_ms=GENEROUS_MS, capacity=1 << 16, quiescence=False):
    return SearchConfig(max_depth=depth, time_budget_ms=budget_ms,
                        table_capacity=capacity, quiescence=quiescence)


class FakeClock:
    """Advances a fixed step every time it is read."""

    def __init__(self, step=0.001):
        self.now = 0.0
        self.step = step
        self.reads = 0

    def __call__(self):
        value = self.now
        self.now += self.step
        self.reads += 1
        return value


# ════════════════════════════════════════════════════════════════════════════
#  SEARCH CONTROLLER
# ════════════════════════════════════════════════════════════════════════════


class TestSearchController:
    def setup_method(self):
        self.controller = SearchController()

    def test_depth_one_opening_move(self):
        board = chess.Board()
        result = self.controller.search(board, cfg(1))
        assert result.move in board.legal_moves
        assert board.legal_moves.count() == 20
        assert result.depth == 1

    def test_single_legal_move_shortcut(self):
        board = chess.Board(ONLY_MOVE)
        assert board.legal_moves.count() == 1
        result = self.controller.search(board, cfg(8, capacity=1 << 20))
        assert result.move == chess.Move.from_uci("h8h7")
        assert result.stats.nodes == 0
        assert result.depth == 0

    def test_checkmate_fails_fast(self):
        with pytest.raises(GameOverError) as exc:
            self.controller.select_move(chess.Board(FOOLS_MATE), cfg(3))
        assert exc.value.reason == "checkmate"

    def test_stalemate_fails_fast(self):
        with pytest.raises(ValueError):
            self.controller.select_move(chess.Board(STALEMATE), cfg(3))

    def test_caller_board_untouched(self):
        board = chess.Board()
        board.push_uci("d2d4")
        fen, stack = board.fen(), list(board.move_stack)
        self.controller.search(board, cfg(2))
        assert board.fen() == fen
        assert board.move_stack == stack

    def test_reaches_max_depth_with_time_left(self):
        result = self.controller.search(chess.Board(MATE_IN_TWO), cfg(3))
        assert result.depth == 3
        assert result.stats.completed_depth == 3
        assert result.pv[0] == result.move

    def test_zero_budget_still_completes_depth_one(self):
        board = chess.Board()
        result = self.controller.search(board, cfg(6, budget_ms=0))
        assert result.depth == 1
        expected = SearchController().select_move(board, cfg(1))
        assert result.move == expected

    def test_interrupted_depth_is_discarded(self):
        clock = FakeClock(step=0.001)
        controller = SearchController(tuning=SearchTuning(time_check_nodes=1), clock=clock)
        board = chess.Board()
        result = controller.search(board, cfg(4, budget_ms=5))

        depth_one = SearchController().search(board, cfg(1))
        assert result.depth == 1
        assert result.move == depth_one.move
        assert result.score == depth_one.score
        # the abandoned depth-2 pass still shows up in the node count
        assert result.stats.nodes > depth_one.stats.nodes

    def test_deterministic(self):
        board = chess.Board("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3")
        first = SearchController().select_move(board, cfg(2))
        second = SearchController().select_move(board, cfg(2))
        assert first == second

    def test_prefers_mate_in_one(self):
        result = self.controller.search(chess.Board(MATE_IN_ONE), cfg(3))
        assert result.move == chess.Move.from_uci("h1h8")
        assert result.score == MATE_SCORE - 1

    def test_mate_in_two_played_out(self):
        board = chess.Board(MATE_IN_TWO)
        config = cfg(4)
        result = self.controller.search(board, config)
        assert result.score == MATE_SCORE - 3

        for ply in range(3):
            assert not board.is_game_over()
            move = self.controller.select_move(board, config)
            assert move in board.legal_moves
            board.push(move)
        assert board.is_checkmate()
        assert board.turn == chess.BLACK

    def test_logs_info_per_depth(self, caplog):
        caplog.set_level(logging.INFO, logger="rival.core.controller")
        self.controller.search(chess.Board(MATE_IN_TWO), cfg(2))
        lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("info depth")]
        assert len(lines) == 2
        assert lines[0].startswith("info depth 1 ")

    def test_independent_searches_in_threads(self):
        boards = [chess.Board(), chess.Board(MATE_IN_TWO), chess.Board(MATE_IN_ONE)]
        results = [None] * len(boards)

        def worker(i):
            results[i] = SearchController().select_move(boards[i], cfg(2))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(boards))]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        for board, move in zip(boards, results):
            assert move in board.legal_moves
        assert results[2] == chess.Move.from_uci("h1h8")


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER / TOP-LEVEL API
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapper:
    def test_select_move_easy_opening(self):
        board = chess.Board()
        assert select_move(board, Difficulty.EASY) in board.legal_moves

    def test_select_move_accepts_names(self):
        assert select_move(chess.Board(MATE_IN_ONE), "medium") == chess.Move.from_uci("h1h8")

    def test_select_move_same_input_same_move(self):
        board = chess.Board()
        assert select_move(board, "easy") == select_move(board, "easy")

    def test_select_move_game_over(self):
        with pytest.raises(GameOverError):
            select_move(chess.Board(FOOLS_MATE), "easy")

    def test_get_best_move(self):
        engine = Engine("easy")
        move, score = engine.get_best_move()
        assert move in engine.board.get_legal_moves()
        assert isinstance(score, int)

    def test_play_best_move_pushes(self):
        engine = Engine("easy")
        move = engine.play_best_move()
        assert engine.board.move_history == [move.uci()]
        assert engine.board.board.turn == chess.BLACK

    def test_set_difficulty(self):
        engine = Engine()
        assert engine.difficulty is Difficulty.MEDIUM
        engine.set_difficulty("HARD")
        assert engine.difficulty is Difficulty.HARD
        with pytest.raises(ValueError):
            engine.set_difficulty("impossible")

    def test_short_self_play_game(self):
        engine = Engine("easy")
        for _ in range(12):
            if engine.board.is_game_over():
                break
            legal = set(engine.board.board.legal_moves)
            move = engine.play_best_move()
            assert move in legal


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL GAME LOOP
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def scripted(self, *lines):
        it = iter(lines)
        return lambda prompt: next(it)

    def test_play_human_then_engine_then_quit(self):
        engine = Engine("easy")
        out = []
        result = cli.play(engine, chess.WHITE, read=self.scripted("e2e4", "quit"), write=out.append)
        assert result == "*"
        assert engine.board.move_history[0] == "e2e4"
        assert len(engine.board.move_history) == 2
        assert any(line.startswith("Engine plays:") for line in out)

    def test_play_rejects_illegal_input(self):
        engine = Engine("easy")
        out = []
        cli.play(engine, chess.WHITE, read=self.scripted("e2e5", "quit"), write=out.append)
        assert "Illegal move, try again." in out
        assert engine.board.move_history == []

    def test_play_undo(self):
        engine = Engine("easy")
        cli.play(engine, chess.WHITE, read=self.scripted("e2e4", "undo", "quit"), write=lambda s: None)
        assert engine.board.move_history == []

    def test_play_finishes_mate(self):
        engine = Engine("medium", fen=MATE_IN_ONE)
        out = []
        result = cli.play(engine, chess.BLACK, read=self.scripted("quit"), write=out.append)
        assert result == "1-0"
        assert out[-1] == "Game Over. Result: 1-0"

    def test_selfplay_move_limit(self):
        engine = Engine("easy")
        out = []
        result = cli.selfplay(engine, move_limit=4, write=out.append)
        assert result == "*"
        assert len(engine.board.move_history) == 4

    def test_selfplay_to_mate(self):
        engine = Engine("medium", fen=MATE_IN_TWO)
        assert cli.selfplay(engine, move_limit=10, write=lambda s: None) == "1-0"
        assert len(engine.board.move_history) == 3

    def test_main_selfplay(self, capsys):
        assert cli.main(["--log-level", "warning", "selfplay", "--difficulty", "easy", "--moves", "2"]) == 0
        printed = capsys.readouterr().out
        assert "1. " in printed
        assert "2. " in printed

    def test_parser_rejects_unknown_difficulty(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["play", "--difficulty", "grandmaster"])


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, board

        self.client = TestClient(app)
        board.reset()

    def test_get_board_initial(self):
        data = self.client.get("/board").json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert data["is_game_over"] is False
        assert len(data["legal_moves"]) == 20

    def test_difficulties(self):
        data = self.client.get("/difficulties").json()
        assert set(data) == {"easy", "medium", "hard", "max"}
        assert data["max"]["max_depth"] > data["easy"]["max_depth"]

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        assert response.json()["move"] == "e2e4"

    def test_post_move_san(self):
        response = self.client.post("/move", json={"move": "Nf3"})
        assert response.status_code == 200
        assert response.json()["move"] == "g1f3"

    def test_post_move_illegal(self):
        assert self.client.post("/move", json={"move": "e2e5"}).status_code == 400
        assert self.client.post("/move", json={"move": "zzzz"}).status_code == 400

    def test_set_position(self):
        response = self.client.post("/position", json={"fen": MATE_IN_ONE})
        assert response.status_code == 200
        assert response.json()["fen"] == MATE_IN_ONE
        assert self.client.post("/position", json={"fen": "invalid"}).status_code == 400

    def test_search_returns_legal_move(self):
        response = self.client.post("/search", json={"difficulty": "easy"})
        assert response.status_code == 200
        data = response.json()
        assert chess.Move.from_uci(data["best_move"]) in chess.Board().legal_moves
        assert data["depth"] == 1
        assert data["fen"] == chess.STARTING_FEN

    def test_search_and_play(self):
        self.client.post("/position", json={"fen": MATE_IN_ONE})
        data = self.client.post("/search", json={"difficulty": "medium", "play": True}).json()
        assert data["best_move"] == "h1h8"
        board_state = self.client.get("/board").json()
        assert board_state["is_game_over"] is True
        assert board_state["result"] == "1-0"
        assert data["fen"] == board_state["fen"]

    def test_search_unknown_difficulty(self):
        assert self.client.post("/search", json={"difficulty": "godlike"}).status_code == 422

    def test_search_game_over_returns_400(self):
        self.client.post("/position", json={"fen": FOOLS_MATE})
        assert self.client.post("/search", json={"difficulty": "easy"}).status_code == 400

    def test_reset(self):
        self.client.post("/move", json={"move": "e2e4"})
        assert self.client.post("/reset").json()["fen"] == chess.STARTING_FEN

    def test_import_leaves_logging_alone(self, monkeypatch):
        import importlib

        from fastapi.testclient import TestClient

        from interface import api
        from rival.config import CONFIG

        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        importlib.reload(api)
        assert calls == []

        with TestClient(api.app):
            assert calls == [{"level": CONFIG.log_level}]
