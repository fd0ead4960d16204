"""Core engine components: board, evaluator, ordering, transposition table, search and controller."""

from .board import ChessBoard
from .controller import SearchController, SearchResult
from .difficulty import DIFFICULTY_TABLE, Difficulty, SearchConfig, config_for
from .evaluator import Evaluator
from .ordering import MoveOrderer
from .search import SearchEngine, SearchStats
from .transposition import NodeType, TranspositionTable, TTEntry
