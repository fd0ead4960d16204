"""Rival: an automated chess opponent with selectable difficulty."""

from rival.core.difficulty import DIFFICULTY_TABLE, Difficulty, SearchConfig, config_for
from rival.errors import GameOverError, RivalError
from rival.main import Engine, select_move

__version__ = "1.0.0"
