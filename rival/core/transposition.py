"""Fixed-capacity transposition table keyed by 64-bit position hashes.

This module provides:

- NodeType: what a stored score means relative to the window it was
  searched with (exact value, lower bound after a fail-high, upper bound
  after a fail-low).

- TTEntry: one cached search result. The full 64-bit key is stored next to
  the result so a slot shared by two positions is never trusted by index
  alone.

- TranspositionTable: an arena of ``capacity`` slots indexed by
  ``key % capacity`` with a depth/generation replacement policy.

Usage (example):

    from rival.core.transposition import TranspositionTable, TTEntry, NodeType

    tt = TranspositionTable(capacity=1 << 16)
    key = tt.key(board)
    tt.store(key, TTEntry(key, depth=3, score=120, node_type=NodeType.EXACT,
                          best_move=move, generation=tt.generation))
    entry = tt.lookup(key)
    if entry is not None:
        print(entry.depth, entry.score, entry.node_type, entry.best_move)

"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

import chess
from chess import polyglot

DEFAULT_CAPACITY = 1 << 16


class NodeType(enum.IntEnum):
    EXACT = 0
    LOWER_BOUND = 1  # fail-high: true score >= stored score
    UPPER_BOUND = 2  # fail-low: true score <= stored score


@dataclass(frozen=True)
class TTEntry:
    key: int
    depth: int
    score: int
    node_type: NodeType
    best_move: Optional[chess.Move]
    generation: int = 0


class TranspositionTable:
    """Slot array of TTEntry indexed by ``key % capacity``.

    Methods:
      - lookup(key) -> Optional[TTEntry]
      - store(key, entry) -> bool  (False when the slot keeps its entry)
      - new_search()  (start a new generation)
      - clear()
      - key(board) -> int  (zobrist key)

    A table belongs to one search at a time; it does no locking.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._slots: List[Optional[TTEntry]] = [None] * capacity
        self.generation = 0
        self.collisions = 0

    @staticmethod
    def key(board: chess.Board) -> int:
        return polyglot.zobrist_hash(board)

    def index(self, key: int) -> int:
        return key % self.capacity

    def lookup(self, key: int) -> Optional[TTEntry]:
        entry = self._slots[self.index(key)]
        if entry is None:
            return None
        # a different position sharing the slot is a miss
        if entry.key != key:
            self.collisions += 1
            return None
        return entry

    def store(self, key: int, entry: TTEntry) -> bool:
        if entry.key != key:
            raise ValueError("entry key does not match the store key")
        idx = self.index(key)
        old = self._slots[idx]
        if old is not None and not self._replaces(entry, old):
            return False
        self._slots[idx] = entry
        return True

    @staticmethod
    def _replaces(new: TTEntry, old: TTEntry) -> bool:
        # deeper wins; at equal depth the newer generation wins
        if new.depth != old.depth:
            return new.depth > old.depth
        return new.generation >= old.generation

    def new_search(self) -> int:
        self.generation += 1
        return self.generation

    def clear(self):
        self._slots = [None] * self.capacity
        self.generation = 0
        self.collisions = 0

    def __len__(self) -> int:
        return sum(1 for e in self._slots if e is not None)
