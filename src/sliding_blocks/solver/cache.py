"""Solve results remembered per puzzle position.

Entries are keyed on the rules and the canonical variant grid, so two boards
that list the same blocks in a different order share an entry. Paths are kept
as ``(anchor, step)`` pairs and mapped back to the asking board's block
indices on lookup. Budget-exhausted searches are never stored: a larger budget
may still find a solution.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Tuple

from sliding_blocks.game.core import Board
from sliding_blocks.game.moves import Move, Step
from sliding_blocks.game.pieces import Position
from sliding_blocks.game.rules import PuzzleRules

from .bfs import SolveOutcome, SolveResult, canonical_key

logger = logging.getLogger(__name__)

_Path = List[Tuple[Position, Step]]
_Key = Tuple[PuzzleRules, bytes]


class SolutionCache:
    def __init__(self) -> None:
        # None marks a position proven unsolvable.
        self._entries: Dict[_Key, Optional[_Path]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _key(self, board: Board) -> _Key:
        return (board.rules, canonical_key(board.blocks, board.rules))

    def get(self, board: Board) -> Optional[SolveResult]:
        key = self._key(board)
        with self._lock:
            if key not in self._entries:
                self.misses += 1
                return None
            self.hits += 1
            path = self._entries[key]
        if path is None:
            return SolveResult(SolveOutcome.UNSOLVABLE, cached=True)
        return SolveResult(SolveOutcome.SOLVED, _to_moves(board, path), cached=True)

    def put(self, board: Board, result: SolveResult) -> bool:
        """Remember ``result`` for ``board``'s position; False when not cacheable."""
        if result.outcome == SolveOutcome.BUDGET_EXHAUSTED:
            return False
        path = _to_path(board, result.moves) if result.solved else None
        with self._lock:
            self._entries[self._key(board)] = path
        logger.debug("Cached %s result for board %s", result.outcome.value, board.id)
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def _to_path(board: Board, moves: List[Move]) -> _Path:
    blocks = list(board.blocks)
    path: _Path = []
    for move in moves:
        block = blocks[move.block_idx]
        path.append((block.min_position, move.step))
        blocks[move.block_idx] = block.shifted(move.row_diff, move.col_diff)
    return path


def _to_moves(board: Board, path: _Path) -> List[Move]:
    # Equal variant grids decompose into the same anchors, so the block
    # covering a stored anchor is the one that moved there.
    grid = board.grid.copy()
    blocks = list(board.blocks)
    moves: List[Move] = []
    for (row, col), step in path:
        idx = grid.owner(row, col)
        block = blocks[idx]
        moved = block.shifted(step.row_diff, step.col_diff)
        grid.clear(block.cells())
        grid.fill(moved.cells(), idx)
        blocks[idx] = moved
        moves.append(Move.from_step(idx, step))
    return moves
