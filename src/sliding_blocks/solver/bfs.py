"""Breadth-first search for the shortest sequence of unit moves.

Every move costs one, so the first goal state taken off the FIFO frontier is
reached by a minimum-length sequence. States are deduplicated on their
variant-per-cell grid: two layouts that differ only in which of several
identical blocks sits where are the same puzzle position.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Deque, Dict, List, Optional, Sequence, Tuple

import numpy as np

from sliding_blocks.game.core import Board, BoardState
from sliding_blocks.game.errors import InvalidStateTransition
from sliding_blocks.game.grid import EMPTY, build_owner_grid, variant_lookup
from sliding_blocks.game.moves import Move, legal_steps
from sliding_blocks.game.pieces import PlacedBlock
from sliding_blocks.game.rules import PuzzleRules

if TYPE_CHECKING:
    from .cache import SolutionCache

logger = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    # Expanded-state ceiling; None searches the whole reachable space.
    max_states: Optional[int] = 1_000_000


class SolveOutcome(str, Enum):
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass
class SolveResult:
    outcome: SolveOutcome
    moves: List[Move] = field(default_factory=list)
    explored: int = 0
    cached: bool = False

    @property
    def solved(self) -> bool:
        return self.outcome == SolveOutcome.SOLVED

    def to_response(self) -> dict:
        if not self.solved:
            return {"type": "unable_to_solve"}
        return {"type": "solved", "moves": [m.to_dict() for m in self.moves]}


# A search node: the concrete anchor of every block (indexed like the start
# board) and the owner grid derived from it.
_Node = Tuple[Tuple[PlacedBlock, ...], np.ndarray]


class Solver:
    def __init__(self, config: Optional[SolverConfig] = None, cache: Optional["SolutionCache"] = None) -> None:
        self.config = config or SolverConfig()
        self.cache = cache

    def solve(self, board: Board) -> SolveResult:
        if board.state == BoardState.READY_TO_SOLVE:
            board.change_state(BoardState.SOLVING, by_solver=True)
        elif board.state != BoardState.SOLVING:
            raise InvalidStateTransition(f"Cannot solve a board that is {board.state.value}")

        try:
            result = self._cached_or_search(board)
        except BaseException:
            # Never leave the board stuck in solving.
            board.change_state(BoardState.READY_TO_SOLVE, by_solver=True)
            raise

        if result.solved:
            board.change_state(BoardState.SOLVED, by_solver=True)
            logger.info(
                "Board %s solved in %d moves after exploring %d states",
                board.id,
                len(result.moves),
                result.explored,
            )
        else:
            board.change_state(BoardState.READY_TO_SOLVE, by_solver=True)
            logger.info("Board %s unable to solve (%s) after exploring %d states", board.id, result.outcome.value, result.explored)
        return result

    def _cached_or_search(self, board: Board) -> SolveResult:
        if self.cache is not None:
            cached = self.cache.get(board)
            if cached is not None:
                logger.info("Board %s served from the solution cache", board.id)
                return cached
        logger.info("Solving board %s with %d blocks", board.id, len(board.blocks))
        result = self._search(tuple(board.blocks), board.rules)
        if self.cache is not None:
            self.cache.put(board, result)
        return result

    def _search(self, start: Tuple[PlacedBlock, ...], rules: PuzzleRules) -> SolveResult:
        owner = build_owner_grid(start, rules.rows, rules.cols)
        lut = variant_lookup(start)
        start_key = lut[owner].tobytes()

        parents: Dict[bytes, Optional[Tuple[bytes, Move]]] = {start_key: None}
        frontier: Deque[Tuple[bytes, _Node]] = deque([(start_key, (start, owner))])
        budget = self.config.max_states
        explored = 0

        while frontier:
            if budget is not None and explored >= budget:
                return SolveResult(SolveOutcome.BUDGET_EXHAUSTED, explored=explored)
            key, (blocks, owner) = frontier.popleft()
            explored += 1

            if rules.is_goal(blocks):
                return SolveResult(SolveOutcome.SOLVED, _path_to(key, parents), explored)

            for idx, block in enumerate(blocks):
                for step in legal_steps(owner, block, idx):
                    moved = block.shifted(step.row_diff, step.col_diff)
                    child_owner = owner.copy()
                    for row, col in block.cells():
                        child_owner[row, col] = EMPTY
                    for row, col in moved.cells():
                        child_owner[row, col] = idx
                    child_key = lut[child_owner].tobytes()
                    if child_key in parents:
                        continue
                    parents[child_key] = (key, Move.from_step(idx, step))
                    child_blocks = blocks[:idx] + (moved,) + blocks[idx + 1 :]
                    frontier.append((child_key, (child_blocks, child_owner)))

        return SolveResult(SolveOutcome.UNSOLVABLE, explored=explored)


def canonical_key(blocks: Sequence[PlacedBlock], rules: PuzzleRules) -> bytes:
    """Variant-per-cell bytes of a layout; identical blocks are interchangeable."""
    owner = build_owner_grid(blocks, rules.rows, rules.cols)
    return variant_lookup(blocks)[owner].tobytes()


def _path_to(key: bytes, parents: Dict[bytes, Optional[Tuple[bytes, Move]]]) -> List[Move]:
    moves: List[Move] = []
    link = parents[key]
    while link is not None:
        key, move = link
        moves.append(move)
        link = parents[key]
    moves.reverse()
    return moves


def solve(board: Board, config: Optional[SolverConfig] = None) -> SolveResult:
    return Solver(config).solve(board)
