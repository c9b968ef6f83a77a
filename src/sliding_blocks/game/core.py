from __future__ import annotations

import logging
import operator
import uuid
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

import numpy as np

from .errors import (
    BlockIndexOutOfRange,
    BoardNotEditable,
    IllegalMove,
    InvalidPlacement,
    InvalidStateTransition,
    NoMoveToUndo,
)
from .grid import OccupancyGrid, variant_grid, variant_lookup
from .moves import Move, next_moves, step_for, step_is_free
from .pieces import BlockVariant, PlacedBlock
from .rules import PuzzleRules

logger = logging.getLogger(__name__)


class BoardState(str, Enum):
    BUILDING = "building"
    READY_TO_SOLVE = "ready_to_solve"
    SOLVING = "solving"
    SOLVED = "solved"


# Edges a caller may request directly, and those reserved for the solver.
_USER_EDGES: FrozenSet[Tuple[BoardState, BoardState]] = frozenset(
    {
        (BoardState.BUILDING, BoardState.READY_TO_SOLVE),
        (BoardState.READY_TO_SOLVE, BoardState.BUILDING),
    }
)
_SOLVER_EDGES: FrozenSet[Tuple[BoardState, BoardState]] = frozenset(
    {
        (BoardState.READY_TO_SOLVE, BoardState.SOLVING),
        (BoardState.SOLVING, BoardState.SOLVED),
        (BoardState.SOLVING, BoardState.READY_TO_SOLVE),
    }
)

_EDITABLE = (BoardState.BUILDING, BoardState.READY_TO_SOLVE)


class Board:
    """A sliding-block puzzle under construction or being played.

    Blocks live in a dense list and are referred to by their position in it
    (``block_idx``). Removing a block shifts every later index down by one, so
    callers must treat indices held across a removal as stale.
    """

    def __init__(self, rules: Optional[PuzzleRules] = None, board_id: Optional[str] = None) -> None:
        self.rules = rules or PuzzleRules()
        self.id = board_id or uuid.uuid4().hex
        self.blocks: List[PlacedBlock] = []
        self.grid = OccupancyGrid(self.rules.rows, self.rules.cols)
        self.state = BoardState.BUILDING
        self.history: List[Move] = []

    def __repr__(self) -> str:
        return f"Board(id={self.id!r}, state={self.state.value}, blocks={len(self.blocks)}, moves={len(self.history)})"

    # -- helpers --------------------------------------------------------------

    def _require_editable(self) -> None:
        if self.state not in _EDITABLE:
            raise BoardNotEditable(f"Board is {self.state.value}")

    def _require_index(self, block_idx: int) -> PlacedBlock:
        try:
            block_idx = operator.index(block_idx)
        except TypeError:
            raise BlockIndexOutOfRange(f"Block index {block_idx!r} is not an integer") from None
        if not 0 <= block_idx < len(self.blocks):
            raise BlockIndexOutOfRange(
                f"Block index {block_idx} is out of range for {len(self.blocks)} blocks"
            )
        return self.blocks[block_idx]

    def _structure_changed(self) -> None:
        # Recorded moves refer to the old layout and may no longer be reversible.
        self.history.clear()
        if self.state == BoardState.READY_TO_SOLVE:
            self.state = BoardState.BUILDING

    def _placement_ok(self, block: PlacedBlock, ignore: Optional[int] = None) -> bool:
        return block.fits(self.grid.rows, self.grid.cols) and self.grid.can_place(block.cells(), ignore)

    # -- block editing --------------------------------------------------------

    def add_block(self, variant: "BlockVariant | int | str", min_row: int, min_col: int) -> int:
        self._require_editable()
        block = PlacedBlock(BlockVariant.parse(variant), int(min_row), int(min_col))
        if not self._placement_ok(block):
            raise InvalidPlacement(
                f"{block.variant.name} at ({block.min_row}, {block.min_col}) is out of bounds or overlaps"
            )
        block_idx = len(self.blocks)
        self.blocks.append(block)
        self.grid.fill(block.cells(), block_idx)
        self._structure_changed()
        logger.debug("Board %s: added %s at %s as block %d", self.id, block.variant.name, block.min_position, block_idx)
        return block_idx

    def change_block(self, block_idx: int, new_variant: "BlockVariant | int | str") -> None:
        self._require_editable()
        old = self._require_index(block_idx)
        variant = BlockVariant.parse(new_variant)
        if variant == old.variant:
            return
        new = old.with_variant(variant)
        if not self._placement_ok(new, ignore=block_idx):
            raise InvalidPlacement(
                f"{variant.name} at ({new.min_row}, {new.min_col}) is out of bounds or overlaps"
            )
        self.grid.clear(old.cells())
        self.grid.fill(new.cells(), block_idx)
        self.blocks[block_idx] = new
        self._structure_changed()
        logger.debug("Board %s: block %d changed %s -> %s", self.id, block_idx, old.variant.name, variant.name)

    def remove_block(self, block_idx: int) -> PlacedBlock:
        self._require_editable()
        self._require_index(block_idx)
        removed = self.blocks.pop(block_idx)
        self.grid.rebuild(self.blocks)
        self._structure_changed()
        logger.debug("Board %s: removed block %d (%s)", self.id, block_idx, removed.variant.name)
        return removed

    # -- moves ----------------------------------------------------------------

    def _shift(self, block_idx: int, row_diff: int, col_diff: int) -> Move:
        block = self._require_index(block_idx)
        step = step_for(row_diff, col_diff)
        if not step_is_free(self.grid.cells, block, block_idx, step):
            raise IllegalMove(f"Block {block_idx} cannot move {step.name.lower()}")
        moved = block.shifted(step.row_diff, step.col_diff)
        self.grid.clear(block.cells())
        self.grid.fill(moved.cells(), block_idx)
        self.blocks[block_idx] = moved
        return Move.from_step(block_idx, step)

    def apply_move(self, block_idx: int, row_diff: int, col_diff: int) -> Move:
        self._require_editable()
        move = self._shift(block_idx, row_diff, col_diff)
        self.history.append(move)
        logger.debug("Board %s: moved block %d by (%d, %d)", self.id, block_idx, move.row_diff, move.col_diff)
        return move

    def undo_last_move(self) -> Move:
        self._require_editable()
        if not self.history:
            raise NoMoveToUndo()
        move = self.history[-1]
        inverse = move.inverse()
        self._shift(inverse.block_idx, inverse.row_diff, inverse.col_diff)
        self.history.pop()
        return move

    def reset(self) -> int:
        self._require_editable()
        undone = 0
        while self.history:
            self.undo_last_move()
            undone += 1
        return undone

    # -- lifecycle ------------------------------------------------------------

    def change_state(self, new_state: "BoardState | str", *, by_solver: bool = False) -> None:
        try:
            target = BoardState(new_state)
        except ValueError:
            raise InvalidStateTransition(f"Unknown board state {new_state!r}") from None
        if target == self.state:
            return
        edge = (self.state, target)
        allowed = edge in _USER_EDGES or (by_solver and edge in _SOLVER_EDGES)
        if not allowed:
            raise InvalidStateTransition(
                f"Cannot change board state from {self.state.value} to {target.value}"
            )
        if target == BoardState.READY_TO_SOLVE and self.state == BoardState.BUILDING and not self.is_ready():
            raise InvalidStateTransition("Board not ready to solve")
        logger.debug("Board %s: %s -> %s", self.id, self.state.value, target.value)
        self.state = target

    # -- queries --------------------------------------------------------------

    def is_ready(self) -> bool:
        return self.rules.is_ready(self)

    def is_solved(self) -> bool:
        return self.rules.is_goal(self.blocks)

    def next_moves(self) -> List[List[Move]]:
        return next_moves(self)

    def variant_grid(self) -> np.ndarray:
        return variant_grid(self.grid.cells, variant_lookup(self.blocks))

    def check_consistency(self) -> bool:
        """True when the occupancy grid is exactly the projection of ``blocks``."""
        expected = OccupancyGrid(self.grid.rows, self.grid.cols)
        for idx, block in enumerate(self.blocks):
            if not block.fits(expected.rows, expected.cols) or not expected.can_place(block.cells()):
                return False
            expected.fill(block.cells(), idx)
        return bool(np.array_equal(expected.cells, self.grid.cells))

    def copy(self) -> "Board":
        new_board = Board(self.rules, self.id)
        new_board.blocks = list(self.blocks)
        new_board.grid = self.grid.copy()
        new_board.state = self.state
        new_board.history = list(self.history)
        return new_board

