from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Tuple

import numpy as np

from .errors import IllegalMove
from .grid import EMPTY
from .pieces import PlacedBlock

if TYPE_CHECKING:
    from .core import Board


class Step(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def row_diff(self) -> int:
        return self.value[0]

    @property
    def col_diff(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Step":
        return _OPPOSITES[self]


_OPPOSITES: Dict[Step, Step] = {
    Step.UP: Step.DOWN,
    Step.DOWN: Step.UP,
    Step.LEFT: Step.RIGHT,
    Step.RIGHT: Step.LEFT,
}

STEPS: Tuple[Step, ...] = (Step.UP, Step.DOWN, Step.LEFT, Step.RIGHT)


@dataclass(frozen=True)
class Move:
    block_idx: int
    row_diff: int
    col_diff: int

    @classmethod
    def from_step(cls, block_idx: int, step: Step) -> "Move":
        return cls(block_idx, step.row_diff, step.col_diff)

    @property
    def step(self) -> Step:
        return step_for(self.row_diff, self.col_diff)

    def inverse(self) -> "Move":
        return Move(self.block_idx, -self.row_diff, -self.col_diff)

    def to_dict(self) -> dict:
        return {"block_idx": self.block_idx, "row_diff": self.row_diff, "col_diff": self.col_diff}


def step_for(row_diff: int, col_diff: int) -> Step:
    """Return the unit step for a displacement, or raise :class:`IllegalMove`."""
    try:
        return Step((row_diff, col_diff))
    except ValueError:
        raise IllegalMove(f"Displacement ({row_diff}, {col_diff}) is not a unit orthogonal step") from None


def step_is_free(owner: np.ndarray, block: PlacedBlock, block_idx: int, step: Step) -> bool:
    rows, cols = owner.shape
    dr, dc = step.value
    for row, col in block.cells():
        r, c = row + dr, col + dc
        if not (0 <= r < rows and 0 <= c < cols):
            return False
        value = owner[r, c]
        if value != EMPTY and value != block_idx:
            return False
    return True


def legal_steps(owner: np.ndarray, block: PlacedBlock, block_idx: int) -> List[Step]:
    """Unit steps ``block`` can take on ``owner`` without leaving the grid or
    running into another block."""
    return [step for step in STEPS if step_is_free(owner, block, block_idx, step)]


def next_moves(board: "Board") -> List[List[Move]]:
    owner = board.grid.cells
    return [
        [Move.from_step(idx, step) for step in legal_steps(owner, block, idx)]
        for idx, block in enumerate(board.blocks)
    ]
