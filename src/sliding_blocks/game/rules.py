from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from .pieces import BlockVariant, PlacedBlock, Position

if TYPE_CHECKING:
    from .core import Board


@dataclass(frozen=True)
class PuzzleRules:
    """Grid size, goal predicate and readiness guard of a puzzle.

    The defaults describe the classic puzzle: a single 2x2 block must reach
    the bottom-centre of a 5x4 board that has exactly two empty cells.
    """

    rows: int = 5
    cols: int = 4
    key_variant: BlockVariant = BlockVariant.TWO_BY_TWO
    target_row: int = 3
    target_col: int = 1
    key_block_count: Optional[int] = 1
    empty_cells: Optional[int] = 2

    @property
    def target(self) -> Position:
        return (self.target_row, self.target_col)

    def target_block(self) -> PlacedBlock:
        return PlacedBlock(self.key_variant, self.target_row, self.target_col)

    def is_goal(self, blocks: Iterable[PlacedBlock]) -> bool:
        return any(
            b.variant == self.key_variant and b.min_position == self.target for b in blocks
        )

    def is_ready(self, board: "Board") -> bool:
        if not board.blocks:
            return False
        if not board.check_consistency():
            return False
        if self.key_block_count is not None:
            keys = sum(1 for b in board.blocks if b.variant == self.key_variant)
            if keys != self.key_block_count:
                return False
        if self.empty_cells is not None and board.grid.count_empty() != self.empty_cells:
            return False
        return True


CLASSIC_RULES = PuzzleRules()
