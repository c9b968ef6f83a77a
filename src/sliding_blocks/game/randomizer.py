from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .core import Board, BoardState
from .errors import BoardNotEditable, InvalidPlacement
from .pieces import BlockVariant, PlacedBlock, Position
from .rules import PuzzleRules

logger = logging.getLogger(__name__)


@dataclass
class RandomizerConfig:
    max_attempts: int = 2000
    seed: Optional[int] = None
    place_key_first: bool = True
    # Stop once no more than this many cells are left empty.
    min_empty_cells: int = 2
    mark_ready: bool = True


class Randomizer:
    """Fill an empty board with a random non-overlapping layout.

    Nothing here checks that the resulting puzzle can be solved.
    """

    def __init__(self, config: Optional[RandomizerConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or RandomizerConfig()
        self.rng = rng or random.Random(self.config.seed)

    def _catalog(self, board: Board) -> List[BlockVariant]:
        variants = list(BlockVariant)
        if self.config.place_key_first:
            variants.remove(board.rules.key_variant)
        return variants

    def _key_anchors(self, rules: PuzzleRules) -> List[Position]:
        """Anchors for the key block that keep it clear of the target rows.

        Falls back to every anchor other than the target when the target sits
        too high for the key to start above it.
        """
        rows, cols = rules.key_variant.dimensions
        anchors = [
            (row, col)
            for row in range(rules.rows - rows + 1)
            for col in range(rules.cols - cols + 1)
        ]
        above = [(row, col) for row, col in anchors if row + rows <= rules.target_row]
        return above or [anchor for anchor in anchors if anchor != rules.target]

    def _place_key_block(self, board: Board) -> None:
        anchors = self._key_anchors(board.rules)
        if not anchors:
            raise InvalidPlacement("No starting anchor for the key block away from the target")
        min_row, min_col = self.rng.choice(anchors)
        board.add_block(board.rules.key_variant, min_row, min_col)

    def _can_place_any(self, board: Board, catalog: List[BlockVariant]) -> bool:
        for row, col in board.grid.free_cells():
            for variant in catalog:
                block = PlacedBlock(variant, row, col)
                if block.fits(board.grid.rows, board.grid.cols) and board.grid.can_place(block.cells()):
                    return True
        return False

    def populate(self, board: Board) -> int:
        """Place random blocks on ``board`` and return how many were added."""
        if board.blocks or board.state != BoardState.BUILDING:
            raise BoardNotEditable("Only an empty board that is building can be randomized")

        placed = 0
        if self.config.place_key_first:
            self._place_key_block(board)
            placed += 1

        catalog = self._catalog(board)
        attempts = 0
        while attempts < self.config.max_attempts:
            if board.grid.count_empty() <= self.config.min_empty_cells:
                break
            if not self._can_place_any(board, catalog):
                break
            attempts += 1
            variant = self.rng.choice(catalog)
            row = self.rng.randrange(board.rules.rows)
            col = self.rng.randrange(board.rules.cols)
            try:
                board.add_block(variant, row, col)
            except InvalidPlacement:
                continue
            placed += 1

        if self.config.mark_ready and board.is_ready():
            board.change_state(BoardState.READY_TO_SOLVE)

        logger.info(
            "Randomized board %s: %d blocks in %d attempts, %d empty cells, state %s",
            board.id,
            placed,
            attempts,
            board.grid.count_empty(),
            board.state.value,
        )
        return placed


def randomize(board: Board, config: Optional[RandomizerConfig] = None) -> int:
    return Randomizer(config).populate(board)
