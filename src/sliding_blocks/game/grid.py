from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .pieces import PlacedBlock


Coordinate = Tuple[int, int]

EMPTY = -1


class OccupancyGrid:
    """Discrete 2D grid of block ownership.

    Each cell holds the index of the block covering it, or ``EMPTY`` (-1).
    The grid is a cache of the board's block list and can always be rebuilt
    from it with :meth:`rebuild`.
    """

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = int(rows)
        self.cols = int(cols)
        self.cells = np.full((self.rows, self.cols), EMPTY, dtype=np.int8)

    def reset(self) -> None:
        self.cells.fill(EMPTY)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def owner(self, row: int, col: int) -> Optional[int]:
        value = int(self.cells[row, col])
        return None if value == EMPTY else value

    def can_place(self, cells: Iterable[Coordinate], ignore: Optional[int] = None) -> bool:
        """True when every cell is inside and empty (or owned by ``ignore``)."""
        for row, col in cells:
            if not self.is_inside(row, col):
                return False
            value = self.cells[row, col]
            if value != EMPTY and value != ignore:
                return False
        return True

    def fill(self, cells: Iterable[Coordinate], block_idx: int) -> None:
        for row, col in cells:
            self.cells[row, col] = block_idx

    def clear(self, cells: Iterable[Coordinate]) -> None:
        for row, col in cells:
            self.cells[row, col] = EMPTY

    def rebuild(self, blocks: Sequence[PlacedBlock]) -> None:
        self.reset()
        for idx, block in enumerate(blocks):
            self.fill(block.cells(), idx)

    def free_cells(self) -> List[Coordinate]:
        rows, cols = np.nonzero(self.cells == EMPTY)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def count_empty(self) -> int:
        return int(np.count_nonzero(self.cells == EMPTY))

    def filled(self) -> np.ndarray:
        return self.cells != EMPTY

    def clone_state(self) -> np.ndarray:
        return self.cells.copy()

    def copy(self) -> "OccupancyGrid":
        new_grid = OccupancyGrid(self.rows, self.cols)
        new_grid.cells = self.cells.copy()
        return new_grid


def build_owner_grid(blocks: Sequence[PlacedBlock], rows: int, cols: int) -> np.ndarray:
    grid = OccupancyGrid(rows, cols)
    grid.rebuild(blocks)
    return grid.cells


def variant_grid(owner: np.ndarray, variant_lut: np.ndarray) -> np.ndarray:
    """Map an owner grid to variant ids (0 for empty).

    ``variant_lut`` holds one variant id per block followed by a trailing 0,
    so that ``EMPTY`` (-1) indexes the zero.
    """
    return variant_lut[owner]


def variant_lookup(blocks: Sequence[PlacedBlock]) -> np.ndarray:
    return np.array([int(b.variant) for b in blocks] + [0], dtype=np.int8)
