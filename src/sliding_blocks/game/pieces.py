from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, List, Tuple

from .errors import InvalidBlockVariant


Position = Tuple[int, int]


class BlockVariant(IntEnum):
    ONE_BY_ONE = 1
    ONE_BY_TWO = 2
    TWO_BY_ONE = 3
    TWO_BY_TWO = 4

    @classmethod
    def parse(cls, value: "int | str | BlockVariant") -> "BlockVariant":
        """Accept a wire id (1-4), a member name or a member."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and not value.isdigit():
            try:
                return cls[value.upper()]
            except KeyError:
                raise InvalidBlockVariant(f"Unknown block variant {value!r}") from None
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidBlockVariant(f"Unknown block variant {value!r}") from None

    @property
    def dimensions(self) -> Tuple[int, int]:
        return DIMENSIONS[self]

    @property
    def rows(self) -> int:
        return DIMENSIONS[self][0]

    @property
    def cols(self) -> int:
        return DIMENSIONS[self][1]


# (rows, cols) spanned by each variant
DIMENSIONS: Dict[BlockVariant, Tuple[int, int]] = {
    BlockVariant.ONE_BY_ONE: (1, 1),
    BlockVariant.ONE_BY_TWO: (1, 2),
    BlockVariant.TWO_BY_ONE: (2, 1),
    BlockVariant.TWO_BY_TWO: (2, 2),
}


@dataclass(frozen=True)
class PlacedBlock:
    variant: BlockVariant
    min_row: int
    min_col: int

    @property
    def min_position(self) -> Position:
        return (self.min_row, self.min_col)

    @property
    def max_position(self) -> Position:
        rows, cols = self.variant.dimensions
        return (self.min_row + rows - 1, self.min_col + cols - 1)

    def cells(self) -> Iterator[Position]:
        rows, cols = self.variant.dimensions
        for dr in range(rows):
            for dc in range(cols):
                yield (self.min_row + dr, self.min_col + dc)

    def cell_range(self) -> List[Position]:
        return list(self.cells())

    def shifted(self, row_diff: int, col_diff: int) -> "PlacedBlock":
        return PlacedBlock(self.variant, self.min_row + row_diff, self.min_col + col_diff)

    def with_variant(self, variant: BlockVariant) -> "PlacedBlock":
        return PlacedBlock(variant, self.min_row, self.min_col)

    def fits(self, rows: int, cols: int) -> bool:
        max_row, max_col = self.max_position
        return self.min_row >= 0 and self.min_col >= 0 and max_row < rows and max_col < cols
