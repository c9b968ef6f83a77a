from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from sliding_blocks.game import Board, BlockVariant, BoardState, InvalidBlockVariant, PuzzleRules

# (variant id, min_row, min_col) per block
Layout = List[Tuple[int, int, int]]

LAYOUTS: Dict[str, Layout] = {
    "classic": [
        (3, 0, 0), (4, 0, 1), (3, 0, 3),
        (3, 2, 0), (2, 2, 1), (3, 2, 3),
        (1, 3, 1), (1, 3, 2),
        (1, 4, 0), (1, 4, 3),
    ],
    "easy": [
        (1, 0, 0), (4, 0, 1), (1, 0, 3),
        (1, 1, 0), (1, 1, 3),
        (3, 2, 0), (1, 2, 1), (1, 2, 2), (3, 2, 3),
        (1, 3, 1), (1, 3, 2),
        (1, 4, 0), (1, 4, 3),
    ],
    "medium": [
        (1, 0, 0), (4, 0, 1), (1, 0, 3),
        (1, 1, 0), (1, 1, 3),
        (3, 2, 0), (3, 2, 1), (2, 2, 2),
        (2, 3, 2),
        (2, 4, 1),
    ],
    "hard": [
        (1, 0, 0), (4, 0, 1), (1, 0, 3),
        (3, 1, 0), (3, 1, 3),
        (2, 2, 1),
        (1, 3, 0), (1, 3, 3), (2, 3, 1),
        (2, 4, 1),
    ],
}


def build_board(
    layout: Iterable[Tuple[int, int, int]],
    rules: Optional[PuzzleRules] = None,
    mark_ready: bool = True,
) -> Board:
    board = Board(rules)
    for variant, min_row, min_col in layout:
        board.add_block(variant, min_row, min_col)
    if mark_ready and board.is_ready():
        board.change_state(BoardState.READY_TO_SOLVE)
    return board


def parse_block(text: str) -> Tuple[int, int, int]:
    """Parse ``VARIANT@ROW,COL`` such as ``4@0,1`` or ``two_by_two@0,1``."""
    try:
        variant, position = text.split("@")
        row, col = position.split(",")
        return int(BlockVariant.parse(variant.strip())), int(row), int(col)
    except ValueError:
        raise InvalidBlockVariant(f"Cannot parse block {text!r}; expected VARIANT@ROW,COL") from None
