import os

import pytest

from sliding_blocks.game import Board, BlockVariant, PuzzleRules
from sliding_blocks.layouts import LAYOUTS, build_board

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")


# Goal and readiness without the classic "two empty cells" constraint, so
# small hand-made boards can be solved.
OPEN_RULES = PuzzleRules(empty_cells=None)


@pytest.fixture
def board():
    return Board()


@pytest.fixture
def open_board():
    return Board(OPEN_RULES)


@pytest.fixture
def easy_board():
    return build_board(LAYOUTS["easy"])


@pytest.fixture
def classic_board():
    return build_board(LAYOUTS["classic"])


@pytest.fixture
def single_cell_rules():
    """A lone 1x1 key block that has to reach the bottom-right cell."""
    return PuzzleRules(
        key_variant=BlockVariant.ONE_BY_ONE,
        target_row=4,
        target_col=3,
        empty_cells=None,
    )

