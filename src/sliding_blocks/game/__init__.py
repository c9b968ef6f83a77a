"""Game module for sliding-block puzzles.

Exports the puzzle engine and supporting classes:
- Board / BoardState: block layout, occupancy, lifecycle and move history
- OccupancyGrid: cell -> block index cache
- BlockVariant / PlacedBlock: the four block shapes and their placement
- Move / Step: unit moves and the legality engine
- PuzzleRules: grid size, goal predicate and readiness guard
- Randomizer: random board generation
"""

from .core import Board, BoardState
from .errors import (
    BadRequest,
    BlockIndexOutOfRange,
    BoardError,
    BoardNotEditable,
    BoardNotFound,
    CorruptRecord,
    IllegalMove,
    InvalidBlockVariant,
    InvalidPlacement,
    InvalidStateTransition,
    NoMoveToUndo,
)
from .grid import OccupancyGrid
from .moves import Move, Step, legal_steps, next_moves
from .pieces import BlockVariant, PlacedBlock
from .randomizer import Randomizer, RandomizerConfig, randomize
from .rules import CLASSIC_RULES, PuzzleRules

__all__ = [
    "Board",
    "BoardState",
    "OccupancyGrid",
    "BlockVariant",
    "PlacedBlock",
    "Move",
    "Step",
    "legal_steps",
    "next_moves",
    "PuzzleRules",
    "CLASSIC_RULES",
    "Randomizer",
    "RandomizerConfig",
    "randomize",
    "BoardError",
    "InvalidPlacement",
    "IllegalMove",
    "BlockIndexOutOfRange",
    "InvalidStateTransition",
    "NoMoveToUndo",
    "InvalidBlockVariant",
    "BoardNotEditable",
    "CorruptRecord",
    "BoardNotFound",
    "BadRequest",
]
