"""Board operations as a request-handling layer would call them.

Each call loads the stored record, applies one mutation while holding that
board's lock, stores the result and returns a snapshot. Boards with different
ids never contend.
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

from sliding_blocks.game import (
    BadRequest,
    BlockIndexOutOfRange,
    Board,
    BoardError,
    BoardNotEditable,
    BoardNotFound,
    IllegalMove,
    InvalidBlockVariant,
    InvalidPlacement,
    InvalidStateTransition,
    NoMoveToUndo,
    PuzzleRules,
    Randomizer,
    RandomizerConfig,
)
from sliding_blocks.game.records import dumps, loads, to_snapshot
from sliding_blocks.solver import SolutionCache, Solver, SolverConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STATUS_CODES = {
    InvalidPlacement: 400,
    IllegalMove: 400,
    BlockIndexOutOfRange: 400,
    InvalidBlockVariant: 400,
    BadRequest: 400,
    InvalidStateTransition: 403,
    NoMoveToUndo: 403,
    BoardNotEditable: 403,
    BoardNotFound: 404,
}


def error_status(exc: BoardError) -> int:
    """HTTP-style status for a rejected operation (500 when unmapped)."""
    for kind, status in _STATUS_CODES.items():
        if isinstance(exc, kind):
            return status
    return 500


def _block_index(value: Any) -> int:
    """Accept an int or a decimal string; anything else is a bad request."""
    if isinstance(value, bool):
        raise BadRequest(f"Invalid block index {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise BadRequest(f"Invalid block index {value!r}")


class InMemoryBoardRepository:
    """Keeps board records as JSON text keyed by board id."""

    def __init__(self) -> None:
        self._records: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create(self, board: Board) -> None:
        with self._lock:
            self._records[board.id] = dumps(board)

    def get(self, board_id: str, rules: Optional[PuzzleRules] = None) -> Board:
        with self._lock:
            text = self._records.get(board_id)
        if text is None:
            raise BoardNotFound(f"No board with id {board_id}")
        return loads(text, rules)

    def save(self, board: Board) -> None:
        with self._lock:
            if board.id not in self._records:
                raise BoardNotFound(f"No board with id {board.id}")
            self._records[board.id] = dumps(board)

    def delete(self, board_id: str) -> None:
        with self._lock:
            if self._records.pop(board_id, None) is None:
                raise BoardNotFound(f"No board with id {board_id}")

    def __contains__(self, board_id: object) -> bool:
        with self._lock:
            return board_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class BoardService:
    def __init__(
        self,
        repository: Optional[InMemoryBoardRepository] = None,
        rules: Optional[PuzzleRules] = None,
        solver_config: Optional[SolverConfig] = None,
        randomizer_config: Optional[RandomizerConfig] = None,
    ) -> None:
        self.repository = repository or InMemoryBoardRepository()
        self.rules = rules or PuzzleRules()
        self.solutions = SolutionCache()
        self.solver = Solver(solver_config, cache=self.solutions)
        self.randomizer_config = randomizer_config or RandomizerConfig()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _board_lock(self, board_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.get(board_id)
            if lock is None:
                # Only boards that exist get a lock.
                if board_id not in self.repository:
                    raise BoardNotFound(f"No board with id {board_id}")
                lock = self._locks[board_id] = threading.Lock()
        with lock:
            yield

    def _update(self, board_id: str, update_fn: Callable[[Board], T]) -> Board:
        with self._board_lock(board_id):
            board = self.repository.get(board_id, self.rules)
            update_fn(board)
            self.repository.save(board)
        return board

    def create_board(self, randomize: bool = False) -> Dict[str, Any]:
        board = Board(self.rules, uuid.uuid4().hex)
        if randomize:
            Randomizer(self.randomizer_config).populate(board)
        self.repository.create(board)
        logger.info("Created board %s (randomized=%s)", board.id, randomize)
        return to_snapshot(board)

    def get_board(self, board_id: str) -> Dict[str, Any]:
        return to_snapshot(self.repository.get(board_id, self.rules))

    def delete_board(self, board_id: str) -> None:
        with self._board_lock(board_id):
            self.repository.delete(board_id)
        with self._locks_guard:
            self._locks.pop(board_id, None)
        logger.info("Deleted board %s", board_id)

    def add_block(self, board_id: str, variant: Any, min_row: int, min_col: int) -> Dict[str, Any]:
        logger.info("Adding block %s at (%s, %s) to board %s", variant, min_row, min_col, board_id)
        return to_snapshot(self._update(board_id, lambda b: b.add_block(variant, min_row, min_col)))

    def alter_block(self, board_id: str, block_idx: Any, request: Dict[str, Any]) -> Dict[str, Any]:
        block_idx = _block_index(block_idx)
        kind = request.get("type")
        if kind == "change_block":
            if "new_block" not in request:
                raise BadRequest("change_block needs new_block")
            update_fn: Callable[[Board], Any] = lambda b: b.change_block(block_idx, request["new_block"])
        elif kind == "move_block":
            try:
                row_diff, col_diff = int(request["row_diff"]), int(request["col_diff"])
            except (KeyError, TypeError, ValueError):
                raise BadRequest("move_block needs integer row_diff and col_diff") from None
            update_fn = lambda b: b.apply_move(block_idx, row_diff, col_diff)
        else:
            raise BadRequest(f"Unknown alter request type {kind!r}")
        logger.info("Altering block %d in board %s: %s", block_idx, board_id, kind)
        return to_snapshot(self._update(board_id, update_fn))

    def remove_block(self, board_id: str, block_idx: Any) -> Dict[str, Any]:
        block_idx = _block_index(block_idx)
        logger.info("Removing block %d from board %s", block_idx, board_id)
        return to_snapshot(self._update(board_id, lambda b: b.remove_block(block_idx)))

    def change_state(self, board_id: str, state: str) -> Dict[str, Any]:
        return to_snapshot(self._update(board_id, lambda b: b.change_state(state)))

    def undo_move(self, board_id: str) -> Dict[str, Any]:
        return to_snapshot(self._update(board_id, lambda b: b.undo_last_move()))

    def reset(self, board_id: str) -> Dict[str, Any]:
        return to_snapshot(self._update(board_id, lambda b: b.reset()))

    def solve(self, board_id: str) -> Dict[str, Any]:
        with self._board_lock(board_id):
            board = self.repository.get(board_id, self.rules)
            result = self.solver.solve(board)
            self.repository.save(board)
        return result.to_response()
