"""Conversion between boards and their stored or displayed forms.

A *record* is what the persistence layer keeps:
``{id, is_ready_to_solve, is_solved, blocks, filled, moves}``. A *snapshot*
is what a client is shown after every operation.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import numpy as np

from .core import Board, BoardState
from .errors import BoardError, CorruptRecord
from .moves import Move
from .rules import PuzzleRules


def to_record(board: Board) -> Dict[str, Any]:
    return {
        "id": board.id,
        "is_ready_to_solve": board.state == BoardState.READY_TO_SOLVE,
        "is_solved": board.state == BoardState.SOLVED,
        "blocks": [
            {"variant": int(b.variant), "min_row": b.min_row, "min_col": b.min_col}
            for b in board.blocks
        ],
        "filled": board.grid.filled().tolist(),
        "moves": [m.to_dict() for m in board.history],
    }


def from_record(record: Dict[str, Any], rules: Optional[PuzzleRules] = None) -> Board:
    """Rebuild a board, re-validating every invariant on the way."""
    board = Board(rules, record.get("id"))
    try:
        for entry in record.get("blocks", []):
            board.add_block(entry["variant"], entry["min_row"], entry["min_col"])
        history = [Move(int(m["block_idx"]), int(m["row_diff"]), int(m["col_diff"])) for m in record.get("moves", [])]
    except (BoardError, KeyError, TypeError, ValueError) as exc:
        raise CorruptRecord(f"Board {board.id}: {exc}") from exc

    filled = np.asarray(record.get("filled", board.grid.filled().tolist()), dtype=bool)
    if filled.shape != board.grid.cells.shape or not np.array_equal(filled, board.grid.filled()):
        raise CorruptRecord(f"Board {board.id}: filled cells do not match its blocks")

    # The history has to be fully undoable from the stored position.
    scratch = board.copy()
    scratch.history = list(history)
    try:
        scratch.reset()
    except BoardError as exc:
        raise CorruptRecord(f"Board {board.id}: move history cannot be undone ({exc})") from exc
    board.history = history

    if record.get("is_solved"):
        board.state = BoardState.SOLVED
    elif record.get("is_ready_to_solve"):
        if not board.is_ready():
            raise CorruptRecord(f"Board {board.id}: marked ready but fails the readiness check")
        board.state = BoardState.READY_TO_SOLVE
    return board


def dumps(board: Board) -> str:
    return json.dumps(to_record(board))


def loads(text: str, rules: Optional[PuzzleRules] = None) -> Board:
    try:
        record = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptRecord(str(exc)) from exc
    return from_record(record, rules)


def to_snapshot(board: Board) -> Dict[str, Any]:
    grid: List[Optional[int]] = [
        int(v) if v else None for v in board.variant_grid().reshape(-1).tolist()
    ]
    return {
        "id": board.id,
        "state": board.state.value,
        "blocks": [
            {
                "variant": int(b.variant),
                "min_position": list(b.min_position),
                "max_position": list(b.max_position),
                "range": [list(cell) for cell in b.cells()],
            }
            for b in board.blocks
        ],
        "grid": grid,
        "next_moves": [
            [{"row_diff": m.row_diff, "col_diff": m.col_diff} for m in moves]
            for moves in board.next_moves()
        ],
    }
