import random

import numpy as np
import pytest

from sliding_blocks.game import (
    BlockIndexOutOfRange,
    BlockVariant,
    Board,
    BoardNotEditable,
    BoardState,
    IllegalMove,
    InvalidPlacement,
    InvalidStateTransition,
    Move,
    NoMoveToUndo,
    PlacedBlock,
)
from sliding_blocks.layouts import LAYOUTS, build_board

from helpers import assert_consistent


def _snapshot(board):
    return (list(board.blocks), board.grid.clone_state(), list(board.history), board.state)


def _assert_unchanged(board, before):
    blocks, cells, history, state = before
    assert board.blocks == blocks
    assert np.array_equal(board.grid.cells, cells)
    assert board.history == history
    assert board.state == state


def test_new_board_is_empty_and_building(board):
    assert board.blocks == []
    assert board.history == []
    assert board.state == BoardState.BUILDING
    assert board.grid.count_empty() == 20


def test_add_block_returns_index_and_fills_cells(board):
    assert board.add_block(BlockVariant.TWO_BY_TWO, 0, 1) == 0
    assert board.add_block(1, 4, 0) == 1
    assert board.grid.owner(0, 1) == 0
    assert board.grid.owner(1, 2) == 0
    assert board.grid.owner(4, 0) == 1
    assert board.grid.owner(4, 1) is None
    assert_consistent(board)


@pytest.mark.parametrize(
    "variant,row,col",
    [
        (BlockVariant.TWO_BY_TWO, 4, 3),  # out of bounds
        (BlockVariant.ONE_BY_TWO, 0, 3),
        (BlockVariant.TWO_BY_ONE, 4, 0),
        (BlockVariant.ONE_BY_ONE, -1, 0),
        (BlockVariant.ONE_BY_ONE, 1, 2),  # overlaps the 2x2
    ],
)
def test_add_block_rejects_invalid_placement(board, variant, row, col):
    board.add_block(BlockVariant.TWO_BY_TWO, 0, 1)
    before = _snapshot(board)
    with pytest.raises(InvalidPlacement):
        board.add_block(variant, row, col)
    _assert_unchanged(board, before)


def test_change_block(board):
    board.add_block(BlockVariant.ONE_BY_ONE, 0, 0)
    board.add_block(BlockVariant.ONE_BY_ONE, 2, 0)
    board.change_block(0, BlockVariant.TWO_BY_TWO)
    assert board.blocks[0] == PlacedBlock(BlockVariant.TWO_BY_TWO, 0, 0)
    assert board.grid.owner(1, 1) == 0
    assert board.blocks[1] == PlacedBlock(BlockVariant.ONE_BY_ONE, 2, 0)
    board.change_block(0, BlockVariant.ONE_BY_TWO)
    assert board.grid.owner(1, 1) is None
    assert_consistent(board)


def test_change_block_rejections_leave_board_unchanged(board):
    board.add_block(BlockVariant.ONE_BY_ONE, 0, 0)
    board.add_block(BlockVariant.ONE_BY_ONE, 1, 0)
    board.add_block(BlockVariant.ONE_BY_ONE, 4, 3)
    before = _snapshot(board)
    with pytest.raises(InvalidPlacement):
        board.change_block(0, BlockVariant.TWO_BY_ONE)  # overlaps block 1
    with pytest.raises(InvalidPlacement):
        board.change_block(2, BlockVariant.TWO_BY_TWO)  # out of bounds
    with pytest.raises(BlockIndexOutOfRange):
        board.change_block(3, BlockVariant.ONE_BY_ONE)
    _assert_unchanged(board, before)


def test_remove_block_shifts_later_indices(board):
    board.add_block(BlockVariant.ONE_BY_ONE, 0, 0)
    board.add_block(BlockVariant.ONE_BY_TWO, 1, 0)
    board.add_block(BlockVariant.TWO_BY_ONE, 2, 3)
    removed = board.remove_block(0)
    assert removed == PlacedBlock(BlockVariant.ONE_BY_ONE, 0, 0)
    assert [b.variant for b in board.blocks] == [BlockVariant.ONE_BY_TWO, BlockVariant.TWO_BY_ONE]
    assert board.grid.owner(0, 0) is None
    assert board.grid.owner(1, 1) == 0
    assert board.grid.owner(3, 3) == 1
    assert_consistent(board)


def test_remove_block_out_of_range(board):
    board.add_block(BlockVariant.ONE_BY_ONE, 0, 0)
    before = _snapshot(board)
    with pytest.raises(BlockIndexOutOfRange):
        board.remove_block(1)
    with pytest.raises(BlockIndexOutOfRange):
        board.remove_block(-1)
    _assert_unchanged(board, before)


def test_remove_block_demotes_ready_board(classic_board):
    assert classic_board.state == BoardState.READY_TO_SOLVE
    classic_board.remove_block(9)
    assert classic_board.state == BoardState.BUILDING
    assert not classic_board.is_ready()


def test_apply_move_updates_occupancy_and_history(classic_board):
    # 1x1 at (3, 1) can drop into the empty (4, 1)
    move = classic_board.apply_move(6, 1, 0)
    assert move == Move(6, 1, 0)
    assert classic_board.blocks[6] == PlacedBlock(BlockVariant.ONE_BY_ONE, 4, 1)
    assert classic_board.grid.owner(3, 1) is None
    assert classic_board.grid.owner(4, 1) == 6
    assert classic_board.history == [move]
    assert_consistent(classic_board)


def test_apply_move_two_cell_block_into_own_cells(open_board):
    open_board.add_block(BlockVariant.ONE_BY_TWO, 0, 0)
    open_board.apply_move(0, 0, 1)
    assert open_board.blocks[0].cell_range() == [(0, 1), (0, 2)]
    assert_consistent(open_board)


@pytest.mark.parametrize("diff", [(0, 0), (1, 1), (2, 0), (0, -2), (-1, 1)])
def test_apply_move_rejects_non_unit_steps(classic_board, diff):
    before = _snapshot(classic_board)
    with pytest.raises(IllegalMove):
        classic_board.apply_move(6, *diff)
    _assert_unchanged(classic_board, before)


def test_apply_move_rejects_blocked_and_out_of_bounds(classic_board):
    before = _snapshot(classic_board)
    with pytest.raises(IllegalMove):
        classic_board.apply_move(1, 1, 0)  # key block runs into the 1x2
    with pytest.raises(IllegalMove):
        classic_board.apply_move(0, -1, 0)  # off the top edge
    with pytest.raises(BlockIndexOutOfRange):
        classic_board.apply_move(10, 1, 0)
    _assert_unchanged(classic_board, before)


def test_undo_restores_previous_position(classic_board):
    before_blocks = list(classic_board.blocks)
    before_cells = classic_board.grid.clone_state()
    classic_board.apply_move(6, 1, 0)
    undone = classic_board.undo_last_move()
    assert undone == Move(6, 1, 0)
    assert classic_board.blocks == before_blocks
    assert np.array_equal(classic_board.grid.cells, before_cells)
    assert classic_board.history == []


def test_undo_on_empty_history_fails_without_mutation(classic_board):
    before = _snapshot(classic_board)
    for _ in range(2):
        with pytest.raises(NoMoveToUndo):
            classic_board.undo_last_move()
    _assert_unchanged(classic_board, before)


def test_reset_is_idempotent():
    board = build_board(LAYOUTS["easy"])
    start = _snapshot(board)
    rng = random.Random(7)
    applied = 0
    for _ in range(25):
        moves = [m for per_block in board.next_moves() for m in per_block]
        if not moves:
            break
        move = rng.choice(moves)
        board.apply_move(move.block_idx, move.row_diff, move.col_diff)
        applied += 1
    assert applied > 0
    assert len(board.history) == applied
    assert board.reset() == applied
    _assert_unchanged(board, start)
    assert board.reset() == 0
    _assert_unchanged(board, start)


def test_random_operations_keep_invariants():
    rng = random.Random(1234)
    board = Board()
    for _ in range(400):
        op = rng.choice(["add", "change", "remove", "move", "undo"])
        try:
            if op == "add":
                board.add_block(rng.randint(1, 4), rng.randrange(-1, 6), rng.randrange(-1, 5))
            elif op == "change":
                board.change_block(rng.randrange(-1, len(board.blocks) + 1), rng.randint(1, 4))
            elif op == "remove":
                board.remove_block(rng.randrange(-1, len(board.blocks) + 1))
            elif op == "move":
                board.apply_move(
                    rng.randrange(-1, len(board.blocks) + 1),
                    rng.choice([-1, 0, 1]),
                    rng.choice([-1, 0, 1]),
                )
            else:
                board.undo_last_move()
        except (InvalidPlacement, IllegalMove, BlockIndexOutOfRange, NoMoveToUndo):
            pass
        assert_consistent(board)


def test_structural_edit_clears_history(open_board):
    open_board.add_block(BlockVariant.ONE_BY_ONE, 0, 0)
    open_board.apply_move(0, 1, 0)
    assert open_board.history
    open_board.add_block(BlockVariant.ONE_BY_ONE, 0, 0)
    assert open_board.history == []


def test_state_transitions(classic_board):
    classic_board.change_state(BoardState.BUILDING)
    assert classic_board.state == BoardState.BUILDING
    classic_board.change_state("ready_to_solve")
    assert classic_board.state == BoardState.READY_TO_SOLVE
    # Requesting the current state is a no-op
    classic_board.change_state(BoardState.READY_TO_SOLVE)


def test_ready_guard(board):
    with pytest.raises(InvalidStateTransition):
        board.change_state(BoardState.READY_TO_SOLVE)
    board.add_block(BlockVariant.TWO_BY_TWO, 0, 0)
    with pytest.raises(InvalidStateTransition):
        board.change_state(BoardState.READY_TO_SOLVE)
    assert board.state == BoardState.BUILDING


@pytest.mark.parametrize("target", [BoardState.SOLVING, BoardState.SOLVED, "bogus"])
def test_disallowed_transitions(classic_board, target):
    with pytest.raises(InvalidStateTransition):
        classic_board.change_state(target)
    assert classic_board.state == BoardState.READY_TO_SOLVE


def test_solver_edges_need_solver_flag(classic_board):
    classic_board.change_state(BoardState.SOLVING, by_solver=True)
    with pytest.raises(InvalidStateTransition):
        classic_board.change_state(BoardState.READY_TO_SOLVE)
    with pytest.raises(InvalidStateTransition):
        classic_board.change_state(BoardState.BUILDING, by_solver=True)
    classic_board.change_state(BoardState.SOLVED, by_solver=True)
    with pytest.raises(InvalidStateTransition):
        classic_board.change_state(BoardState.BUILDING)


def test_solving_board_is_not_editable(classic_board):
    classic_board.change_state(BoardState.SOLVING, by_solver=True)
    before = _snapshot(classic_board)
    with pytest.raises(BoardNotEditable):
        classic_board.apply_move(6, 1, 0)
    with pytest.raises(BoardNotEditable):
        classic_board.add_block(BlockVariant.ONE_BY_ONE, 4, 1)
    _assert_unchanged(classic_board, before)


def test_readiness_requires_single_key_and_two_empty_cells(board):
    for variant, row, col in LAYOUTS["classic"]:
        board.add_block(variant, row, col)
    assert board.is_ready()
    board.add_block(BlockVariant.ONE_BY_ONE, 4, 1)
    assert not board.is_ready()


def test_is_solved(open_board):
    open_board.add_block(BlockVariant.TWO_BY_TWO, 2, 1)
    assert not open_board.is_solved()
    open_board.apply_move(0, 1, 0)
    assert open_board.is_solved()


def test_copy_is_independent(classic_board):
    clone = classic_board.copy()
    clone.apply_move(6, 1, 0)
    assert classic_board.history == []
    assert classic_board.grid.owner(3, 1) == 6
    assert clone.id == classic_board.id


@pytest.mark.parametrize("block_idx", ["0", None, 0.0])
def test_non_integer_index_is_rejected(classic_board, block_idx):
    before = _snapshot(classic_board)
    with pytest.raises(BlockIndexOutOfRange):
        classic_board.apply_move(block_idx, 1, 0)
    with pytest.raises(BlockIndexOutOfRange):
        classic_board.remove_block(block_idx)
    _assert_unchanged(classic_board, before)


def test_numpy_integer_index_is_accepted(classic_board):
    assert classic_board.apply_move(np.int64(6), 1, 0) == Move(6, 1, 0)
