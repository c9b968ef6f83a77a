def assert_consistent(board):
    """Occupancy matches the block list and no two blocks overlap."""
    assert board.check_consistency()
    seen = set()
    for block in board.blocks:
        cells = set(block.cells())
        assert not (cells & seen)
        seen |= cells
    assert board.grid.count_empty() == board.grid.rows * board.grid.cols - len(seen)
