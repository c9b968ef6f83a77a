from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pygame

from sliding_blocks.game import Board, BoardError, BoardState, Move, Randomizer, Step
from sliding_blocks.solver import Solver
from .renderer import Renderer

logger = logging.getLogger(__name__)


KEY_TO_STEP: Dict[int, Step] = {
    pygame.K_UP: Step.UP,
    pygame.K_DOWN: Step.DOWN,
    pygame.K_LEFT: Step.LEFT,
    pygame.K_RIGHT: Step.RIGHT,
}


def _random_board() -> Board:
    board = Board()
    Randomizer().populate(board)
    return board


def _plan(board: Board) -> List[Move]:
    """Solve a copy so ``board`` stays editable for the replay."""
    work = board.copy()
    if work.state == BoardState.BUILDING:
        work.change_state(BoardState.READY_TO_SOLVE)
    result = Solver().solve(work)
    return list(result.moves) if result.solved else []


def run(board: Optional[Board] = None) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        board = board or _random_board()
        renderer = Renderer(cell_size=80)
        screen = pygame.display.set_mode(renderer.window_size(board))
        pygame.display.set_caption("Sliding Blocks")
        font = pygame.font.SysFont(None, 24)

        selected: Optional[int] = None
        replay: List[Move] = []
        replay_ms = 250
        last_replay = pygame.time.get_ticks()
        message = ""

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    row, col = renderer.cell_at(event.pos)
                    selected = board.grid.owner(row, col) if board.grid.is_inside(row, col) else None
                elif event.type == pygame.KEYDOWN:
                    try:
                        if event.key == pygame.K_ESCAPE:
                            running = False
                        elif event.key in KEY_TO_STEP and selected is not None:
                            step = KEY_TO_STEP[event.key]
                            board.apply_move(selected, step.row_diff, step.col_diff)
                        elif event.key == pygame.K_u:
                            board.undo_last_move()
                        elif event.key == pygame.K_r:
                            board.reset()
                        elif event.key == pygame.K_n:
                            board = _random_board()
                            selected = None
                            replay = []
                        elif event.key == pygame.K_s:
                            replay = _plan(board)
                            message = f"{len(replay)} moves" if replay else "Unable to solve"
                        else:
                            continue
                        if event.key != pygame.K_s:
                            message = ""
                            replay = []
                    except BoardError as exc:
                        message = str(exc)
                        logger.debug("Rejected key %s: %s", event.key, exc)

            # Replay the planned solution one move at a time
            now = pygame.time.get_ticks()
            if replay and now - last_replay >= replay_ms:
                move = replay.pop(0)
                board.apply_move(move.block_idx, move.row_diff, move.col_diff)
                selected = move.block_idx
                last_replay = now

            renderer.render(screen, board, selected)
            if board.is_solved():
                message = "Solved"
            if message:
                img = font.render(message, True, (230, 230, 230))
                screen.blit(img, (renderer.margin, 2))
            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
