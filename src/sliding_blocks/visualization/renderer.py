from __future__ import annotations

from typing import Optional, Tuple

import pygame

from sliding_blocks.game import Board, PlacedBlock


def _color_for_variant(v: int) -> Tuple[int, int, int]:
    palette = {
        1: (240, 200, 60),   # 1x1
        2: (70, 160, 230),   # 1x2
        3: (90, 200, 120),   # 2x1
        4: (220, 70, 70),    # 2x2
    }
    return palette.get(int(v), (200, 200, 200))


class Renderer:
    background = (10, 10, 14)
    board_color = (30, 30, 36)
    goal_color = (255, 255, 255)
    selected_color = (255, 255, 255)

    def __init__(self, cell_size: int = 80, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin

    def window_size(self, board: Board) -> Tuple[int, int]:
        return (
            board.grid.cols * self.cell_size + self.margin * 2,
            board.grid.rows * self.cell_size + self.margin * 2,
        )

    def block_rect(self, block: PlacedBlock) -> pygame.Rect:
        rows, cols = block.variant.dimensions
        return pygame.Rect(
            self.margin + block.min_col * self.cell_size + 2,
            self.margin + block.min_row * self.cell_size + 2,
            cols * self.cell_size - 4,
            rows * self.cell_size - 4,
        )

    def cell_at(self, pixel: Tuple[int, int]) -> Tuple[int, int]:
        x, y = pixel
        return ((y - self.margin) // self.cell_size, (x - self.margin) // self.cell_size)

    def render(self, surface: pygame.Surface, board: Board, selected: Optional[int] = None) -> None:
        """Draw ``board`` onto ``surface`` without touching the display."""
        surface.fill(self.background)
        frame = pygame.Rect(
            self.margin,
            self.margin,
            board.grid.cols * self.cell_size,
            board.grid.rows * self.cell_size,
        )
        pygame.draw.rect(surface, self.board_color, frame)
        # Target outline for the key block
        pygame.draw.rect(surface, self.goal_color, self.block_rect(board.rules.target_block()), 1)
        for idx, block in enumerate(board.blocks):
            rect = self.block_rect(block)
            pygame.draw.rect(surface, _color_for_variant(block.variant), rect)
            if idx == selected:
                pygame.draw.rect(surface, self.selected_color, rect, 3)

    def draw(self, screen: pygame.Surface, board: Board, selected: Optional[int] = None) -> None:
        self.render(screen, board, selected)
        pygame.display.flip()
