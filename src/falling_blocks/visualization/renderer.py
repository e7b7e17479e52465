from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import PALETTE, PieceSnapshot


def _color_for_value(v: int) -> Tuple[int, int, int]:
    return PALETTE.get(abs(v), (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return width * self.cell_size + self.margin * 2, height * self.cell_size + self.margin * 2

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            x * self.cell_size,
            y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, board: np.ndarray, piece: Optional[PieceSnapshot]) -> pygame.Surface:
        h, w = board.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                pygame.draw.rect(surf, _color_for_value(int(board[y, x])), self._cell_rect(x, y))
        if piece is not None:
            color = _color_for_value(piece.color)
            for i in range(piece.mask.shape[0]):
                for j in range(piece.mask.shape[1]):
                    # Rows above the board are clipped by the surface
                    if piece.mask[i, j]:
                        pygame.draw.rect(surf, color, self._cell_rect(piece.x + j, piece.y + i))
        return surf

    def draw(self, screen: pygame.Surface, board: np.ndarray, piece: Optional[PieceSnapshot],
             score: int, game_over: bool = False) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(board, piece), (self.margin, self.margin))
        text = self._font.render(f"Score: {score}", True, (230, 230, 230))
        screen.blit(text, (self.margin, 2))
        if game_over:
            over = self._font.render("Game Over - R to restart, ESC to quit", True, (255, 255, 255))
            screen.blit(over, over.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2)))
        pygame.display.flip()
