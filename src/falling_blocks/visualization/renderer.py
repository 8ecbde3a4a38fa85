from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import pygame

from falling_blocks.game import Snapshot, Status, color_for

BACKGROUND = (10, 10, 14)
EMPTY = (20, 20, 26)
GRID_LINE = (30, 30, 36)
TEXT = (230, 230, 230)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    hex_color = color_for(v)
    if hex_color is None:
        return EMPTY
    c = pygame.Color(hex_color)
    return c.r, c.g, c.b


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 220) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        pygame.font.init()
        self.font = pygame.font.SysFont(None, 26)
        self.big_font = pygame.font.SysFont(None, 40)

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            width * self.cell_size + self.panel_width + self.margin * 3,
            height * self.cell_size + self.margin * 2,
        )

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(GRID_LINE)
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        return surf

    def _overlay_active(self, snapshot: Snapshot) -> np.ndarray:
        state = snapshot.grid.copy()
        piece = snapshot.active_piece
        if piece is None or snapshot.status is Status.OVER:
            return state
        h, w = state.shape
        rows, cols = piece.shape.shape
        for r in range(rows):
            for c in range(cols):
                x, y = piece.x + c, piece.y + r
                if piece.shape[r, c] and 0 <= x < w and 0 <= y < h:
                    state[y, x] = int(piece.kind)
        return state

    def _draw_panel(self, screen: pygame.Surface, snapshot: Snapshot, leaderboard: Sequence, left: int) -> None:
        top = self.margin
        screen.blit(self.font.render(f"Score: {snapshot.score}", True, TEXT), (left, top))
        screen.blit(self.font.render(f"Lines: {snapshot.lines_cleared_total}", True, TEXT), (left, top + 28))

        screen.blit(self.font.render("Next", True, TEXT), (left, top + 70))
        preview = snapshot.next_piece
        color = _color_for_value(int(preview.kind))
        size = self.cell_size * 2 // 3
        for r, row in enumerate(preview.shape):
            for c, v in enumerate(row):
                if v:
                    rect = pygame.Rect(left + c * size, top + 100 + r * size, size - 1, size - 1)
                    pygame.draw.rect(screen, color, rect)

        y = top + 180
        screen.blit(self.font.render("Leaderboard", True, TEXT), (left, y))
        for i, entry in enumerate(leaderboard):
            y += 24
            line = f"{i + 1:>2}. {entry.name[:12]:<12} {entry.score}"
            screen.blit(self.font.render(line, True, TEXT), (left, y))

    def draw(self, screen: pygame.Surface, snapshot: Snapshot, leaderboard: Sequence = (), prompt: str = "") -> None:
        grid_surf = self._grid_surface(self._overlay_active(snapshot))
        screen.fill(BACKGROUND)
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_panel(screen, snapshot, leaderboard, grid_surf.get_width() + self.margin * 2)

        if snapshot.status is Status.OVER:
            center_x = self.margin + grid_surf.get_width() // 2
            text = self.big_font.render("Game Over", True, (255, 255, 255))
            screen.blit(text, text.get_rect(center=(center_x, screen.get_height() // 2 - 30)))
            if prompt:
                sub = self.font.render(prompt, True, TEXT)
                screen.blit(sub, sub.get_rect(center=(center_x, screen.get_height() // 2 + 10)))
        pygame.display.flip()
