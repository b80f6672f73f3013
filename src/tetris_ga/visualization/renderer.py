from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from tetris_ga.game.core import SessionSnapshot
from tetris_ga.game.grid import HEIGHT, WIDTH
from tetris_ga.game.pieces import mask_cells


def color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (0, 240, 240),  # I
        2: (160, 0, 240),  # T
        3: (240, 240, 0),  # O
        4: (0, 240, 0),    # S
        5: (240, 0, 0),    # Z
        6: (0, 0, 240),    # J
        7: (240, 160, 0),  # L
    }
    return palette.get(abs(v), (200, 200, 200))


def overlay_piece(snapshot: SessionSnapshot) -> np.ndarray:
    """Board grid with the falling piece drawn in (negative values mark the piece)."""
    state = snapshot.grid.copy()
    if snapshot.finished:
        return state
    h, w = state.shape
    for px, py in mask_cells(snapshot.mask):
        x, y = snapshot.x + px, snapshot.y + py
        if 0 <= y < h and 0 <= x < w:
            state[y, x] = -snapshot.color
    return state


class Renderer:
    def __init__(self, cell_size: int = 24, margin: int = 20, header: int = 28) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.header = header
        self._font: Optional[pygame.font.Font] = None

    def board_size(self, width: int = WIDTH, height: int = HEIGHT) -> Tuple[int, int]:
        return width * self.cell_size, height * self.cell_size + self.header

    def window_size(self, num_boards: int, width: int = WIDTH, height: int = HEIGHT) -> Tuple[int, int]:
        bw, bh = self.board_size(width, height)
        return num_boards * (bw + self.margin) + self.margin, bh + self.margin * 2

    def _font_for(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 20)
        return self._font

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color_for_value(v), rect)
        return surf

    def draw_snapshot(self, screen: pygame.Surface, snapshot: SessionSnapshot, left: int, top: int) -> None:
        font = self._font_for()
        text = f"Score: {snapshot.score}  Level: {snapshot.level}  Max: {snapshot.max_score}"
        screen.blit(font.render(text, True, (230, 230, 230)), (left, top))
        screen.blit(self._grid_surface(overlay_piece(snapshot)), (left, top + self.header))
        if snapshot.finished:
            over = font.render("GAME OVER", True, (255, 255, 255))
            h, w = snapshot.grid.shape
            rect = over.get_rect(center=(left + w * self.cell_size // 2, top + self.header + h * self.cell_size // 2))
            screen.blit(over, rect)

    def draw(self, screen: pygame.Surface, snapshots: Sequence[SessionSnapshot]) -> None:
        screen.fill((10, 10, 14))
        for i, snapshot in enumerate(snapshots):
            h, w = snapshot.grid.shape
            bw, _ = self.board_size(w, h)
            self.draw_snapshot(screen, snapshot, self.margin + i * (bw + self.margin), self.margin)
        pygame.display.flip()


class LiveView:
    """Window showing every session of a generation side by side."""

    def __init__(self, num_boards: int, cell_size: int = 16, fps: int = 100) -> None:
        pygame.init()
        self.renderer = Renderer(cell_size=cell_size)
        self.screen = pygame.display.set_mode(self.renderer.window_size(num_boards))
        pygame.display.set_caption("tetris-ga - evolution")
        self.clock = pygame.time.Clock()
        self.fps = fps

    def update(self, sessions) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                pygame.quit()
                raise KeyboardInterrupt
        self.renderer.draw(self.screen, [s.snapshot() for s in sessions])
        self.clock.tick(self.fps)
