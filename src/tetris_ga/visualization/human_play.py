from __future__ import annotations

from typing import Dict

import pygame

from tetris_ga.game.core import GameSession, Intent
from .renderer import Renderer


KEY_TO_INTENT: Dict[int, Intent] = {
    pygame.K_LEFT: Intent.MOVE_LEFT,
    pygame.K_RIGHT: Intent.MOVE_RIGHT,
    pygame.K_DOWN: Intent.SOFT_DROP,
    pygame.K_SPACE: Intent.ROTATE,
    pygame.K_UP: Intent.ROTATE,
}


def run() -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = GameSession(auto=False)
        renderer = Renderer(cell_size=28)
        screen = pygame.display.set_mode(renderer.window_size(1))
        pygame.display.set_caption("tetris-ga - Human Play")

        last_fall = pygame.time.get_ticks()

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r and game.finished:
                        game = GameSession(auto=False, max_score=game.max_score)
                        last_fall = pygame.time.get_ticks()
                    else:
                        intent = KEY_TO_INTENT.get(event.key)
                        if intent is not None:
                            game.apply(intent)

            # Gravity, faster with each level
            now = pygame.time.get_ticks()
            if now - last_fall >= game.fall_interval_ms:
                game.tick()
                last_fall = now

            renderer.draw(screen, [game.snapshot()])
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
