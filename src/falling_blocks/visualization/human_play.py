from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict

import pygame

from falling_blocks.game import FallingBlockGame, GameConfig
from .renderer import Renderer


GRAVITY_EVENT = pygame.USEREVENT + 1

# Down rotates clockwise and Up counter-clockwise, Space drops to the floor
KEY_BINDINGS: Dict[int, Callable[[FallingBlockGame], object]] = {
    pygame.K_LEFT: FallingBlockGame.move_left,
    pygame.K_RIGHT: FallingBlockGame.move_right,
    pygame.K_DOWN: FallingBlockGame.rotate_cw,
    pygame.K_UP: FallingBlockGame.rotate_ccw,
    pygame.K_SPACE: FallingBlockGame.hard_drop,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the keyboard.")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity-ms", type=int, default=500, help="Milliseconds between gravity ticks")
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--verbose", action="store_true")
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = GameConfig(random_seed=args.seed, gravity_interval_ms=args.gravity_ms)
    game = FallingBlockGame(config)
    game.add_score_listener(lambda total: print(f"Score: {total}"))
    game.add_game_over_listener(lambda: pygame.time.set_timer(GRAVITY_EVENT, 0))

    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=30)
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Falling Blocks")
        pygame.time.set_timer(GRAVITY_EVENT, config.gravity_interval_ms)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == GRAVITY_EVENT:
                    game.on_gravity_tick()
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif game.game_over:
                        if event.key == pygame.K_r:
                            game.reset()
                            pygame.time.set_timer(GRAVITY_EVENT, config.gravity_interval_ms)
                    else:
                        command = KEY_BINDINGS.get(event.key)
                        if command is not None:
                            command(game)

            renderer.draw(
                screen,
                game.get_board_snapshot(),
                game.get_active_piece_snapshot(),
                game.score,
                game.game_over,
            )
            clock.tick(args.fps)
    finally:
        pygame.quit()
    print(f"Final score: {game.score}  lines: {game.lines_cleared_total}")


if __name__ == "__main__":  # pragma: no cover
    run()
