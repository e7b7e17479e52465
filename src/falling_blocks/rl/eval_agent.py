from __future__ import annotations

import argparse

import gymnasium as gym
import pygame

from falling_blocks.env import ENV_ID
from falling_blocks.visualization.renderer import Renderer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=10)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()
    from stable_baselines3 import PPO

    env = gym.make(ENV_ID)
    model = PPO.load(args.model, device="auto")

    game = env.unwrapped.game
    renderer = Renderer(cell_size=30)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Falling Blocks - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset(seed=args.seed)
        total_reward = 0.0
        episodes = 0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            action, _ = model.predict(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(int(action))
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                episodes += 1
                obs, info = env.reset()

            renderer.draw(screen, game.get_board_snapshot(), game.get_active_piece_snapshot(), game.score)
            clock.tick(args.fps)
    finally:
        pygame.quit()
        env.close()
    print(f"steps {steps}  episodes {episodes}  reward {total_reward:.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
