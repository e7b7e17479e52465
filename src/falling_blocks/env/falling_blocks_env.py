from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import PALETTE, Action, FallingBlockGame, GameConfig, TetrominoType


class FallingBlocksEnv(gym.Env):
    """Gymnasium wrapper around FallingBlockGame.

    One env step applies the chosen action and then ``gravity_every`` gravity
    ticks, so an agent that only sends NONE still sees the piece fall.
    Observations are the board with the active piece overlaid as negative
    color handles.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 gravity_every: int = 1,
                 line_reward: float = 1.0,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        if gravity_every < 0:
            raise ValueError("gravity_every must be >= 0")
        self.game = FallingBlockGame(config)
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)

        # Reward shaping parameters
        self.line_reward = float(line_reward)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.config.height, self.game.config.width
        n_kinds = len(TetrominoType)
        self.observation_space = spaces.Box(low=-n_kinds, high=n_kinds, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[np.ndarray] = None

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_spawned": self.game.pieces_spawned,
            "max_height": self.game.grid.get_max_height(),
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        lines_before = self.game.lines_cleared_total
        _, moved, _, _ = self.game.step(Action(int(action)))
        for _ in range(self.gravity_every):
            if self.game.game_over:
                break
            self.game.on_gravity_tick()

        lines = self.game.lines_cleared_total - lines_before
        terminated = bool(self.game.game_over)
        reward = self.line_reward * float(lines) + self.step_penalty
        if terminated:
            reward += self.terminal_penalty

        obs = self._get_obs()
        info = self._get_info()
        info["lines_cleared"] = lines
        info["action_applied"] = moved
        self._last_obs = obs
        return obs, float(reward), terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs if self._last_obs is not None else self._get_obs()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    color = PALETTE.get(abs(int(grid[y, x])), (200, 200, 200))
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
