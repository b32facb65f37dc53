from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_clone.game import PIECES, GameConfig, Intent, TetrisGame


class TetrisEnv(gym.Env):
    """
    Gymnasium wrapper around a TetrisGame session.

    Actions (6 total):
      0: Move Left
      1: Move Right
      2: Rotate
      3: Soft Drop
      4: Hard Drop
      5: No-op (let gravity act)

    Notes:
    - Time is virtual: every step advances the session clock by `ms_per_step`,
      then gives gravity a chance to fire. The speed-up ratchet therefore works
      exactly as in live play.
    - Reward is the engine score gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    ACTIONS: Tuple[Optional[Intent], ...] = (
        Intent.MOVE_LEFT,
        Intent.MOVE_RIGHT,
        Intent.ROTATE,
        Intent.SOFT_DROP,
        Intent.HARD_DROP,
        None,
    )

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        ms_per_step: int = 100,
        max_episode_steps: int = 10000,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self._now = 0
        self.game = TetrisGame(config, clock=self._clock)
        self.render_mode = render_mode
        self.ms_per_step = int(ms_per_step)
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.grid.height, self.game.grid.width
        # 0 empty, 1 locked, 2 falling piece
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=2, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(len(PIECES)),
            }
        )
        self.action_space = spaces.Discrete(len(self.ACTIONS))
        self._steps = 0

    def _clock(self) -> int:
        return self._now

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.get_state(),
            "next_piece": int(self.game.next_shape_id),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "gravity_interval_ms": self.game.gravity_interval_ms,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self._now = 0
        self._steps = 0
        self.game.rng = self.np_random
        self.game.reset()
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        intent = self.ACTIONS[int(action)]
        lines = 0
        points = 0

        if intent is not None:
            result = self.game.apply(intent)
            if result is not None:
                lines += result.lines_cleared
                points += result.points

        self._now += self.ms_per_step
        result = self.game.update()
        if result is not None:
            lines += result.lines_cleared
            points += result.points

        self._steps += 1
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        reward = float(points)
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["lines_cleared"] = lines
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        cell = 12
        img = self.game.grid.colors.copy()
        img[~self.game.grid.occupied] = (30, 30, 36)
        if not self.game.game_over:
            for x, y in self.game.current_piece.occupied_cells():
                if self.game.grid.is_inside(x, y):
                    img[y, x] = self.game.current_piece.color
        return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)

    def close(self) -> None:
        pass
