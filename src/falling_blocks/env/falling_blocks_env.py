from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, GameConfig, GameSession, PieceFactory, TetrominoType, color_for


class FallingBlocksEnv(gym.Env):
    """Falling-block game exposed one input command per step.

    Each step applies the chosen `Action`, then a gravity drop every
    `gravity_every` steps. Reward is the score gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 gravity_every: int = 1,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        if gravity_every < 1:
            raise ValueError(f"gravity_every must be >= 1, got {gravity_every}")
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.config.height, self.config.width
        n_kinds = len(TetrominoType)
        # Locked cells are positive piece ids, the falling piece is overlaid as negative ids
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-n_kinds, high=n_kinds, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self.game = GameSession(self.config, factory=PieceFactory(seed=self.config.random_seed))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.get_state().astype(np.int8),
            "next_piece": int(self.game.next_piece.kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        piece_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = GameSession(self.config, factory=PieceFactory(seed=piece_seed))
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        action = Action(int(action))
        score_before = self.game.score

        lines = self.game.step(action)
        self._steps += 1
        # A hard drop already locked the piece; gravity applies to the new one next time
        if action != Action.HARD_DROP and self._steps % self.gravity_every == 0:
            lines += self.game.drop_step()

        terminated = bool(self.game.game_over)
        reward = float(self.game.score - score_before)
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["lines_cleared"] = lines
        return self._get_obs(), reward, terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                hex_color = color_for(int(state[y, x]))
                if hex_color is None:
                    color = (30, 30, 36)
                else:
                    color = tuple(int(hex_color[i : i + 2], 16) for i in (1, 3, 5))
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
