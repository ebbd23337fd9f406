"""Gymnasium-compatible wrapper around the action-level engine.

Observation is a flat vector suitable for SB3 MlpPolicy:
  - board occupancy including the falling piece (20x10=200)
  - active piece one-hot (7)
  - next piece one-hot (7)

Action space is Discrete(7): the six movement actions followed by a no-op.
Every step applies the chosen action and then one gravity tick.  The reward is
the score gained during the step; the episode terminates on game over.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .game_state import Action, GameState, apply_action, apply_tick, new_game
from .snapshot import GHOST, format_ascii, render_grid, take_snapshot
from .tetromino import Piece, RandomPieceFactory, TetrominoType


# ``None`` is the no-op slot.
ENV_ACTIONS: Tuple[Optional[Action], ...] = (
    Action.MOVE_LEFT,
    Action.MOVE_RIGHT,
    Action.SOFT_DROP,
    Action.ROTATE,
    Action.HARD_DROP,
    Action.HOLD,
    None,
)

_KINDS = list(TetrominoType)


def _one_hot(piece: Optional[Piece]) -> np.ndarray:
    out = np.zeros((len(_KINDS),), dtype=np.float32)
    if piece is not None:
        out[_KINDS.index(piece.kind)] = 1.0
    return out


class TetrisGymEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60,
    }

    def __init__(self, *, render_mode: Optional[str] = None, max_steps: Optional[int] = None) -> None:
        super().__init__()
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(len(ENV_ACTIONS))
        self._obs_size = GameState().board.grid.size + 2 * len(_KINDS)
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(self._obs_size,), dtype=np.float32
        )
        self._pieces = RandomPieceFactory()
        self._state = GameState()
        self._steps = 0
        self._max_steps = max_steps

    @property
    def state(self) -> GameState:
        return self._state

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if seed is not None:
            self._pieces.seed(seed)
        self._state = new_game(self._pieces)
        self._steps = 0
        return self._observation(), self._info()

    def step(self, action: int):
        if self._state.over or not self._state.started:
            raise RuntimeError("Call reset() before step()")
        chosen = ENV_ACTIONS[int(action)]
        before = self._state.score
        state = self._state
        if chosen is not None:
            state = apply_action(state, chosen, self._pieces)
        state = apply_tick(state, self._pieces)
        self._state = state
        self._steps += 1
        terminated = state.over
        truncated = self._max_steps is not None and self._steps >= self._max_steps
        reward = float(state.score - before)
        return self._observation(), reward, terminated, truncated, self._info()

    def render(self):
        if self.render_mode == "ansi":
            return format_ascii(take_snapshot(self._state))
        return None

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def _observation(self) -> np.ndarray:
        grid = render_grid(self._state)
        board = np.array(
            [[1.0 if cell is not None and cell != GHOST else 0.0 for cell in row] for row in grid],
            dtype=np.float32,
        ).reshape(-1)
        parts = [board, _one_hot(self._state.active), _one_hot(self._state.next)]
        return np.concatenate(parts, dtype=np.float32)

    def _info(self) -> Dict:
        return {
            "score": self._state.score,
            "level": self._state.level,
            "lines": self._state.lines,
            "combo": self._state.combo,
        }
