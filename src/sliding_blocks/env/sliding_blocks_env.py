from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from sliding_blocks.game import (
    Board,
    BlockIndexOutOfRange,
    IllegalMove,
    PuzzleRules,
    Randomizer,
    RandomizerConfig,
    Step,
)
from sliding_blocks.game.moves import STEPS
from sliding_blocks.layouts import build_board


VARIANT_COLORS = {
    0: (30, 30, 36),
    1: (240, 200, 60),   # 1x1
    2: (70, 160, 230),   # 1x2
    3: (90, 200, 120),   # 2x1
    4: (220, 70, 70),    # 2x2
}
_PALETTE = np.array([VARIANT_COLORS[v] for v in sorted(VARIANT_COLORS)], dtype=np.uint8)
_CELL_PIXELS = 16


def decode_action(action: int) -> Tuple[int, Step]:
    block_idx, step_idx = divmod(int(action), len(STEPS))
    return block_idx, STEPS[step_idx]


def encode_action(block_idx: int, step: Step) -> int:
    return block_idx * len(STEPS) + STEPS.index(step)


def _compute_action_mask(board: Board, max_blocks: int) -> np.ndarray:
    mask = np.zeros((max_blocks * len(STEPS),), dtype=np.bool_)
    for moves in board.next_moves():
        for move in moves:
            if move.block_idx < max_blocks:
                mask[encode_action(move.block_idx, move.step)] = True
    return mask


class SlidingBlocksEnv(gym.Env):
    """Single-agent environment: move one block one cell per step until the
    key block reaches its target.

    Action ``a`` means block ``a // 4`` takes step ``STEPS[a % 4]``
    (up, down, left, right).
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 4}

    def __init__(
        self,
        layout: Optional[Iterable[Tuple[int, int, int]]] = None,
        rules: Optional[PuzzleRules] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 200,
        step_penalty: float = -0.01,
        invalid_action_penalty: float = -0.1,
        goal_reward: float = 1.0,
    ) -> None:
        super().__init__()
        self.rules = rules or PuzzleRules()
        self.layout = list(layout) if layout is not None else None
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.step_penalty = float(step_penalty)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.goal_reward = float(goal_reward)

        rows, cols = self.rules.rows, self.rules.cols
        self.max_blocks = rows * cols
        self.observation_space = spaces.Box(low=0, high=4, shape=(rows, cols), dtype=np.int8)
        self.action_space = spaces.Discrete(self.max_blocks * len(STEPS))

        self.board = Board(self.rules)
        self._steps = 0

    def _new_board(self) -> Board:
        if self.layout is not None:
            return build_board(self.layout, self.rules, mark_ready=False)
        seed = int(self.np_random.integers(0, 2**31 - 1))
        board = Board(self.rules)
        Randomizer(RandomizerConfig(seed=seed, mark_ready=False)).populate(board)
        return board

    def _get_obs(self) -> np.ndarray:
        return self.board.variant_grid().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        mask = _compute_action_mask(self.board, self.max_blocks)
        valid_actions: List[int] = [int(a) for a in np.flatnonzero(mask)]
        return {
            "action_mask": mask,
            "valid_actions": valid_actions,
            "moves": len(self.board.history),
            "solved": self.board.is_solved(),
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.board, self.max_blocks)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.board = self._new_board()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        block_idx, step = decode_action(action)
        reward = self.step_penalty
        try:
            self.board.apply_move(block_idx, step.row_diff, step.col_diff)
            valid = True
        except (IllegalMove, BlockIndexOutOfRange):
            reward += self.invalid_action_penalty
            valid = False

        self._steps += 1
        terminated = self.board.is_solved()
        if terminated:
            reward += self.goal_reward
        truncated = not terminated and self._steps >= self.max_episode_steps

        info = self._get_info()
        info["valid"] = valid
        return self._get_obs(), float(reward), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        # One colour per variant id, each cell scaled up to a square of pixels
        pixels = _PALETTE[self.board.variant_grid()]
        return np.repeat(np.repeat(pixels, _CELL_PIXELS, axis=0), _CELL_PIXELS, axis=1)

    def close(self) -> None:
        pass
