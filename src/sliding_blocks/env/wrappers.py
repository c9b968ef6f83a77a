from __future__ import annotations

import gymnasium as gym
import numpy as np


class ResampleInvalidActionWrapper(gym.ActionWrapper):
    """Swap a blocked move for a legal one drawn uniformly from the action mask.

    Actions pass through unchanged when they are legal, out of range, or when
    no block can move at all.
    """

    def action(self, action):
        action = int(action)
        mask = self.env.unwrapped.get_action_mask()
        if not 0 <= action < mask.size or mask[action] or not mask.any():
            return action
        return int(self.np_random.choice(np.flatnonzero(mask)))
