from __future__ import annotations

import numpy as np
import gymnasium as gym


class ResampleInvalidActionWrapper(gym.Wrapper):
    """Swap an illegal placement for a uniformly drawn legal one.

    Lets agents without action masking (vanilla PPO, random baselines) train
    on BlockStack without burning steps on the invalid-action penalty. The
    step info carries ``resampled`` so callers can track how often it fires.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self.resample_count = 0

    def get_action_mask(self) -> np.ndarray:
        return self.env.unwrapped.get_action_mask()

    def step(self, action):  # type: ignore[override]
        action = int(action)
        mask = self.get_action_mask()
        resampled = False
        if not (0 <= action < mask.shape[0] and mask[action]):
            legal = np.flatnonzero(mask)
            if legal.size:
                action = int(self.np_random.choice(legal))
                resampled = True
                self.resample_count += 1
        obs, reward, terminated, truncated, info = self.env.step(action)
        info["resampled"] = resampled
        return obs, reward, terminated, truncated, info
