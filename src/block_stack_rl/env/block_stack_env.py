from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_stack_rl.engine import Difficulty
from block_stack_rl.game import (
    GRID_SIZE,
    BlockStackError,
    BlockStackGame,
    GameConfig,
    Move,
    Orientation,
    Player,
    format_board,
)

# Columns visible to the agent: the widest legal structure plus two on each side.
WINDOW = GRID_SIZE + 4
ORIENTATION_INDEX = {Orientation.VERTICAL: 0, Orientation.HORIZONTAL: 1}
INDEX_ORIENTATION = {v: k for k, v in ORIENTATION_INDEX.items()}


def window_origin(game: BlockStackGame) -> int:
    min_x, _ = game.board.bounds()
    return min_x - 2


def move_to_action(game: BlockStackGame, move: Move) -> int:
    return (move.x - window_origin(game)) * 2 + ORIENTATION_INDEX[move.orientation]


def _compute_action_mask(game: BlockStackGame) -> np.ndarray:
    mask = np.zeros((2 * WINDOW,), dtype=np.bool_)
    for move in game.legal_moves():
        idx = move_to_action(game, move)
        if 0 <= idx < mask.shape[0]:
            mask[idx] = True
    return mask


class BlockStackEnv(gym.Env):
    """The agent plays one colour against the search engine.

    Actions pick a column inside the visible window and an orientation; the
    landing row follows from gravity. Invalid actions are penalized and leave
    the game unchanged.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        agent_player: Player = Player.WHITE,
        opponent_difficulty: Difficulty = Difficulty.EASY,
        win_reward: float = 1.0,
        loss_reward: float = -1.0,
        draw_reward: float = 0.0,
        invalid_action_penalty: float = -0.1,
    ) -> None:
        super().__init__()
        self.game = BlockStackGame(config)
        self.render_mode = render_mode
        self.agent_player = Player(agent_player)
        self.opponent_difficulty = Difficulty(opponent_difficulty)

        self.win_reward = float(win_reward)
        self.loss_reward = float(loss_reward)
        self.draw_reward = float(draw_reward)
        self.invalid_action_penalty = float(invalid_action_penalty)

        max_blocks = self.game.config.max_blocks_per_player
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-1, high=1, shape=(GRID_SIZE, WINDOW), dtype=np.int8),
                "blocks_left": spaces.Box(low=0, high=max_blocks, shape=(2,), dtype=np.int8),
            }
        )
        self.action_space = spaces.Discrete(2 * WINDOW)

        self._opponent_rng = random.Random()
        self._steps = 0

    def action_to_move(self, action: int) -> Tuple[int, Orientation]:
        col, o = divmod(int(action), 2)
        return window_origin(self.game) + col, INDEX_ORIENTATION[o]

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def _get_obs(self) -> Dict[str, Any]:
        board = self.game.board.to_array(window_origin(self.game), WINDOW, self.agent_player)
        blocks_left = np.array(
            [
                self.game.blocks_left(self.agent_player),
                self.game.blocks_left(self.agent_player.opponent),
            ],
            dtype=np.int8,
        )
        return {"board": board, "blocks_left": blocks_left}

    def _get_info(self) -> Dict[str, Any]:
        valid_actions: List[int] = []
        if self.game.current_player is self.agent_player:
            valid_actions = [int(i) for i in np.flatnonzero(self.get_action_mask())]
        return {
            "action_mask": self.get_action_mask(),
            "valid_actions": valid_actions,
            "blocks": len(self.game.history),
            "steps": self._steps,
        }

    def _outcome_reward(self) -> float:
        if self.game.winner is self.agent_player:
            return self.win_reward
        if self.game.winner is not None:
            return self.loss_reward
        return self.draw_reward

    def _play_opponent(self) -> None:
        while not self.game.game_over and self.game.current_player is not self.agent_player:
            result = self.game.play_ai(self.opponent_difficulty, self._opponent_rng)
            if not result.accepted:
                raise BlockStackError(f"engine found no move for {self.game.current_player.value} while on turn")

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[dict] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self._opponent_rng = random.Random(int(self.np_random.integers(0, 2**31 - 1)))
        self.game.reset()
        self._steps = 0
        self._play_opponent()
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        self._steps += 1
        x, orientation = self.action_to_move(action)
        result = self.game.place(x, orientation)
        if not result.accepted:
            info = self._get_info()
            info["rejection"] = result.rejection
            return self._get_obs(), self.invalid_action_penalty, False, False, info

        if not self.game.game_over:
            self._play_opponent()
        terminated = self.game.game_over
        reward = self._outcome_reward() if terminated else 0.0
        info = self._get_info()
        if terminated:
            info["winner"] = self.game.winner.value if self.game.winner else None
            info["winning_cells"] = self.game.winning_cells
        return self._get_obs(), reward, terminated, False, info

    def render(self) -> Optional[str]:
        if self.render_mode == "ansi":
            return format_board(self.game.board, self.agent_player)
        return None

    def close(self) -> None:
        pass
