from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from block_stack_rl.game.grid import GRID_SIZE, WIN_LENGTH, Board
from block_stack_rl.game.pieces import Player

DIRECTIONS = ((1, 0), (0, 1), (1, 1), (1, -1))
NEIGHBORS = ((1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (-1, -1), (1, -1), (-1, 1))


@dataclass
class ScoringRules:
    win: float = 100000
    four_in_row: float = 1000
    three_in_row: float = 100
    two_in_row: float = 10
    center: float = 3
    connectivity: float = 3
    center_radius: int = 5
    # Opponent lines count more than our own, so blocking outranks advancing.
    block_three_factor: float = 1.5
    block_four_factor: float = 2.0

    def own_table(self) -> np.ndarray:
        return np.array([0, 0, self.two_in_row, self.three_in_row, self.four_in_row, self.win], dtype=np.float64)

    def opponent_table(self) -> np.ndarray:
        return np.array(
            [
                0,
                0,
                self.two_in_row,
                self.three_in_row * self.block_three_factor,
                self.four_in_row * self.block_four_factor,
                self.win,
            ],
            dtype=np.float64,
        )


DEFAULT_RULES = ScoringRules()


def score(board: Board, owner: Player, rules: Optional[ScoringRules] = None) -> float:
    """Static evaluation of ``board`` from ``owner``'s side; positive is good.

    Every line window of WIN_LENGTH cells starting inside the structure's
    bounding box (widened by two columns each way, rows 0..GRID_SIZE) is scored
    by how many cells each side holds in it. Mixed windows score nothing.
    Owned cells earn a bonus for sitting near column 0 and for touching
    other owned cells.
    """
    rules = rules or DEFAULT_RULES
    reach = WIN_LENGTH - 1
    min_x, max_x = board.bounds()
    start_x = min_x - 2
    nx = max_x + 2 - start_x + 1
    ny = GRID_SIZE + 1

    # Row r of the padded window is y = r - reach; column c is x = start_x + c.
    padded = np.zeros((ny + 2 * reach, nx + reach), dtype=np.int8)
    padded[reach : reach + GRID_SIZE, :] = board.to_array(start_x, nx + reach, owner)
    mine = (padded == 1).astype(np.int16)
    theirs = (padded == -1).astype(np.int16)

    own_table = rules.own_table()
    opp_table = rules.opponent_table()
    total = 0.0
    for dx, dy in DIRECTIONS:
        own_counts = np.zeros((ny, nx), dtype=np.int16)
        opp_counts = np.zeros((ny, nx), dtype=np.int16)
        for k in range(WIN_LENGTH):
            rows = slice(reach + k * dy, reach + k * dy + ny)
            cols = slice(k * dx, k * dx + nx)
            own_counts += mine[rows, cols]
            opp_counts += theirs[rows, cols]
        total += float(np.sum(own_table[own_counts] * (opp_counts == 0)))
        total -= float(np.sum(opp_table[opp_counts] * (own_counts == 0)))

    xs = np.arange(start_x, start_x + nx + reach)
    center_weight = np.maximum(0, rules.center_radius - np.abs(xs)) * rules.center
    total += float(np.sum(mine * center_weight[np.newaxis, :]))

    # The padded border is always empty, so wrap-around from np.roll adds nothing.
    adjacent = np.zeros_like(mine)
    for dx, dy in NEIGHBORS:
        adjacent += np.roll(np.roll(mine, -dy, axis=0), -dx, axis=1)
    total += float(np.sum(mine * adjacent)) * rules.connectivity
    return total
