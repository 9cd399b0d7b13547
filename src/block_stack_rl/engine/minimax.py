from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from block_stack_rl.game.grid import MAX_BLOCKS_PER_PLAYER, Board
from block_stack_rl.game.moves import generate_moves
from block_stack_rl.game.pieces import Move, Player
from block_stack_rl.game.rules import check_win

from .heuristic import DEFAULT_RULES, ScoringRules, score

logger = logging.getLogger(__name__)

INF = math.inf


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyProfile:
    depth: int
    # Chance of skipping the search entirely and playing any legal move.
    random_move_rate: float = 0.0
    # Root moves scoring within this fraction of the best are near-ties.
    tie_window: float = 0.0
    tie_random_rate: float = 0.0
    # How many near-ties a random pick may reach; None means all of them.
    tie_pool: Optional[int] = None


PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(depth=1, random_move_rate=0.8),
    Difficulty.MEDIUM: DifficultyProfile(depth=2, tie_window=0.10, tie_random_rate=0.30),
    Difficulty.HARD: DifficultyProfile(depth=4, tie_window=0.05, tie_random_rate=0.05, tie_pool=2),
}


def minimax(
    board: Board,
    depth: int,
    maximizing: bool,
    owner: Player,
    alpha: float,
    beta: float,
    rules: ScoringRules = DEFAULT_RULES,
    max_blocks: Optional[int] = MAX_BLOCKS_PER_PLAYER,
) -> float:
    """Alpha-beta value of ``board`` for ``owner``.

    ``maximizing`` says whether ``owner`` is to move. A finished line for the
    side that just moved scores WIN plus the remaining depth, so nearer wins
    and later losses are preferred.
    """
    just_moved = owner.opponent if maximizing else owner
    if check_win(board, just_moved):
        value = rules.win + depth
        return value if just_moved is owner else -value
    if depth == 0:
        return score(board, owner, rules)

    to_move = owner if maximizing else owner.opponent
    moves = generate_moves(board, to_move, max_blocks)
    if not moves:
        return 0.0

    if maximizing:
        best = -INF
        for move in moves:
            value = minimax(board.place(move), depth - 1, False, owner, alpha, beta, rules, max_blocks)
            best = max(best, value)
            alpha = max(alpha, value)
            if beta <= alpha:
                break  # beta cutoff
        return best

    best = INF
    for move in moves:
        value = minimax(board.place(move), depth - 1, True, owner, alpha, beta, rules, max_blocks)
        best = min(best, value)
        beta = min(beta, value)
        if beta <= alpha:
            break  # alpha cutoff
    return best


def winning_moves(board: Board, moves: List[Move]) -> List[Move]:
    return [m for m in moves if check_win(board.place(m), m.owner)]


def blocking_moves(
    board: Board, moves: List[Move], owner: Player, max_blocks: Optional[int] = MAX_BLOCKS_PER_PLAYER
) -> List[Move]:
    """Moves after which the opponent no longer has an immediate win.

    Empty when the opponent has no winning reply to begin with.
    """
    opponent = owner.opponent
    if not winning_moves(board, generate_moves(board, opponent, max_blocks)):
        return []
    blocks = []
    for move in moves:
        after = board.place(move)
        if not winning_moves(after, generate_moves(after, opponent, max_blocks)):
            blocks.append(move)
    return blocks


def rank_moves(
    board: Board,
    moves: List[Move],
    owner: Player,
    depth: int,
    rules: ScoringRules = DEFAULT_RULES,
    max_blocks: Optional[int] = MAX_BLOCKS_PER_PLAYER,
) -> List[Tuple[Move, float]]:
    """Minimax score of each root move, best first; ties keep input order."""
    scored = [
        (move, minimax(board.place(move), depth, False, owner, -INF, INF, rules, max_blocks)) for move in moves
    ]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored


def _pick_from_ranking(
    ranked: List[Tuple[Move, float]], profile: DifficultyProfile, rng: random.Random
) -> Move:
    best_move, best_score = ranked[0]
    if profile.tie_random_rate <= 0:
        return best_move
    margin = abs(best_score * profile.tie_window)
    near = [move for move, value in ranked if value >= best_score - margin]
    if len(near) > 1 and rng.random() < profile.tie_random_rate:
        pool = near if profile.tie_pool is None else near[: profile.tie_pool]
        return pool[rng.randrange(len(pool))]
    return best_move


def get_best_move(
    board: Board,
    owner: Player,
    difficulty: Difficulty = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
    rules: ScoringRules = DEFAULT_RULES,
    max_blocks: Optional[int] = MAX_BLOCKS_PER_PLAYER,
) -> Optional[Move]:
    """Choose a move for ``owner``, or None if it has no legal placement.

    ``max_blocks`` is the per-player block cap the game enforces; None lifts it.
    """
    rng = rng or random.Random()
    difficulty = Difficulty(difficulty)
    profile = PROFILES[difficulty]

    moves = generate_moves(board, owner, max_blocks)
    if not moves:
        return None
    rng.shuffle(moves)

    # Wins come before the easy random move so every level takes a win on offer
    wins = winning_moves(board, moves)
    if wins:
        logger.debug("%s plays an immediate win (%d options)", owner.value, len(wins))
        return rng.choice(wins)

    if profile.random_move_rate > 0 and rng.random() < profile.random_move_rate:
        logger.debug("%s plays a random move", owner.value)
        return rng.choice(moves)

    blocks = blocking_moves(board, moves, owner, max_blocks)
    if blocks:
        logger.debug("%s blocks an opponent win (%d options)", owner.value, len(blocks))
        return rng.choice(blocks)

    ranked = rank_moves(board, moves, owner, profile.depth, rules, max_blocks)
    choice = _pick_from_ranking(ranked, profile, rng)
    logger.debug(
        "%s search depth=%d best=%.1f over %d moves", owner.value, profile.depth, ranked[0][1], len(ranked)
    )
    return choice
