from __future__ import annotations

from typing import List, Optional

from .grid import MAX_BLOCKS_PER_PLAYER, Board
from .pieces import ORIENTATIONS, Move, Player
from .rules import drop_position, is_exhausted, validate_move


def generate_moves(board: Board, owner: Player, max_blocks: Optional[int] = MAX_BLOCKS_PER_PLAYER) -> List[Move]:
    """All legal placements for ``owner``, by ascending x then vertical before horizontal.

    Only columns within two of the structure are considered; on an empty board
    the single column 0. A player who has used up ``max_blocks`` has none.
    """
    if max_blocks is not None and is_exhausted(board, owner, max_blocks):
        return []
    if board.is_empty():
        columns = range(0, 1)
    else:
        min_x, max_x = board.bounds()
        columns = range(min_x - 2, max_x + 3)

    moves: List[Move] = []
    for x in columns:
        for orientation in ORIENTATIONS:
            y = drop_position(board, x, orientation)
            if validate_move(board, x, y, orientation, owner):
                moves.append(Move(x, y, orientation, owner))
    return moves
