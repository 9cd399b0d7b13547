from __future__ import annotations

from enum import IntEnum
from typing import List, Optional

from .grid import GRID_SIZE, MAX_BLOCKS_PER_PLAYER, WIN_LENGTH, Board
from .pieces import (
    CONNECT_OFFSETS,
    ORIENTATIONS,
    SHORT_SIDE_OFFSETS,
    Coordinate,
    Move,
    Orientation,
    Player,
)


class Rejection(IntEnum):
    """Why a placement is illegal, in the order the checks run."""

    NO_DROP = 1
    TOO_WIDE = 2
    DISCONNECTED = 3
    SHORT_SIDE = 4


WIN_DIRECTIONS = ((1, 0), (0, 1), (1, 1), (1, -1))


def drop_position(board: Board, x: int, orientation: Orientation) -> Optional[int]:
    """Resting y for a block dropped at column ``x``, or None if it cannot land."""
    if orientation is Orientation.VERTICAL:
        y = board.height(x)
        if y + 1 >= GRID_SIZE:
            return None
        return y

    h1 = board.height(x)
    h2 = board.height(x + 1)
    y = max(h1, h2)
    # A horizontal block bridges two columns; off the ground both must be level.
    if y != 0 and h1 != h2:
        return None
    if y >= GRID_SIZE:
        return None
    return y


def _fits_width(board: Board, x: int, orientation: Orientation) -> bool:
    if board.is_empty():
        return True
    min_x, max_x = board.bounds()
    right = x + 1 if orientation is Orientation.HORIZONTAL else x
    return max(max_x, right) - min(min_x, x) + 1 <= GRID_SIZE


def _is_connected(board: Board, x: int, y: int, orientation: Orientation) -> bool:
    return any(board.is_occupied(x + dx, y + dy) for dx, dy in CONNECT_OFFSETS[orientation])


def _touches_short_side(board: Board, x: int, y: int, orientation: Orientation, owner: Player) -> bool:
    for dx, dy in SHORT_SIDE_OFFSETS[orientation]:
        cell = board.get(x + dx, y + dy)
        if cell is not None and cell.owner is owner and cell.orientation is orientation:
            return True
    return False


def check_move(
    board: Board, x: int, y: Optional[int], orientation: Orientation, owner: Player
) -> Optional[Rejection]:
    """Return the first rule a placement breaks, or None if it is legal."""
    if y is None:
        return Rejection.NO_DROP
    if not _fits_width(board, x, orientation):
        return Rejection.TOO_WIDE
    if not board.is_empty() and not _is_connected(board, x, y, orientation):
        return Rejection.DISCONNECTED
    if _touches_short_side(board, x, y, orientation, owner):
        return Rejection.SHORT_SIDE
    return None


def validate_move(board: Board, x: int, y: Optional[int], orientation: Orientation, owner: Player) -> bool:
    return check_move(board, x, y, orientation, owner) is None


def apply_move(board: Board, move: Move) -> Board:
    return board.place(move)


def has_valid_move(board: Board, owner: Player) -> bool:
    if board.is_empty():
        return True
    min_x, max_x = board.bounds()
    for x in range(min_x - GRID_SIZE, max_x + GRID_SIZE + 1):
        for orientation in ORIENTATIONS:
            y = drop_position(board, x, orientation)
            if validate_move(board, x, y, orientation, owner):
                return True
    return False


def is_exhausted(board: Board, owner: Player, limit: int = MAX_BLOCKS_PER_PLAYER) -> bool:
    return board.block_count(owner) >= limit


def can_move(board: Board, owner: Player, limit: int = MAX_BLOCKS_PER_PLAYER) -> bool:
    return not is_exhausted(board, owner, limit) and has_valid_move(board, owner)


def check_win(board: Board, owner: Player) -> Optional[List[Coordinate]]:
    """First line of WIN_LENGTH same-owner cells, scanning cells in board order."""
    for x, y in list(board.cells_of(owner)):
        for dx, dy in WIN_DIRECTIONS:
            line = [(x, y)]
            for step in range(1, WIN_LENGTH):
                nx, ny = x + dx * step, y + dy * step
                cell = board.get(nx, ny)
                if cell is None or cell.owner is not owner:
                    break
                line.append((nx, ny))
            if len(line) >= WIN_LENGTH:
                return line
    return None
