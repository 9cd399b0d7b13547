"""Game module for Block Stack.

Exports the board model, the rule engine and the game state:
- Board: sparse board snapshot with column queries
- Block, Move, Cell, Player, Orientation: placement values
- drop_position, validate_move, check_win, has_valid_move: rule engine
- generate_moves: legal placement enumeration
- BlockStackGame: turn, win and draw bookkeeping
"""

from .grid import GRID_SIZE, MAX_BLOCKS_PER_PLAYER, WIN_LENGTH, Board, bounds, format_board, height, rebuild
from .pieces import Block, Cell, Move, Orientation, Part, Player
from .rules import (
    Rejection,
    apply_move,
    can_move,
    check_move,
    check_win,
    drop_position,
    has_valid_move,
    is_exhausted,
    validate_move,
)
from .moves import generate_moves
from .errors import BlockStackError, GameOverError, IllegalMoveError, OutOfTurnError
from .core import BlockStackGame, GameConfig, MoveResult

__all__ = [
    "GRID_SIZE",
    "WIN_LENGTH",
    "MAX_BLOCKS_PER_PLAYER",
    "Board",
    "bounds",
    "height",
    "rebuild",
    "format_board",
    "Block",
    "Cell",
    "Move",
    "Orientation",
    "Part",
    "Player",
    "Rejection",
    "apply_move",
    "can_move",
    "check_move",
    "check_win",
    "drop_position",
    "has_valid_move",
    "is_exhausted",
    "validate_move",
    "generate_moves",
    "BlockStackError",
    "GameOverError",
    "IllegalMoveError",
    "OutOfTurnError",
    "BlockStackGame",
    "GameConfig",
    "MoveResult",
]
