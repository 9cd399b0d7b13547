"""
Exceptions raised by the game state layer.

The rule engine itself never raises; these cover requests the game refuses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .pieces import Block
    from .rules import Rejection


class BlockStackError(Exception):
    """Base class for game state errors."""

    pass


class GameOverError(BlockStackError):
    """Raised when a move is submitted after the game has ended."""

    pass


class OutOfTurnError(BlockStackError):
    """Raised when a block arrives for the player not on turn."""

    pass


class IllegalMoveError(BlockStackError):
    """Raised when a received block breaks a placement rule."""

    def __init__(self, block: "Block", rejection: "Rejection") -> None:
        super().__init__(f"illegal block {block.id!r} at ({block.x}, {block.y}): {rejection.name}")
        self.block = block
        self.rejection = rejection
