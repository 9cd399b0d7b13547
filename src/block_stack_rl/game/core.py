from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import GameOverError, IllegalMoveError, OutOfTurnError
from .grid import MAX_BLOCKS_PER_PLAYER, Board, rebuild
from .moves import generate_moves
from .pieces import Block, Coordinate, Move, Orientation, Player
from .rules import Rejection, can_move, check_move, check_win, drop_position

if TYPE_CHECKING:
    from block_stack_rl.engine import Difficulty

logger = logging.getLogger(__name__)

BlockLike = Union[Block, Mapping[str, Any]]


@dataclass
class GameConfig:
    max_blocks_per_player: int = MAX_BLOCKS_PER_PLAYER
    first_player: Player = Player.WHITE
    # Run received blocks through the rule engine before applying them.
    revalidate_received: bool = True
    random_seed: Optional[int] = None


@dataclass
class MoveResult:
    accepted: bool
    block: Optional[Block] = None
    rejection: Optional[Rejection] = None
    winner: Optional[Player] = None
    winning_cells: Optional[List[Coordinate]] = None
    draw: bool = False
    next_player: Optional[Player] = None


class BlockStackGame:
    """Turn, win and draw bookkeeping around the rule engine."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board()
        self.history: List[Block] = []
        self.current_player = self.config.first_player
        self.winner: Optional[Player] = None
        self.winning_cells: Optional[List[Coordinate]] = None
        self.is_draw = False
        self.reset()

    def reset(self) -> None:
        self.board = Board()
        self.history = []
        self.current_player = self.config.first_player
        self.winner = None
        self.winning_cells = None
        self.is_draw = False

    @property
    def game_over(self) -> bool:
        return self.winner is not None or self.is_draw

    def blocks_placed(self, player: Player) -> int:
        return self.board.block_count(player)

    def blocks_left(self, player: Player) -> int:
        return max(0, self.config.max_blocks_per_player - self.board.block_count(player))

    def can_move(self, player: Player) -> bool:
        return can_move(self.board, player, self.config.max_blocks_per_player)

    def legal_moves(self) -> List[Move]:
        if self.game_over:
            return []
        return generate_moves(self.board, self.current_player, self.config.max_blocks_per_player)

    def preview(self, x: int, orientation: Orientation) -> Tuple[Optional[int], Optional[Rejection]]:
        """Where a block dropped at ``x`` would land and why it would be refused, if it would."""
        y = drop_position(self.board, x, orientation)
        return y, check_move(self.board, x, y, orientation, self.current_player)

    # ---- moves ----
    def place(self, x: int, orientation: Orientation) -> MoveResult:
        """Drop a block for the player on turn."""
        self._ensure_running()
        player = self.current_player
        y, rejection = self.preview(x, orientation)
        if rejection is not None or y is None:
            logger.debug("rejected %s %s at x=%d: %s", player.value, orientation.value, x, rejection)
            return MoveResult(accepted=False, rejection=rejection, next_player=player)
        return self._commit(Block(self._next_id(), x, y, orientation, player))

    def play_ai(
        self, difficulty: Union["Difficulty", str] = "medium", rng: Optional[random.Random] = None
    ) -> MoveResult:
        """Let the search engine move for the player on turn."""
        from block_stack_rl.engine import get_best_move

        self._ensure_running()
        move = get_best_move(
            self.board,
            self.current_player,
            difficulty,
            rng or self.rng,
            max_blocks=self.config.max_blocks_per_player,
        )
        if move is None:
            return MoveResult(accepted=False, next_player=self.current_player)
        return self._commit(move.to_block(self._next_id()))

    def receive(self, block: BlockLike) -> MoveResult:
        """Apply a block computed elsewhere, e.g. by a remote peer."""
        if not isinstance(block, Block):
            block = Block.from_dict(block)
        self._ensure_running()
        if block.owner is not self.current_player:
            raise OutOfTurnError(f"{block.owner.value} moved while {self.current_player.value} is on turn")
        if self.config.revalidate_received:
            rejection = self._check_block(self.board, block)
            if rejection is not None:
                logger.warning("refusing received block %s: %s", block.id, rejection.name)
                raise IllegalMoveError(block, rejection)
        return self._commit(block)

    def sync(self, history: Iterable[BlockLike]) -> None:
        """Replace the game with a full block history and recompute its state."""
        blocks = [b if isinstance(b, Block) else Block.from_dict(b) for b in history]
        if self.config.revalidate_received:
            board = Board()
            for block in blocks:
                rejection = self._check_block(board, block)
                if rejection is not None:
                    logger.warning("refusing history at block %s: %s", block.id, rejection.name)
                    raise IllegalMoveError(block, rejection)
                board = board.place(block)

        self.reset()
        self.board = rebuild(blocks)
        self.history = blocks
        if not blocks:
            return
        mover = blocks[-1].owner
        line = check_win(self.board, mover)
        if line:
            self.winner = mover
            self.winning_cells = line
        else:
            self._resolve_turn(mover)

    def _check_block(self, board: Board, block: Block) -> Optional[Rejection]:
        if drop_position(board, block.x, block.orientation) != block.y:
            return Rejection.NO_DROP
        return check_move(board, block.x, block.y, block.orientation, block.owner)

    def _commit(self, block: Block) -> MoveResult:
        self.board = self.board.place(block)
        self.history.append(block)
        mover = block.owner
        line = check_win(self.board, mover)
        if line:
            self.winner = mover
            self.winning_cells = line
            logger.info("%s wins after %d blocks", mover.value, len(self.history))
        else:
            self._resolve_turn(mover)
        return MoveResult(
            accepted=True,
            block=block,
            winner=self.winner,
            winning_cells=self.winning_cells,
            draw=self.is_draw,
            next_player=None if self.game_over else self.current_player,
        )

    def _resolve_turn(self, mover: Player) -> None:
        opponent = mover.opponent
        if self.can_move(opponent):
            self.current_player = opponent
        elif self.can_move(mover):
            logger.info("%s cannot move; %s plays again", opponent.value, mover.value)
            self.current_player = mover
        else:
            logger.info("no moves left for either player; draw after %d blocks", len(self.history))
            self.is_draw = True

    def _ensure_running(self) -> None:
        if self.game_over:
            raise GameOverError("the game has already ended")

    def _next_id(self) -> str:
        return f"b{len(self.history)}"

    def get_state(self) -> dict:
        return {
            "blocks": [b.to_dict() for b in self.history],
            "current_player": self.current_player.value,
            "winner": self.winner.value if self.winner else None,
            "winning_cells": list(self.winning_cells) if self.winning_cells else None,
            "draw": self.is_draw,
            "blocks_placed": {p.value: self.blocks_placed(p) for p in Player},
        }
